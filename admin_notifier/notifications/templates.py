"""Template rendering for notification emails using Jinja2.

Every message kind has a subject, an HTML and a plain-text template in the
``email_templates`` directory of this package, named after the kind
(``payment_received.subject.j2``, ``payment_received.html.j2``, ...).
HTML templates are auto-escaped, so caller-supplied values cannot inject
markup into admin inboxes.
"""

import functools
import logging
from datetime import datetime
from typing import Any, Dict, Optional, Union
from urllib.parse import quote

from jinja2 import Environment, PackageLoader, TemplateError, select_autoescape

from admin_notifier.config.models import AppConfig
from admin_notifier.utils.timestamps import (
    format_display_date,
    format_display_datetime,
    utc_now,
)

from .models import EmailContent, NotificationTemplateError, NotificationType
from .payloads import PayloadData, build_template_context

logger = logging.getLogger(__name__)

ADMIN_LOGIN_PATH = "/pages/admin-login.html"
ADMIN_RESET_PATH = "/pages/admin-reset-password.html"


class TemplateRenderer:
    """Renders notification emails from the packaged Jinja2 templates.

    Brand name, currency symbol and site URL are fixed per renderer and
    exposed to every template. Loaded templates are cached by Jinja2.
    """

    def __init__(
        self,
        brand_name: str = "MedScore",
        currency_symbol: str = "₹",
        site_url: str = "https://medscore.xyz",
        template_dir: str = "email_templates",
    ):
        self.brand_name = brand_name
        self.currency_symbol = currency_symbol
        self.site_url = site_url.rstrip("/")

        self.env = Environment(
            loader=PackageLoader("admin_notifier.notifications", template_dir),
            autoescape=select_autoescape(enabled_extensions=("html.j2",), default=False),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Compact JSON, payload key order preserved, for the fallback dump
        self.env.policies["json.dumps_kwargs"] = {
            "separators": (",", ":"),
            "ensure_ascii": False,
            "default": str,
        }
        self.env.globals.update(
            brand_name=self.brand_name,
            currency_symbol=self.currency_symbol,
            site_url=self.site_url,
        )

        logger.debug(f"Initialized TemplateRenderer with templates from {template_dir}")

    @classmethod
    def from_config(cls, app_config: AppConfig) -> "TemplateRenderer":
        return cls(
            brand_name=app_config.brand_name,
            currency_symbol=app_config.currency_symbol,
            site_url=app_config.site_url,
        )

    def render(self, name: str, context: Dict[str, Any]) -> EmailContent:
        """Render the subject, HTML and text templates of one message kind.

        Args:
            name: Template base name (e.g. "daily_report")
            context: Template variables

        Returns:
            EmailContent with a single-line subject

        Raises:
            NotificationTemplateError: If a template is missing or fails to render
        """
        try:
            subject = self.env.get_template(f"{name}.subject.j2").render(context)
            html = self.env.get_template(f"{name}.html.j2").render(context)
            text = self.env.get_template(f"{name}.txt.j2").render(context)
        except TemplateError as e:
            error_msg = f"Template rendering failed for '{name}': {e}"
            logger.error(error_msg, exc_info=True)
            raise NotificationTemplateError(error_msg) from e
        except (TypeError, ValueError) as e:
            # tojson on circular or non-string-keyed payloads
            error_msg = f"Template data could not be rendered for '{name}': {e}"
            logger.error(error_msg, exc_info=True)
            raise NotificationTemplateError(error_msg) from e

        return EmailContent(
            subject=" ".join(subject.split()),
            html=html,
            text=text,
        )

    def render_notification(
        self,
        notification_type: Union[NotificationType, str],
        data: PayloadData,
        now: Optional[datetime] = None,
    ) -> EmailContent:
        """Render an admin notification.

        Unknown tags render the DEFAULT dump of the payload. Missing payload
        fields render as empty text.
        """
        resolved = NotificationType.resolve(notification_type)
        now = now or utc_now()

        context = build_template_context(resolved, data)
        context["timestamp"] = format_display_datetime(now)
        context["date"] = format_display_date(now)

        return self.render(resolved.value, context)

    def render_admin_welcome(
        self, admin_email: str, admin_name: str, temp_password: str
    ) -> EmailContent:
        return self.render(
            "admin_welcome",
            {
                "admin_email": admin_email,
                "admin_name": admin_name,
                "temp_password": temp_password,
                "login_url": self.admin_login_url(),
            },
        )

    def render_password_reset(self, admin_email: str, reset_token: str) -> EmailContent:
        # The stated one-hour expiry is enforced by whoever validates the token
        return self.render(
            "password_reset",
            {
                "admin_email": admin_email,
                "reset_url": self.password_reset_url(reset_token),
            },
        )

    def admin_login_url(self) -> str:
        return f"{self.site_url}{ADMIN_LOGIN_PATH}"

    def password_reset_url(self, reset_token: str) -> str:
        return f"{self.site_url}{ADMIN_RESET_PATH}?token={quote(str(reset_token), safe='')}"


@functools.lru_cache(maxsize=1)
def default_renderer() -> TemplateRenderer:
    """Shared renderer built from the default AppConfig."""
    return TemplateRenderer.from_config(AppConfig())


def render(
    notification_type: Union[NotificationType, str],
    data: PayloadData,
    now: Optional[datetime] = None,
) -> EmailContent:
    """Build the subject and bodies for an admin notification.

    Total over every tag: unknown tags fall back to the DEFAULT template and
    absent payload fields render empty, so this never fails for valid
    templates.

    Args:
        notification_type: NotificationType member or raw tag string
        data: Typed payload or structural mapping
        now: Time shown in the body (defaults to the current UTC time)

    Returns:
        EmailContent for the notification
    """
    return default_renderer().render_notification(notification_type, data, now)
