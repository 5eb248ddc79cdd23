"""Notification dispatcher for admin and account emails.

This module provides the NotificationDispatcher class that turns a
notification request into one or more outbound sends: resolving the
recipients, rendering the content, and handing each message to the
transport. Delivery is best-effort: failures are logged and reported in
the returned result, never raised.
"""

import asyncio
import logging
from typing import Iterable, Optional, Protocol, Tuple, Union

from admin_notifier.config.environment import EnvironmentConfig
from admin_notifier.config.models import DEFAULT_ADMIN_RECIPIENTS, AppConfig
from admin_notifier.logging import get_logger
from admin_notifier.logging.context import log_context

from .models import (
    DeliveryResult,
    DispatchResult,
    EmailContent,
    NotificationError,
    NotificationType,
    OutgoingEmail,
)
from .payloads import PayloadData
from .smtp_client import SMTPClient, build_sender_address
from .templates import TemplateRenderer

logger = get_logger(__name__, component="notification")


class MailTransport(Protocol):
    """Anything that can deliver one OutgoingEmail or raise TransportFailure."""

    def send(self, email: OutgoingEmail) -> None: ...


class NotificationDispatcher:
    """Dispatcher for admin notifications and admin account emails.

    The transport is injected; the dispatcher holds no other mutable state,
    so concurrent operations on one instance need no locking. Sends within
    one operation run one after another, each in a worker thread so the
    event loop stays free while smtplib blocks.
    """

    def __init__(
        self,
        transport: MailTransport,
        sender: str,
        admin_recipients: Iterable[str] = DEFAULT_ADMIN_RECIPIENTS,
        renderer: Optional[TemplateRenderer] = None,
        logger_instance: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
    ):
        """Initialize notification dispatcher.

        Args:
            transport: Mail transport used for every send
            sender: 'From' address for every message
            admin_recipients: Ordered admin addresses for notify_admins
            renderer: Template renderer (creates default if None)
            logger_instance: Logger instance (uses module logger if None)
        """
        self.transport = transport
        self.sender = sender
        self.admin_recipients: Tuple[str, ...] = tuple(admin_recipients)
        self.renderer = renderer or TemplateRenderer()
        self.logger = logger_instance or logger

    @classmethod
    def from_config(
        cls, env_config: EnvironmentConfig, app_config: Optional[AppConfig] = None
    ) -> "NotificationDispatcher":
        """Build a dispatcher with an SMTP transport from loaded configuration."""
        app_config = app_config or AppConfig()
        transport = SMTPClient.from_env(
            env_config,
            use_tls=app_config.email.use_tls,
            timeout=app_config.email.timeout,
        )
        return cls(
            transport=transport,
            sender=build_sender_address(env_config, default_name=app_config.brand_name),
            admin_recipients=app_config.admin_recipients,
            renderer=TemplateRenderer.from_config(app_config),
        )

    async def notify_admins(
        self,
        notification_type: Union[NotificationType, str],
        data: PayloadData,
    ) -> DispatchResult:
        """Send one notification to every admin recipient.

        Each recipient has its own failure boundary: a failed send is logged
        and the remaining admins are still attempted.

        Args:
            notification_type: NotificationType member or raw tag
            data: Typed payload or structural mapping

        Returns:
            DispatchResult with one DeliveryResult per admin, in list order
        """
        resolved = NotificationType.resolve(notification_type)

        with log_context(operation="notify_admins", notification_type=resolved.value):
            try:
                content = self.renderer.render_notification(resolved, data)
            except NotificationError as e:
                self.logger.error(
                    f"Admin notification could not be rendered: {e}",
                    extra={"event": "notification.render.failure", "error_type": type(e).__name__},
                )
                return DispatchResult(
                    notification_type=resolved,
                    deliveries=tuple(
                        DeliveryResult.failure(r, "", e) for r in self.admin_recipients
                    ),
                )

            deliveries = []
            for recipient in self.admin_recipients:
                deliveries.append(await self._deliver(recipient, content))

            result = DispatchResult(notification_type=resolved, deliveries=tuple(deliveries))

            self.logger.info(
                f"Admin notification sent for: {resolved.value} "
                f"({result.sent_count} sent, {result.failed_count} failed)",
                extra={
                    "event": "notification.dispatch.complete",
                    "sent": result.sent_count,
                    "failed": result.failed_count,
                },
            )
            return result

    async def send_admin_welcome(
        self, admin_email: str, admin_name: str, temp_password: str
    ) -> DeliveryResult:
        """Send the welcome email with login details to a new admin."""
        with log_context(operation="send_admin_welcome"):
            try:
                content = self.renderer.render_admin_welcome(
                    admin_email, admin_name, temp_password
                )
            except NotificationError as e:
                return self._render_failed(admin_email, e)
            return await self._deliver(admin_email, content)

    async def send_password_reset(self, admin_email: str, reset_token: str) -> DeliveryResult:
        """Send a password reset link to an admin.

        The mail states a one-hour validity; the token's expiry is enforced
        by whatever validates it, not here.
        """
        with log_context(operation="send_password_reset"):
            try:
                content = self.renderer.render_password_reset(admin_email, reset_token)
            except NotificationError as e:
                return self._render_failed(admin_email, e)
            return await self._deliver(admin_email, content)

    async def _deliver(self, recipient: str, content: EmailContent) -> DeliveryResult:
        """Hand one message to the transport, converting failure into a result."""
        email = OutgoingEmail.from_content(self.sender, recipient, content)

        with log_context(recipient=recipient):
            try:
                await asyncio.to_thread(self.transport.send, email)
            except NotificationError as e:
                self.logger.error(
                    f"Email delivery to {recipient} failed: {e}",
                    extra={
                        "event": "notification.send.failure",
                        "error_type": type(e).__name__,
                    },
                )
                return DeliveryResult.failure(recipient, content.subject, e)
            except Exception as e:
                # Injected transports may not wrap their own errors
                self.logger.error(
                    f"Unexpected error delivering email to {recipient}: {e}",
                    exc_info=True,
                    extra={
                        "event": "notification.send.failure",
                        "error_type": type(e).__name__,
                    },
                )
                return DeliveryResult.failure(recipient, content.subject, e)

            self.logger.debug(
                f"Email '{content.subject}' delivered to {recipient}",
                extra={"event": "notification.send.success"},
            )
            return DeliveryResult.success(recipient, content.subject)

    def _render_failed(self, recipient: str, error: NotificationError) -> DeliveryResult:
        self.logger.error(
            f"Email to {recipient} could not be rendered: {error}",
            extra={"event": "notification.render.failure", "error_type": type(error).__name__},
        )
        return DeliveryResult.failure(recipient, "", error)
