"""Admin notification emails.

This module provides the complete notification pipeline:
- NotificationDispatcher: notify_admins, send_admin_welcome, send_password_reset
- render: content builder from a notification type and payload
- TemplateRenderer: Jinja2-based email template rendering
- SMTPClient: SMTP transport with TLS/SSL support
- Typed payloads for each notification type
"""

from .models import (
    DeliveryResult,
    DispatchResult,
    EmailContent,
    NotificationError,
    NotificationTemplateError,
    NotificationType,
    OutgoingEmail,
    TransportFailure,
)
from .payloads import (
    DailyReportPayload,
    MentorApplicationPayload,
    NewUserRegistrationPayload,
    NotificationPayload,
    PaymentReceivedPayload,
    SystemErrorPayload,
    build_template_context,
)
from .service import MailTransport, NotificationDispatcher
from .smtp_client import SMTPClient, build_message, build_sender_address, parse_recipients
from .templates import TemplateRenderer, render

__all__ = [
    # Main service
    "NotificationDispatcher",
    "MailTransport",
    "render",
    # Models and results
    "NotificationType",
    "EmailContent",
    "OutgoingEmail",
    "DeliveryResult",
    "DispatchResult",
    # Payloads
    "NotificationPayload",
    "NewUserRegistrationPayload",
    "MentorApplicationPayload",
    "PaymentReceivedPayload",
    "SystemErrorPayload",
    "DailyReportPayload",
    "build_template_context",
    # Exceptions
    "NotificationError",
    "NotificationTemplateError",
    "TransportFailure",
    # Components
    "TemplateRenderer",
    "SMTPClient",
    # Utilities
    "build_message",
    "build_sender_address",
    "parse_recipients",
]
