"""Data models and exceptions for the notification dispatcher.

This module defines the notification type tags, the content and message
value objects, the per-send result types, and the exception hierarchy
used throughout the notification pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class NotificationTemplateError(NotificationError):
    """Raised when template rendering fails due to a misconfigured template set."""

    pass


class TransportFailure(NotificationError):
    """Raised when the mail transport could not accept or deliver a message.

    Covers authentication, network, quota and address rejections alike.
    """

    pass


class NotificationType(str, Enum):
    """Closed set of admin notification tags.

    DEFAULT is the fallback for any tag outside the set.
    """

    NEW_USER_REGISTRATION = "new_user_registration"
    MENTOR_APPLICATION = "mentor_application"
    PAYMENT_RECEIVED = "payment_received"
    SYSTEM_ERROR = "system_error"
    DAILY_REPORT = "daily_report"
    DEFAULT = "default"

    @classmethod
    def resolve(cls, tag: Union["NotificationType", str, None]) -> "NotificationType":
        """Map a tag to a member, falling back to DEFAULT for unknown tags."""
        if isinstance(tag, cls):
            return tag
        try:
            return cls(tag)
        except ValueError:
            return cls.DEFAULT


@dataclass(frozen=True)
class EmailContent:
    """Rendered subject and bodies for one notification."""

    subject: str
    html: str
    text: str = ""


@dataclass(frozen=True)
class OutgoingEmail:
    """A single message handed to the transport."""

    sender: str
    recipient: str
    subject: str
    html: str
    text: str = ""

    @classmethod
    def from_content(cls, sender: str, recipient: str, content: EmailContent) -> "OutgoingEmail":
        return cls(
            sender=sender,
            recipient=recipient,
            subject=content.subject,
            html=content.html,
            text=content.text,
        )


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one send attempt.

    Either ``sent`` is True, or ``error`` holds the failure message.

    Attributes:
        recipient: Address the message was addressed to
        subject: Subject line of the message
        sent: Whether the transport accepted the message
        error: Failure description when not sent
    """

    recipient: str
    subject: str
    sent: bool
    error: Optional[str] = None

    @classmethod
    def success(cls, recipient: str, subject: str) -> "DeliveryResult":
        return cls(recipient=recipient, subject=subject, sent=True)

    @classmethod
    def failure(cls, recipient: str, subject: str, error: Exception) -> "DeliveryResult":
        return cls(recipient=recipient, subject=subject, sent=False, error=str(error))

    def is_success(self) -> bool:
        return self.sent


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of an admin fan-out: one DeliveryResult per recipient, in order."""

    notification_type: NotificationType
    deliveries: Tuple[DeliveryResult, ...] = field(default_factory=tuple)

    @property
    def sent_count(self) -> int:
        return sum(1 for d in self.deliveries if d.sent)

    @property
    def failed_count(self) -> int:
        return sum(1 for d in self.deliveries if not d.sent)

    def is_success(self) -> bool:
        """True when every recipient was sent to."""
        return bool(self.deliveries) and self.failed_count == 0
