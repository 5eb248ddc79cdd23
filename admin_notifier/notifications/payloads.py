"""Payload models and template context building.

Each notification type has a typed payload carrying exactly the fields its
template shows. Callers may also hand in a plain mapping keyed the way the
web layer names things (``userName``, ``paymentId``); nothing is validated
in that case and absent fields simply render empty.
"""

from typing import Any, Dict, Mapping, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field

from .models import NotificationType

Number = Union[int, float, str]


class NotificationPayload(BaseModel):
    """Base class for typed notification payloads."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class NewUserRegistrationPayload(NotificationPayload):
    name: str
    email: str


class MentorApplicationPayload(NotificationPayload):
    name: str
    email: str
    qualification: str
    experience: Number = Field(..., description="Years of experience")


class PaymentReceivedPayload(NotificationPayload):
    amount: Number
    user_name: str = Field(..., alias="userName")
    service: str
    payment_id: str = Field(..., alias="paymentId")


class SystemErrorPayload(NotificationPayload):
    error: str
    location: str


class DailyReportPayload(NotificationPayload):
    new_users: int = Field(..., alias="newUsers")
    new_mentors: int = Field(..., alias="newMentors")
    revenue: Number
    active_sessions: int = Field(..., alias="activeSessions")


PAYLOAD_MODELS: Dict[NotificationType, Type[NotificationPayload]] = {
    NotificationType.NEW_USER_REGISTRATION: NewUserRegistrationPayload,
    NotificationType.MENTOR_APPLICATION: MentorApplicationPayload,
    NotificationType.PAYMENT_RECEIVED: PaymentReceivedPayload,
    NotificationType.SYSTEM_ERROR: SystemErrorPayload,
    NotificationType.DAILY_REPORT: DailyReportPayload,
}

PayloadData = Union[NotificationPayload, Mapping[str, Any], None]


def payload_as_mapping(data: PayloadData) -> Any:
    """Flatten a typed payload to its wire (alias) keys; pass anything else through."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    return data


def build_template_context(
    notification_type: NotificationType, data: PayloadData
) -> Dict[str, Any]:
    """Build the template variables for one notification.

    For known types the context holds one snake_case key per payload field
    that the caller supplied, looked up by alias first and by field name
    second. Missing fields are left out so the template renders them empty.
    For DEFAULT the whole payload is exposed as ``payload``.

    Args:
        notification_type: Resolved notification type
        data: Typed payload, structural mapping, or None

    Returns:
        Dictionary of template variables
    """
    model = PAYLOAD_MODELS.get(notification_type)

    if model is None:
        return {"payload": payload_as_mapping(data)}

    if isinstance(data, model):
        return data.model_dump()

    source = payload_as_mapping(data)
    if not isinstance(source, Mapping):
        return {}

    context: Dict[str, Any] = {}
    for name, info in model.model_fields.items():
        value = _lookup(source, info.alias, name)
        if value is not None:
            context[name] = value
    return context


def _lookup(source: Mapping[str, Any], alias: Optional[str], name: str) -> Any:
    if alias and alias in source:
        return source[alias]
    return source.get(name)
