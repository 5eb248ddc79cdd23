"""Mail transport double for dispatcher tests."""

from typing import Iterable, List, Optional

from admin_notifier.notifications.models import OutgoingEmail, TransportFailure


class RecordingTransport:
    """Transport double that records every attempt and fails on demand.

    Attributes:
        attempted: Recipients in the order sends were attempted
        sent: Messages that were accepted
    """

    def __init__(self, fail_for: Iterable[str] = (), error: Optional[Exception] = None):
        self.fail_for = set(fail_for)
        self.error = error
        self.attempted: List[str] = []
        self.sent: List[OutgoingEmail] = []

    def send(self, email: OutgoingEmail) -> None:
        self.attempted.append(email.recipient)
        if email.recipient in self.fail_for:
            raise self.error or TransportFailure(f"Mailbox unavailable: {email.recipient}")
        self.sent.append(email)
