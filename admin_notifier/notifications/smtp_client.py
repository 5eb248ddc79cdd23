"""SMTP transport for notification delivery.

This module provides a thin wrapper around Python's smtplib with support
for TLS/SSL, authentication, and proper connection lifecycle management.
Constructing a client never touches the network; each send opens and
closes its own connection.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr
from typing import Callable, List, Optional

from email_validator import EmailNotValidError, validate_email

from admin_notifier.config.environment import DEFAULT_SENDER_NAME, EnvironmentConfig

from .models import OutgoingEmail, TransportFailure

logger = logging.getLogger(__name__)


class SMTPClient:
    """Wrapper around smtplib for sending notification emails.

    Handles connection lifecycle, TLS/SSL negotiation and authentication.
    Every failure surfaces as TransportFailure. The factories can be
    swapped for test doubles.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 30.0,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
    ):
        """Initialize SMTP client.

        Args:
            host: SMTP server hostname
            port: SMTP server port (465 selects implicit TLS)
            username: Login name, usually the sender address
            password: Login secret
            use_tls: Upgrade plain connections with STARTTLS
            timeout: Socket timeout in seconds
            smtp_factory: Factory for SMTP instances (for mocking)
            smtp_ssl_factory: Factory for SMTP_SSL instances (for mocking)
        """
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL

    @classmethod
    def from_env(
        cls, env_config: EnvironmentConfig, use_tls: bool = True, timeout: float = 30.0
    ) -> "SMTPClient":
        return cls(
            host=env_config.smtp_host,
            port=env_config.smtp_port,
            username=env_config.mail_user,
            password=env_config.mail_pass,
            use_tls=use_tls,
            timeout=timeout,
        )

    def send(self, email: OutgoingEmail) -> None:
        """Send one email.

        Args:
            email: Sender, recipient, subject and bodies

        Raises:
            TransportFailure: If the message could not be handed to the server
        """
        try:
            message = build_message(email)
        except ValueError as e:
            raise TransportFailure(f"Invalid message headers: {e}") from e

        smtp = None
        try:
            if self.port == 465:
                logger.debug(f"Connecting to {self.host}:{self.port} with implicit TLS")
                context = ssl.create_default_context()
                smtp = self.smtp_ssl_factory(
                    self.host, self.port, timeout=self.timeout, context=context
                )
            else:
                logger.debug(f"Connecting to {self.host}:{self.port}")
                smtp = self.smtp_factory(self.host, self.port, timeout=self.timeout)

                if self.use_tls:
                    logger.debug("Upgrading connection with STARTTLS")
                    context = ssl.create_default_context()
                    smtp.starttls(context=context)

            if self.username and self.password:
                logger.debug(f"Authenticating as {self.username}")
                smtp.login(self.username, self.password)
            else:
                logger.debug("No authentication credentials provided, proceeding without auth")

            smtp.send_message(message)
            logger.debug(f"Message accepted for {email.recipient}")

        except smtplib.SMTPException as e:
            raise TransportFailure(f"SMTP error during message delivery: {e}") from e
        except OSError as e:
            raise TransportFailure(f"Network error during SMTP connection: {e}") from e
        except Exception as e:
            raise TransportFailure(f"Unexpected error during SMTP delivery: {e}") from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except Exception as e:
                    logger.debug(f"Error closing SMTP connection: {e}")


def build_message(email: OutgoingEmail) -> EmailMessage:
    """Build a multipart/alternative message with a text and an HTML part."""
    message = EmailMessage()
    message["Subject"] = email.subject
    message["From"] = email.sender
    message["To"] = email.recipient

    message.set_content(email.text or email.subject)
    message.add_alternative(email.html, subtype="html")

    return message


def parse_recipients(recipient_string: str) -> List[str]:
    """Parse and validate comma-separated email addresses.

    Args:
        recipient_string: Comma-separated email addresses

    Returns:
        List of validated email addresses

    Raises:
        ValueError: If any email address is invalid or none are given
    """
    recipients = []

    for address in (part.strip() for part in recipient_string.split(",")):
        if not address:
            continue

        try:
            validated = validate_email(address, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email address: '{address}' - {e}") from e
        recipients.append(validated.normalized)

    if not recipients:
        raise ValueError("No valid email addresses found")

    return recipients


def build_sender_address(
    env_config: EnvironmentConfig, default_name: str = DEFAULT_SENDER_NAME
) -> str:
    """Build the 'From' address for outgoing emails.

    Uses SMTP_SENDER_NAME (or default_name, normally the configured brand)
    with MAIL_USER if available, otherwise falls back to a noreply address
    at the SMTP host.

    Returns:
        Formatted sender address (e.g., "MedScore <notify@medscore.xyz>")
    """
    sender_name = env_config.smtp_sender_name or default_name
    sender_email = env_config.mail_user or f"noreply@{env_config.smtp_host}"
    return formataddr((sender_name, sender_email))
