"""Unit tests for the SMTP transport.

Tests the SMTPClient for:
- Connection handling (SMTP and SMTP_SSL)
- TLS/STARTTLS negotiation
- Authentication (with and without credentials)
- Multipart message construction
- Conversion of every failure into TransportFailure
- Recipient parsing and sender address building
"""

import smtplib
from unittest.mock import MagicMock, Mock

import pytest

from admin_notifier.config.environment import EnvironmentConfig
from admin_notifier.notifications.models import OutgoingEmail, TransportFailure
from admin_notifier.notifications.smtp_client import (
    SMTPClient,
    build_message,
    build_sender_address,
    parse_recipients,
)


@pytest.fixture
def sample_email():
    return OutgoingEmail(
        sender="MedScore <notify@medscore.xyz>",
        recipient="admin@medscore.xyz",
        subject="Payment Received - MedScore",
        html="<p>Payment</p>",
        text="Payment",
    )


def make_client(port=587, username="notify@medscore.xyz", password="secret", **kwargs):
    return SMTPClient(
        host="smtp.example.com",
        port=port,
        username=username,
        password=password,
        **kwargs,
    )


def test_construction_opens_no_connection():
    factory = Mock()
    ssl_factory = Mock()

    make_client(smtp_factory=factory, smtp_ssl_factory=ssl_factory)

    factory.assert_not_called()
    ssl_factory.assert_not_called()


def test_send_with_starttls(sample_email):
    """Port 587 connects plainly, upgrades with STARTTLS, then logs in."""
    mock_smtp = MagicMock()
    mock_factory = Mock(return_value=mock_smtp)

    client = make_client(smtp_factory=mock_factory, timeout=10)
    client.send(sample_email)

    mock_factory.assert_called_once_with("smtp.example.com", 587, timeout=10)
    mock_smtp.starttls.assert_called_once()
    mock_smtp.login.assert_called_once_with("notify@medscore.xyz", "secret")
    mock_smtp.send_message.assert_called_once()
    mock_smtp.quit.assert_called_once()


def test_send_with_implicit_tls(sample_email):
    """Port 465 uses SMTP_SSL and never calls starttls."""
    mock_smtp_ssl = MagicMock()
    mock_ssl_factory = Mock(return_value=mock_smtp_ssl)
    mock_factory = Mock()

    client = make_client(port=465, smtp_factory=mock_factory, smtp_ssl_factory=mock_ssl_factory)
    client.send(sample_email)

    mock_factory.assert_not_called()
    args, kwargs = mock_ssl_factory.call_args
    assert args == ("smtp.example.com", 465)
    assert "context" in kwargs
    mock_smtp_ssl.starttls.assert_not_called()
    mock_smtp_ssl.login.assert_called_once()
    mock_smtp_ssl.quit.assert_called_once()


def test_send_without_tls_or_auth(sample_email):
    mock_smtp = MagicMock()

    client = make_client(
        port=25,
        username=None,
        password=None,
        use_tls=False,
        smtp_factory=Mock(return_value=mock_smtp),
    )
    client.send(sample_email)

    mock_smtp.starttls.assert_not_called()
    mock_smtp.login.assert_not_called()
    mock_smtp.send_message.assert_called_once()


def test_sent_message_headers_and_parts(sample_email):
    mock_smtp = MagicMock()

    make_client(smtp_factory=Mock(return_value=mock_smtp)).send(sample_email)

    message = mock_smtp.send_message.call_args[0][0]
    assert message["To"] == "admin@medscore.xyz"
    assert message["From"] == "MedScore <notify@medscore.xyz>"
    assert message["Subject"] == "Payment Received - MedScore"
    assert message.get_content_type() == "multipart/alternative"


def test_build_message_has_text_and_html_parts(sample_email):
    message = build_message(sample_email)

    text_part = message.get_body(preferencelist=("plain",))
    html_part = message.get_body(preferencelist=("html",))
    assert text_part.get_content().strip() == "Payment"
    assert html_part.get_content().strip() == "<p>Payment</p>"


@pytest.mark.parametrize(
    "error",
    [
        smtplib.SMTPAuthenticationError(535, b"Bad credentials"),
        smtplib.SMTPRecipientsRefused({"admin@medscore.xyz": (550, b"No such user")}),
        ConnectionRefusedError("refused"),
        RuntimeError("unexpected"),
    ],
)
def test_failures_become_transport_failure(sample_email, error):
    mock_smtp = MagicMock()
    mock_smtp.send_message.side_effect = error

    client = make_client(smtp_factory=Mock(return_value=mock_smtp))

    with pytest.raises(TransportFailure) as exc_info:
        client.send(sample_email)

    assert exc_info.value.__cause__ is error
    mock_smtp.quit.assert_called_once()


def test_connection_failure_becomes_transport_failure(sample_email):
    client = make_client(smtp_factory=Mock(side_effect=OSError("Network unreachable")))

    with pytest.raises(TransportFailure, match="Network error"):
        client.send(sample_email)


def test_quit_error_does_not_mask_success(sample_email):
    mock_smtp = MagicMock()
    mock_smtp.quit.side_effect = smtplib.SMTPServerDisconnected("gone")

    make_client(smtp_factory=Mock(return_value=mock_smtp)).send(sample_email)

    mock_smtp.send_message.assert_called_once()


def test_from_env_copies_settings():
    env_config = EnvironmentConfig(
        mail_user="notify@medscore.xyz",
        mail_pass="secret",
        smtp_host="smtp.example.com",
        smtp_port=2525,
    )

    client = SMTPClient.from_env(env_config, use_tls=False, timeout=5)

    assert client.host == "smtp.example.com"
    assert client.port == 2525
    assert client.username == "notify@medscore.xyz"
    assert client.password == "secret"
    assert client.use_tls is False
    assert client.timeout == 5


def test_parse_recipients_normalizes_and_skips_blanks():
    assert parse_recipients(" a@example.com , ,b@example.com") == [
        "a@example.com",
        "b@example.com",
    ]


def test_parse_recipients_rejects_invalid_address():
    with pytest.raises(ValueError, match="Invalid email address"):
        parse_recipients("not-an-email")


def test_parse_recipients_rejects_empty_string():
    with pytest.raises(ValueError, match="No valid email addresses"):
        parse_recipients(" , ")


def test_build_sender_address_with_user():
    env_config = EnvironmentConfig(mail_user="notify@medscore.xyz", mail_pass="x")
    assert build_sender_address(env_config) == "MedScore <notify@medscore.xyz>"


def test_build_sender_address_falls_back_to_noreply():
    env_config = EnvironmentConfig(
        mail_user=None, mail_pass=None, smtp_host="mail.example.com", smtp_sender_name="Alerts"
    )
    assert build_sender_address(env_config) == "Alerts <noreply@mail.example.com>"


def test_build_sender_address_uses_default_name_when_unset():
    env_config = EnvironmentConfig(mail_user="notify@acme.example.com", mail_pass="x")
    assert build_sender_address(env_config, default_name="Acme") == "Acme <notify@acme.example.com>"


def test_sender_name_variable_beats_default_name():
    env_config = EnvironmentConfig(
        mail_user="notify@acme.example.com", mail_pass="x", smtp_sender_name="Alerts"
    )
    assert build_sender_address(env_config, default_name="Acme") == "Alerts <notify@acme.example.com>"


@pytest.mark.parametrize(
    "field,value",
    [
        ("recipient", "a@x.com\nBcc: evil@x.com"),
        ("subject", "Hello\r\nBcc: evil@x.com"),
    ],
)
def test_header_injection_becomes_transport_failure(sample_email, field, value):
    mock_smtp = MagicMock()
    client = make_client(smtp_factory=Mock(return_value=mock_smtp))
    email = OutgoingEmail(
        **{
            "sender": sample_email.sender,
            "recipient": sample_email.recipient,
            "subject": sample_email.subject,
            "html": sample_email.html,
            "text": sample_email.text,
            field: value,
        }
    )

    with pytest.raises(TransportFailure, match="Invalid message headers"):
        client.send(email)

    mock_smtp.send_message.assert_not_called()
