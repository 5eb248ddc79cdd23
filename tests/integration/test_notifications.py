"""Integration tests for the notification pipeline.

Drives the dispatcher built from configuration through real rendering and
the real SMTPClient, with only the smtplib connection classes mocked.
"""

import asyncio
import smtplib
from unittest.mock import MagicMock, patch

import pytest

from admin_notifier.config.loader import load_config
from admin_notifier.notifications import NotificationDispatcher, NotificationType
from admin_notifier.notifications.payloads import PaymentReceivedPayload


@pytest.fixture
def smtp_ssl():
    """Patch the implicit-TLS connection class used for port 465."""
    connection = MagicMock()
    with patch(
        "admin_notifier.notifications.smtp_client.smtplib.SMTP_SSL",
        return_value=connection,
    ) as factory:
        yield factory, connection


@pytest.fixture
def dispatcher(clean_env, tmp_path):
    clean_env.setenv("MAIL_USER", "notify@medscore.xyz")
    clean_env.setenv("MAIL_PASS", "app-password")
    clean_env.chdir(tmp_path)

    def build():
        app_config, env_config = load_config()
        return NotificationDispatcher.from_config(env_config, app_config)

    return build


def sent_messages(connection):
    return [c.args[0] for c in connection.send_message.call_args_list]


def test_payment_notification_reaches_every_admin(dispatcher, smtp_ssl):
    factory, connection = smtp_ssl

    result = asyncio.run(
        dispatcher().notify_admins(
            NotificationType.PAYMENT_RECEIVED,
            PaymentReceivedPayload(
                amount=499, user_name="Ann", service="Mentorship", payment_id="pay_42"
            ),
        )
    )

    assert result.is_success()
    assert factory.call_count == 3
    assert connection.login.call_count == 3
    connection.login.assert_called_with("notify@medscore.xyz", "app-password")

    messages = sent_messages(connection)
    assert [m["To"] for m in messages] == [
        "admin@medscore.xyz",
        "content@medscore.xyz",
        "support@medscore.xyz",
    ]
    html = messages[0].get_body(preferencelist=("html",)).get_content()
    assert "₹499" in html
    assert "pay_42" in html
    assert messages[0]["From"] == "MedScore <notify@medscore.xyz>"


def test_rejected_admin_does_not_block_others(dispatcher, smtp_ssl):
    _, connection = smtp_ssl
    connection.send_message.side_effect = [
        smtplib.SMTPRecipientsRefused({"admin@medscore.xyz": (550, b"No such user")}),
        None,
        None,
    ]

    result = asyncio.run(dispatcher().notify_admins("system_error", {"error": "boom"}))

    assert [d.sent for d in result.deliveries] == [False, True, True]
    assert connection.quit.call_count == 3


def test_password_reset_uses_configured_site(dispatcher, smtp_ssl, clean_env):
    _, connection = smtp_ssl
    clean_env.setenv("SITE_URL", "https://staging.medscore.xyz")

    result = asyncio.run(dispatcher().send_password_reset("a@x.com", "TOKEN123"))

    assert result.is_success()
    [message] = sent_messages(connection)
    html = message.get_body(preferencelist=("html",)).get_content()
    assert "https://staging.medscore.xyz/pages/admin-reset-password.html?token=TOKEN123" in html


def test_authentication_failure_is_absorbed(dispatcher, smtp_ssl):
    _, connection = smtp_ssl
    connection.login.side_effect = smtplib.SMTPAuthenticationError(535, b"Bad credentials")

    result = asyncio.run(dispatcher().send_admin_welcome("a@x.com", "Ann", "tmp123"))

    assert result.sent is False
    assert "SMTP error" in result.error
