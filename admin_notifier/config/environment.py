"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

DEFAULT_SMTP_HOST = "smtp.gmail.com"
DEFAULT_SMTP_PORT = 465
DEFAULT_SENDER_NAME = "MedScore"


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        mail_user: Optional[str],
        mail_pass: Optional[str],
        smtp_host: Optional[str] = None,
        smtp_port: Optional[int] = None,
        smtp_sender_name: Optional[str] = None,
        log_level: Optional[str] = None,
        site_url: Optional[str] = None,
    ):
        """Initialize environment configuration."""
        self.mail_user = mail_user
        self.mail_pass = mail_pass
        self.smtp_host = smtp_host or DEFAULT_SMTP_HOST
        self.smtp_port = smtp_port or DEFAULT_SMTP_PORT
        self.smtp_sender_name = smtp_sender_name
        self.log_level = log_level
        self.site_url = site_url


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Sender credentials (never validated here, a wrong or missing value
    only shows up as a transport failure on the first send):
    - MAIL_USER: Sender account address (falls back to GMAIL_USER)
    - MAIL_PASS: Sender account secret (falls back to GMAIL_PASS)

    Optional environment variables:
    - SMTP_HOST: SMTP server hostname (default: smtp.gmail.com)
    - SMTP_PORT: SMTP server port, 1-65535 (default: 465)
    - SMTP_SENDER_NAME: Display name for the sender
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - SITE_URL: Public site root used in admin links

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If an optional variable is set to an invalid value
    """
    errors = []

    mail_user = os.getenv("MAIL_USER") or os.getenv("GMAIL_USER")
    mail_pass = os.getenv("MAIL_PASS") or os.getenv("GMAIL_PASS")

    smtp_host = os.getenv("SMTP_HOST")
    smtp_port_str = os.getenv("SMTP_PORT")
    smtp_sender_name = os.getenv("SMTP_SENDER_NAME")
    log_level = os.getenv("LOG_LEVEL")
    site_url = os.getenv("SITE_URL")

    smtp_port = None
    if smtp_port_str:
        try:
            smtp_port = int(smtp_port_str)
            if smtp_port < 1 or smtp_port > 65535:
                errors.append(
                    f"Invalid SMTP_PORT: {smtp_port}. Must be between 1 and 65535."
                )
        except ValueError:
            errors.append(
                f"Invalid SMTP_PORT: '{smtp_port_str}'. Must be a valid integer."
            )

    if log_level:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if log_level.upper() not in valid_levels:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(valid_levels)}"
            )

    if site_url and not site_url.startswith(("http://", "https://")):
        errors.append(f"Invalid SITE_URL: '{site_url}'. Must start with http:// or https://")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your credentials",
                "Verify SMTP_PORT is a number between 1 and 65535",
            ],
        )

    return EnvironmentConfig(
        mail_user=mail_user,
        mail_pass=mail_pass,
        smtp_host=smtp_host,
        smtp_port=smtp_port,
        smtp_sender_name=smtp_sender_name,
        log_level=log_level,
        site_url=site_url.rstrip("/") if site_url else None,
    )
