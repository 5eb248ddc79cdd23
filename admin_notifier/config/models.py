"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Tuple

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator

DEFAULT_ADMIN_RECIPIENTS = (
    "admin@medscore.xyz",
    "content@medscore.xyz",
    "support@medscore.xyz",
)


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class EmailConfig(BaseModel):
    """Email transport settings."""

    use_tls: bool = Field(True, description="Use TLS/STARTTLS for secure connection")
    timeout: float = Field(
        30.0, gt=0, le=300, description="Socket timeout for SMTP connections (seconds)"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True, "validate_default": True}


class AppConfig(BaseModel):
    """Root configuration object for the admin notifier."""

    brand_name: str = Field("MedScore", min_length=1, description="Brand shown in mail text")
    site_url: str = Field(
        "https://medscore.xyz", description="Public site root used in admin links"
    )
    currency_symbol: str = Field("₹", description="Prefix for monetary amounts")
    admin_recipients: Tuple[str, ...] = Field(
        DEFAULT_ADMIN_RECIPIENTS,
        min_length=1,
        description="Ordered admin addresses that receive every admin notification",
    )
    email: EmailConfig = Field(default_factory=EmailConfig, description="Email settings")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    model_config = {"frozen": True}

    @field_validator("brand_name")
    @classmethod
    def strip_brand_name(cls, v: str) -> str:
        """Strip whitespace from brand name."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("brand_name cannot be empty")
        return stripped

    @field_validator("site_url")
    @classmethod
    def validate_site_url(cls, v: str) -> str:
        """Require an absolute http(s) URL and drop any trailing slash."""
        stripped = v.strip()
        if not stripped.startswith(("http://", "https://")):
            raise ValueError("site_url must start with http:// or https://")
        return stripped.rstrip("/")

    @field_validator("admin_recipients")
    @classmethod
    def validate_admin_recipients(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        """Validate and normalize every admin address, keeping order."""
        normalized = []
        for address in v:
            try:
                validated = validate_email(address.strip(), check_deliverability=False)
            except EmailNotValidError as e:
                raise ValueError(f"Invalid admin recipient '{address}': {e}") from e
            if validated.normalized in normalized:
                raise ValueError(f"Duplicate admin recipient: {validated.normalized}")
            normalized.append(validated.normalized)
        return tuple(normalized)
