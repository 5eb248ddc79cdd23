"""Configuration management module for the admin notifier."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config
from .models import (
    DEFAULT_ADMIN_RECIPIENTS,
    AppConfig,
    EmailConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
)

__all__ = [
    # Main loader functions
    "load_config",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "EmailConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    "DEFAULT_ADMIN_RECIPIENTS",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
