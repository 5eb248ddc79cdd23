"""Command-line entry point for sending or previewing admin notifications."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from admin_notifier.config.environment import EnvironmentConfig
from admin_notifier.config.exceptions import ConfigurationError
from admin_notifier.config.loader import load_config
from admin_notifier.config.models import AppConfig
from admin_notifier.logging import get_logger
from admin_notifier.logging.config import configure_logging
from admin_notifier.notifications.models import EmailContent, NotificationType
from admin_notifier.notifications.service import NotificationDispatcher
from admin_notifier.notifications.smtp_client import parse_recipients
from admin_notifier.notifications.templates import TemplateRenderer

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_SEND_FAILED = 1
EXIT_CONFIG_ERROR = 2


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="admin-notifier",
        description="Send or preview MedScore admin notification emails",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Print the rendered email instead of sending it",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    notify = commands.add_parser("notify", help="Notify every admin recipient")
    notify.add_argument(
        "type",
        help=f"Notification type ({', '.join(t.value for t in NotificationType)})",
    )
    notify.add_argument(
        "--data",
        default="{}",
        help="Payload as a JSON object, e.g. '{\"name\": \"Ann\", \"email\": \"a@x.com\"}'",
    )

    welcome = commands.add_parser("welcome", help="Send the welcome email to a new admin")
    welcome.add_argument("email")
    welcome.add_argument("name")
    welcome.add_argument("password", help="Temporary password")

    reset = commands.add_parser("reset", help="Send a password reset link to an admin")
    reset.add_argument("email")
    reset.add_argument("token", help="Reset token to embed in the link")

    return parser


def render_preview(renderer: TemplateRenderer, args: argparse.Namespace) -> EmailContent:
    if args.command == "notify":
        return renderer.render_notification(args.type, _parse_payload(args.data))
    if args.command == "welcome":
        return renderer.render_admin_welcome(args.email, args.name, args.password)
    return renderer.render_password_reset(args.email, args.token)


async def dispatch(dispatcher: NotificationDispatcher, args: argparse.Namespace) -> bool:
    """Run the selected operation; True when every send succeeded."""
    if args.command == "notify":
        result = await dispatcher.notify_admins(args.type, _parse_payload(args.data))
        return result.is_success()
    if args.command == "welcome":
        result = await dispatcher.send_admin_welcome(args.email, args.name, args.password)
        return result.is_success()
    result = await dispatcher.send_password_reset(args.email, args.token)
    return result.is_success()


def _parse_payload(raw: str) -> dict:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid --data payload: {e}",
            suggestions=["Pass the payload as a JSON object"],
        )
    if not isinstance(payload, dict):
        raise ConfigurationError(
            "Invalid --data payload: expected a JSON object",
            suggestions=["Wrap the fields in {...}"],
        )
    return payload


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the admin notifier CLI.

    Returns:
        Exit code: 0 when sent (or previewed), 1 when a send failed,
        2 on configuration or argument errors.
    """
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=os.environ.get("ENVIRONMENT", "local"),
        )

        if args.command in ("welcome", "reset"):
            try:
                args.email = parse_recipients(args.email)[0]
            except ValueError as e:
                raise ConfigurationError(f"Invalid recipient: {e}")

        if args.preview:
            content = render_preview(TemplateRenderer.from_config(app_config), args)
            print(f"Subject: {content.subject}")
            print()
            print(content.text)
            return EXIT_OK

        dispatcher = NotificationDispatcher.from_config(env_config, app_config)
        logger.info(
            f"Dispatching '{args.command}'",
            extra={"event": "cli.dispatch.starting", "command": args.command},
        )
        ok = asyncio.run(dispatch(dispatcher, args))
        return EXIT_OK if ok else EXIT_SEND_FAILED

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR


if __name__ == "__main__":
    sys.exit(main())
