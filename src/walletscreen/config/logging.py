"""Logging configuration using structlog.

Bot API URLs embed the bot token (``/bot<token>/sendMessage``) and httpx
puts the URL into its error strings, so every event passes through
``redact_bot_token`` before rendering.
"""

import logging
import re
import sys
from typing import Any

import structlog

from walletscreen.config.settings import Settings, get_settings

_BOT_TOKEN = re.compile(r"bot\d+:[A-Za-z0-9_-]+")
REDACTED_TOKEN = "bot<redacted>"


def _redact(value: Any) -> Any:
    if isinstance(value, str):
        return _BOT_TOKEN.sub(REDACTED_TOKEN, value)
    return value


def redact_bot_token(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor masking Telegram bot tokens in string values."""
    return {key: _redact(value) for key, value in event_dict.items()}


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog for the application.

    Args:
        settings: Settings to read ``debug`` and ``log_level`` from
            (default: ``get_settings()``).
    """
    settings = settings or get_settings()
    log_level = getattr(logging, settings.log_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_bot_token,
            # Pretty print in debug, JSON otherwise
            structlog.dev.ConsoleRenderer()
            if settings.debug
            else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    # httpx logs each request URL, token included, at INFO
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))
