"""Structured logging configuration using structlog.

Development runs get pretty-printed console output, production runs one
JSON object per line. Every line carries the bot's service fields (the
deployment id and version) and, while a command runs, the command context
bound by ``bind_command_context``.

Usage:
    from rapibot.core.logging import get_logger, configure_logging

    # At application startup
    configure_logging(development=True)  # or False for production
    set_service_fields(deployment_id=bot.uptime.deployment_id, version="1.0.0")

    # In modules
    logger = get_logger(__name__)
    logger.info("media_picked", guild_id="123", path="commands/booba/")
"""

import logging
import sys
from collections.abc import MutableMapping
from os import getenv
from typing import Any, cast
from uuid import uuid4

import structlog
from structlog.types import EventDict, Processor

# Chatty third-party loggers that are capped at WARNING
THIRD_PARTY_LOGGERS: tuple[str, ...] = (
    "discord",
    "discord.http",
    "discord.gateway",
    "aiohttp.access",
    "google",
    "urllib3",
)

_service_fields: dict[str, Any] = {}


def set_service_fields(**fields: Any) -> None:
    """Set process-wide fields stamped on every log line.

    Unlike context variables these are not cleared between commands.
    Fields bound on the line or in the context take precedence.
    """
    _service_fields.update(fields)


def add_service_fields(
    _logger: Any, _method_name: str, event_dict: EventDict
) -> MutableMapping[str, Any]:
    for key, value in _service_fields.items():
        event_dict.setdefault(key, value)
    return event_dict


def configure_logging(
    development: bool | None = None,
    log_level: str | None = None,
) -> None:
    """Configure structured logging for the bot.

    Args:
        development: If True, use pretty-printed output. If False, use JSON.
                    If None, reads from ENVIRONMENT env var (default: development).
        log_level: Log level string (DEBUG, INFO, WARNING, ERROR).
                  If None, reads from LOG_LEVEL env var (default: INFO).
    """
    if development is None:
        env = getenv("ENVIRONMENT", "development").lower()
        development = env != "production"

    if log_level is None:
        log_level = getenv("LOG_LEVEL", "INFO").upper()

    numeric_level = getattr(logging, log_level, logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_fields,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if development:
        processors: list[Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # force=True replaces handlers installed by discord.py's own setup
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
        force=True,
    )
    logging.getLogger().setLevel(numeric_level)

    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name, typically __name__ of the calling module.

    Returns:
        A bound structlog logger instance.
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


def bind_command_context(
    command: str,
    user_id: int | str,
    guild_id: int | str | None,
    channel_id: int | str | None,
) -> str:
    """Start a fresh logging context for one command invocation.

    Slash commands and keyword chat commands both go through here, so their
    log lines share the same keys.

    Returns:
        The 8-character correlation id bound for this invocation.

    Example:
        bind_command_context("lucky", user_id=456, guild_id=42, channel_id=7)
        logger.info("command_started")  # carries correlation_id, command, ids
    """
    correlation_id = uuid4().hex[:8]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        correlation_id=correlation_id,
        command=command,
        user_id=user_id,
        guild_id=guild_id,
        channel_id=channel_id,
    )
    return correlation_id


def clear_contextvars() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
