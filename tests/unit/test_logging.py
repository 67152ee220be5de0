"""Tests for structured logging configuration."""

import json
import logging
from io import StringIO
from unittest.mock import patch

import structlog

from rapibot.core.logging import (
    THIRD_PARTY_LOGGERS,
    _service_fields,
    bind_command_context,
    clear_contextvars,
    configure_logging,
    get_logger,
    set_service_fields,
)


def capture_json_line(event: str, **kwargs) -> dict:
    """Log one event in production mode and parse the emitted line."""
    output = StringIO()
    handler = logging.StreamHandler(output)
    configure_logging(development=False, log_level="INFO")
    root = logging.getLogger()
    root.addHandler(handler)
    try:
        get_logger("test").info(event, **kwargs)
        handler.flush()
    finally:
        root.removeHandler(handler)

    lines = [line for line in output.getvalue().splitlines() if line.strip()]
    return json.loads(lines[-1])


class TestConfigureLogging:
    """Tests for configure_logging."""

    def setup_method(self) -> None:
        structlog.reset_defaults()
        clear_contextvars()

    def test_development_mode_logs(self) -> None:
        configure_logging(development=True)
        get_logger("test").info("command_started", command="lucky")

    def test_reads_environment(self) -> None:
        """ENVIRONMENT=production selects JSON output; LOG_LEVEL sets the level."""
        with patch.dict("os.environ", {"ENVIRONMENT": "production", "LOG_LEVEL": "DEBUG"}):
            configure_logging()
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self) -> None:
        configure_logging(development=True, log_level="CHATTY")
        assert logging.getLogger().level == logging.INFO

    def test_caps_third_party_loggers(self) -> None:
        configure_logging(development=True, log_level="DEBUG")
        for name in THIRD_PARTY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING


class TestContextVars:
    """Tests for context binding in production output."""

    def setup_method(self) -> None:
        structlog.reset_defaults()
        clear_contextvars()

    def teardown_method(self) -> None:
        clear_contextvars()
        _service_fields.clear()

    def test_json_line_has_event_and_fields(self) -> None:
        parsed = capture_json_line("media_picked", path="memes/")
        assert parsed["event"] == "media_picked"
        assert parsed["path"] == "memes/"
        assert parsed["level"] == "info"

    def test_command_context_is_included(self) -> None:
        correlation_id = bind_command_context("lucky", user_id=7, guild_id=42, channel_id=9)
        parsed = capture_json_line("command_completed")
        assert parsed["correlation_id"] == correlation_id
        assert len(correlation_id) == 8
        assert parsed["command"] == "lucky"
        assert parsed["guild_id"] == 42

    def test_command_context_replaces_previous_one(self) -> None:
        first = bind_command_context("lucky", user_id=1, guild_id=None, channel_id=None)
        second = bind_command_context("booba?", user_id=2, guild_id=None, channel_id=None)
        parsed = capture_json_line("event")
        assert first != second
        assert parsed["command"] == "booba?"
        assert parsed["user_id"] == 2

    def test_clear_removes_everything(self) -> None:
        bind_command_context("booba?", user_id=1, guild_id=None, channel_id=None)
        clear_contextvars()
        assert "command" not in capture_json_line("event")

    def test_service_fields_on_every_line(self) -> None:
        set_service_fields(deployment_id="abc-123", version="1.0.0")
        parsed = capture_json_line("bot_ready")
        assert parsed["deployment_id"] == "abc-123"
        assert parsed["version"] == "1.0.0"

    def test_service_fields_survive_clear_but_yield_to_line_values(self) -> None:
        set_service_fields(version="1.0.0")
        clear_contextvars()
        assert capture_json_line("event", version="2.0.0")["version"] == "2.0.0"
