"""Tests for the keyword command registry."""

import pytest

from rapibot.core.errors import NotFoundError
from rapibot.core.registry import ChatCommand, CommandRegistry


async def noop(message, args):
    return None


def make_command(key: str, name: str, **kwargs) -> ChatCommand:
    return ChatCommand(key=key, name=name, execute=noop, **kwargs)


class TestCommandRegistry:
    """Tests for CommandRegistry lookups."""

    @pytest.fixture
    def registry(self) -> CommandRegistry:
        registry = CommandRegistry()
        registry.register(make_command("booba", "booba?", rate_limited=True))
        registry.register(make_command("skillissue", "sounds like..."))
        return registry

    def test_get_by_key(self, registry: CommandRegistry) -> None:
        assert registry.get("booba").name == "booba?"

    def test_get_by_display_name(self, registry: CommandRegistry) -> None:
        assert registry.get("sounds like...").key == "skillissue"

    def test_lookup_is_case_insensitive(self, registry: CommandRegistry) -> None:
        assert registry.get("Booba?") is registry.get("booba?")
        assert registry.get("BOOBA") is registry.get("booba")

    def test_unknown_returns_none(self, registry: CommandRegistry) -> None:
        assert registry.get("hello") is None
        assert "hello" not in registry

    def test_resolve_unknown_raises(self, registry: CommandRegistry) -> None:
        with pytest.raises(NotFoundError):
            registry.resolve("hello")

    def test_resolve_known(self, registry: CommandRegistry) -> None:
        assert registry.resolve("SOUNDS LIKE...").key == "skillissue"

    def test_duplicate_key_rejected(self, registry: CommandRegistry) -> None:
        with pytest.raises(ValueError):
            registry.register(make_command("Booba", "other"))

    def test_first_display_name_wins(self, registry: CommandRegistry) -> None:
        registry.register(make_command("booba2", "booba?"))
        assert registry.get("booba?").key == "booba"
        assert registry.get("booba2").key == "booba2"

    def test_iteration_and_names(self, registry: CommandRegistry) -> None:
        assert len(registry) == 2
        assert {command.key for command in registry} == {"booba", "skillissue"}
        assert set(registry.names()) == {"booba?", "sounds like..."}

    def test_contains_ignores_non_strings(self, registry: CommandRegistry) -> None:
        assert "BOOBA?" in registry
        assert 5 not in registry

    def test_rate_limited_flag_kept(self, registry: CommandRegistry) -> None:
        assert registry.get("booba?").rate_limited
        assert not registry.get("skillissue").rate_limited
