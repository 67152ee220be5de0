"""Lookup table for keyword chat commands.

Commands are registered under a short key (``"booba"``) and carry a display
name that users actually type (``"booba?"``). Both are indexed lowercased
when registered, so resolution is a dictionary lookup either way.
"""

from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import Any

from rapibot.core.errors import NotFoundError

ChatHandler = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class ChatCommand:
    """A message-triggered command.

    Attributes:
        key: Registry key (identifier-like, e.g. ``"skillissue"``).
        name: Display name/trigger text (e.g. ``"sounds like..."``).
        execute: Coroutine called with the message and parsed args.
        description: Optional help text.
        rate_limited: Whether the command counts against the hourly chat quota.
    """

    key: str
    name: str
    execute: ChatHandler
    description: str | None = None
    rate_limited: bool = False


class CommandRegistry:
    """Case-insensitive command table with a display-name index."""

    def __init__(self) -> None:
        self._by_key: dict[str, ChatCommand] = {}
        self._by_name: dict[str, ChatCommand] = {}

    def register(self, command: ChatCommand) -> ChatCommand:
        """Add a command.

        Raises:
            ValueError: If the key is already registered.
        """
        key = command.key.lower()
        if key in self._by_key:
            raise ValueError(f"Command already registered: {command.key!r}")
        self._by_key[key] = command
        # First registration wins when two commands share a display name
        self._by_name.setdefault(command.name.lower(), command)
        return command

    def get(self, name: str) -> ChatCommand | None:
        """Resolve by key, then by display name. None if unknown."""
        lowered = name.lower()
        return self._by_key.get(lowered) or self._by_name.get(lowered)

    def resolve(self, name: str) -> ChatCommand:
        """Resolve by key, then by display name.

        Raises:
            NotFoundError: If nothing matches.
        """
        command = self.get(name)
        if command is None:
            raise NotFoundError(f"Unknown command: {name!r}")
        return command

    def names(self) -> list[str]:
        """Lowercased display names of every command."""
        return list(self._by_name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __iter__(self) -> Iterator[ChatCommand]:
        return iter(self._by_key.values())

    def __len__(self) -> int:
        return len(self._by_key)
