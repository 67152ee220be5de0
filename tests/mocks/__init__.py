"""Mock implementations for testing."""

from tests.mocks.discord_objects import (
    FakeBot,
    FakeTree,
    make_guild,
    make_interaction,
    make_member,
    make_message,
    make_role,
    make_text_channel,
)

__all__ = [
    "FakeBot",
    "FakeTree",
    "make_guild",
    "make_interaction",
    "make_member",
    "make_message",
    "make_role",
    "make_text_channel",
]
