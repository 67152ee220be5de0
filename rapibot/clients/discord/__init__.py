"""Discord client package."""

from rapibot.clients.discord.bot import DiscordBot, create_bot
from rapibot.clients.discord.commands import (
    register_general_commands,
    register_keyword_commands,
    register_spam_commands,
)
from rapibot.clients.discord.decorators import count_command

__all__ = [
    "DiscordBot",
    "count_command",
    "create_bot",
    "register_general_commands",
    "register_keyword_commands",
    "register_spam_commands",
]
