"""Discord command modules."""

from rapibot.clients.discord.commands.general import register_general_commands
from rapibot.clients.discord.commands.keywords import register_keyword_commands
from rapibot.clients.discord.commands.spam import register_spam_commands

__all__ = [
    "register_general_commands",
    "register_keyword_commands",
    "register_spam_commands",
]
