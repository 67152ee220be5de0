"""Discord command handler decorators."""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVar

import discord

from rapibot.core.errors import classify_error, user_message_for
from rapibot.core.logging import bind_command_context, clear_contextvars, get_logger

if TYPE_CHECKING:
    from rapibot.clients.discord.bot import DiscordBot

structured_logger = get_logger(__name__)

T = TypeVar("T")

# Type alias for async command handlers
CommandHandler = Callable[..., Awaitable[T]]


async def send_error_reply(interaction: discord.Interaction, content: str) -> None:
    """Send an ephemeral error reply, as a follow-up if already responded."""
    try:
        if interaction.response.is_done():
            await interaction.followup.send(content, ephemeral=True)
        else:
            await interaction.response.send_message(content, ephemeral=True)
    except discord.HTTPException as ex:
        structured_logger.warning("error_reply_failed", error=str(ex))


def count_command(func: CommandHandler[T]) -> CommandHandler[T]:
    """Decorator for slash commands: counting, log context and error replies.

    Increments the session command counter, binds a correlation ID plus the
    user, guild and channel to the logging context for the duration of the
    command, and turns any exception into a single user-safe reply.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T | None:
        # Options arrive as keywords; group commands get the group first
        interaction: discord.Interaction[DiscordBot] = args[-1]
        bot = interaction.client
        bot.uptime.increment_commands()

        bind_command_context(
            func.__name__,
            user_id=interaction.user.id,
            guild_id=interaction.guild_id,
            channel_id=interaction.channel_id,
        )

        try:
            structured_logger.info(
                "command_started", count=bot.uptime.commands_executed
            )
            result = await func(*args, **kwargs)
            structured_logger.info("command_completed")
            return result
        except asyncio.CancelledError:
            # CancelledError is a BaseException, not Exception
            structured_logger.info("command_cancelled")
            raise
        except Exception as ex:
            structured_logger.exception(
                "command_failed",
                category=classify_error(ex).name,
                error=str(ex),
            )
            await send_error_reply(interaction, user_message_for(ex))
            return None
        finally:
            clear_contextvars()

    return wrapper
