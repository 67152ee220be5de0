"""Keyword chat command handling for incoming messages.

A message is matched against the command registry after filtering and
normalisation. Rate-limited commands are counted against the hourly quota
outside the ``#rapi-bot`` channel, then the handler runs inside an error
boundary that converts failures into a single reply.
"""

from __future__ import annotations

import asyncio
import math
from datetime import timedelta
from typing import TYPE_CHECKING

import discord

from rapibot.clients.discord.constants import (
    CHAT_ERROR_REPLY,
    GROUNDED_ROLE,
    RAPI_BOT_CHANNEL,
    SPAM_TIMEOUT_SECONDS,
    WARNING_DELETE_AFTER_SECONDS,
    WELCOME_CHANNEL,
)
from rapibot.clients.discord.utils import (
    find_role_by_name,
    find_text_channel,
    parse_command,
)
from rapibot.core.errors import ErrorCategory, classify_error, user_message_for
from rapibot.core.logging import bind_command_context, clear_contextvars, get_logger

if TYPE_CHECKING:
    from rapibot.clients.discord.bot import DiscordBot
    from rapibot.core.registry import ChatCommand

logger = get_logger(__name__)

# Categories whose default user message replaces the generic apology
HANDLED_CATEGORIES = frozenset({
    ErrorCategory.TOO_LARGE,
    ErrorCategory.NOT_FOUND,
    ErrorCategory.TIMEOUT,
    ErrorCategory.NETWORK,
})


def should_ignore(message: discord.Message) -> bool:
    """Messages the bot never responds to."""
    if message.author.bot or message.guild is None or message.mention_everyone:
        return True
    if not isinstance(message.author, discord.Member):
        return True
    channel_name = getattr(message.channel, "name", None)
    return isinstance(channel_name, str) and channel_name.lower() == WELCOME_CHANNEL


def is_grounded(member: discord.Member) -> bool:
    role = find_role_by_name(member.guild, GROUNDED_ROLE)
    return role is not None and role in member.roles


async def handle_message(bot: DiscordBot, message: discord.Message) -> None:
    """Dispatch a message to the matching keyword command, if any."""
    if should_ignore(message):
        return

    name, args = parse_command(message.content)
    if name is None:
        return

    command = bot.registry.get(name)
    # Only the display name triggers a command; keys are internal
    if command is None or command.name.lower() != name:
        return

    bind_command_context(
        command.key,
        user_id=message.author.id,
        guild_id=message.guild.id,
        channel_id=message.channel.id,
    )
    try:
        await _run_command(bot, message, command, args)
    finally:
        clear_contextvars()


async def _run_command(
    bot: DiscordBot,
    message: discord.Message,
    command: ChatCommand,
    args: list[str],
) -> None:
    try:
        in_rapi_bot = getattr(message.channel, "name", None) == RAPI_BOT_CHANNEL
        if command.rate_limited and not in_rapi_bot:
            if not await _check_quota(bot, message, command):
                return

        if is_grounded(message.author):
            logger.debug("grounded_member_ignored")
            return

        bot.uptime.increment_commands()
        logger.info("chat_command_started", count=bot.uptime.commands_executed)
        await command.execute(message, args)
        logger.info("chat_command_completed")
    except asyncio.CancelledError:
        raise
    except Exception as ex:
        await _reply_with_error(message, ex)


async def _check_quota(
    bot: DiscordBot, message: discord.Message, command: ChatCommand
) -> bool:
    """Apply the hourly quota. Returns False when the message was handled."""
    limiter = bot.chat_limiter
    guild = message.guild
    member = message.author
    if limiter.check(guild.id, member.id, command.name.lower()):
        return True

    if limiter.should_timeout(guild.id, member.id):
        try:
            await member.timeout(
                timedelta(seconds=SPAM_TIMEOUT_SECONDS),
                reason="Spamming chat commands (8+ violations in 1 hour)",
            )
            await message.reply(
                f"Commander {member.mention}, you have been timed out for 5 minutes "
                "due to excessive spam violations."
            )
            logger.warning(
                "spammer_timed_out", violations=limiter.violations(guild.id, member.id)
            )
        except discord.HTTPException as ex:
            logger.error("spammer_timeout_failed", error=str(ex))
        return False

    remaining_seconds = math.ceil(limiter.remaining_time_ms() / 1000)
    rapi_bot = find_text_channel(guild, RAPI_BOT_CHANNEL)
    rapi_bot_ref = rapi_bot.mention if rapi_bot else f"#{RAPI_BOT_CHANNEL}"
    await message.reply(
        f"Commander {member.mention}, you're using chat commands too frequently. "
        f"Please wait {remaining_seconds} seconds before trying again. "
        "Use `/spam check` to see your status.\n\n"
        f"Use {rapi_bot_ref} for unlimited commands.",
        delete_after=WARNING_DELETE_AFTER_SECONDS,
    )
    logger.info("chat_quota_exceeded", remaining_seconds=remaining_seconds)
    return False


async def _reply_with_error(message: discord.Message, error: Exception) -> None:
    category = classify_error(error)
    if category in HANDLED_CATEGORIES:
        logger.warning("chat_command_failed", category=category.name, error=str(error))
        content = user_message_for(error)
    else:
        logger.exception("chat_command_failed", category=category.name, error=str(error))
        content = CHAT_ERROR_REPLY

    try:
        await message.reply(content)
    except discord.HTTPException as ex:
        logger.error("error_reply_failed", error=str(ex))
