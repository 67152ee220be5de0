"""Shared utilities for Discord commands and message handlers."""

import io
import re
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

import aiohttp
import discord

from rapibot.clients.discord.constants import (
    COMMAND_PREFIX,
    DEFAULT_ATTACHMENT_LIMIT_BYTES,
    MEDIA_DOWNLOAD_TIMEOUT_SECONDS,
)
from rapibot.core.errors import DISCORD_FILE_TOO_LARGE_CODE, UpstreamTooLarge
from rapibot.core.logging import get_logger

if TYPE_CHECKING:
    from rapibot.clients.discord.bot import DiscordBot

logger = get_logger(__name__)

URL_PATTERN = re.compile(r"https?://\S+")
MENTION_PATTERN = re.compile(r"<@!?\d+>")
CHUNK_SIZE = 64 * 1024


def strip_content(content: str) -> str:
    """Lowercase message text with links and user mentions removed."""
    stripped = URL_PATTERN.sub("", content.lower())
    return MENTION_PATTERN.sub("", stripped).strip()


def parse_command(content: str) -> tuple[str | None, list[str]]:
    """Split message text into a command name and its arguments.

    Prefixed messages (``/content``) are split on whitespace; anything else
    is treated as a single keyword trigger.

    Returns:
        Tuple of (lowercased command or None, remaining args).
    """
    if content.startswith(COMMAND_PREFIX):
        args = content[len(COMMAND_PREFIX) :].strip().split()
    else:
        args = [strip_content(content)]

    if not args or not args[0]:
        return None, []
    return args[0].lower(), args[1:]


def find_role_by_name(guild: discord.Guild, name: str) -> discord.Role | None:
    return discord.utils.get(guild.roles, name=name)


def find_text_channel(guild: discord.Guild, name: str) -> discord.TextChannel | None:
    return discord.utils.get(guild.text_channels, name=name)


def find_emoji(guild: discord.Guild | None, name: str) -> discord.Emoji | None:
    if guild is None:
        return None
    return discord.utils.get(guild.emojis, name=name)


def has_role(member: discord.Member, names: frozenset[str]) -> bool:
    """Check membership in any of ``names`` (case-insensitive)."""
    return any(role.name.lower() in names for role in member.roles)


def attachment_limit(guild: discord.Guild | None) -> int:
    """Largest upload allowed in a guild; at least the 10 MB default."""
    if guild is None:
        return DEFAULT_ATTACHMENT_LIMIT_BYTES
    return max(DEFAULT_ATTACHMENT_LIMIT_BYTES, guild.filesize_limit)


def filename_from_url(url: str) -> str:
    path = urlsplit(url).path
    return path.rsplit("/", 1)[-1] or "media"


async def fetch_media_file(
    session: aiohttp.ClientSession, url: str, limit_bytes: int
) -> discord.File:
    """Download a CDN file into memory as a Discord attachment.

    Args:
        session: Shared HTTP session.
        url: Public URL of the file.
        limit_bytes: Attachment ceiling for the destination guild.

    Returns:
        A discord.File ready to send.

    Raises:
        UpstreamTooLarge: If the file is bigger than ``limit_bytes``.
        aiohttp.ClientResponseError: If the CDN answers with an error status.
    """
    buffer = io.BytesIO()
    async with session.get(
        url, timeout=aiohttp.ClientTimeout(total=MEDIA_DOWNLOAD_TIMEOUT_SECONDS)
    ) as response:
        response.raise_for_status()

        declared = response.content_length
        if declared is not None and declared > limit_bytes:
            raise UpstreamTooLarge(size_bytes=declared, limit_bytes=limit_bytes)

        async for chunk in response.content.iter_chunked(CHUNK_SIZE):
            buffer.write(chunk)
            # Content-Length can be missing or wrong
            if buffer.tell() > limit_bytes:
                raise UpstreamTooLarge(size_bytes=buffer.tell(), limit_bytes=limit_bytes)

    buffer.seek(0)
    logger.debug("media_downloaded", url=url, size_bytes=buffer.getbuffer().nbytes)
    return discord.File(buffer, filename=filename_from_url(url))


def is_too_large_http_error(error: discord.HTTPException) -> bool:
    return error.code == DISCORD_FILE_TOO_LARGE_CODE or error.status == 413


async def send_media_reply(
    bot: "DiscordBot",
    message: discord.Message,
    url: str,
    content: str | None = None,
) -> discord.Message:
    """Reply to a message with a media file from the CDN.

    Raises:
        UpstreamTooLarge: If the file exceeds the guild's upload limit, either
            while downloading or when Discord rejects the upload.
    """
    limit = attachment_limit(message.guild)
    media = await fetch_media_file(bot.http_session, url, limit)
    try:
        return await message.reply(content=content or None, file=media)
    except discord.HTTPException as ex:
        if is_too_large_http_error(ex):
            raise UpstreamTooLarge(limit_bytes=limit) from ex
        raise


async def send_media_followup(
    bot: "DiscordBot",
    interaction: discord.Interaction,
    url: str,
    content: str | None = None,
) -> None:
    """Send a CDN file as the follow-up to a deferred interaction.

    Raises:
        UpstreamTooLarge: If the file exceeds the guild's upload limit.
    """
    limit = attachment_limit(interaction.guild)
    media = await fetch_media_file(bot.http_session, url, limit)
    try:
        if content:
            await interaction.followup.send(content=content, file=media)
        else:
            await interaction.followup.send(file=media)
    except discord.HTTPException as ex:
        if is_too_large_http_error(ex):
            raise UpstreamTooLarge(limit_bytes=limit) from ex
        raise
