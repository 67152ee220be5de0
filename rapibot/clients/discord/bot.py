"""Discord bot core - setup and lifecycle management."""

import asyncio
import contextlib
from os import getenv
from pathlib import Path

import aiohttp
import discord
from discord import app_commands

from rapibot.adapters import create_media_source
from rapibot.clients.discord.constants import QUOTA_CLEANUP_INTERVAL_SECONDS
from rapibot.clients.discord.messages import handle_message
from rapibot.core.logging import get_logger
from rapibot.core.media import MediaPicker, MediaSource
from rapibot.core.rate_limit import ChatCommandLimiter, CooldownLimiter
from rapibot.core.registry import CommandRegistry
from rapibot.core.uptime import UptimeTracker
from rapibot.core.usage_store import UsageStore

logger = get_logger(__name__)

LUCKY_SCOPE = "lucky"


class DiscordBot(discord.Client):
    """Discord bot with keyword chat commands, media and rate limiting.

    The command registry, chat quota and uptime tracker exist from
    construction so commands can be registered before login. Everything that
    touches disk or network is created in ``setup_hook``.

    Attributes:
        tree: The command tree for slash commands.
    """

    def __init__(self) -> None:
        """Initialize the Discord bot with required intents."""
        intents = discord.Intents.default()
        intents.messages = True
        intents.message_content = True
        intents.guilds = True
        intents.members = True
        super().__init__(intents=intents)
        self.tree = app_commands.CommandTree(self)
        self._registry = CommandRegistry()
        self._chat_limiter = ChatCommandLimiter()
        self._uptime = UptimeTracker()
        self._cooldowns: CooldownLimiter | None = None
        self._media_source: MediaSource | None = None
        self._media_picker: MediaPicker | None = None
        self._http_session: aiohttp.ClientSession | None = None
        self._cleanup_task: asyncio.Task[None] | None = None

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    @property
    def chat_limiter(self) -> ChatCommandLimiter:
        return self._chat_limiter

    @property
    def uptime(self) -> UptimeTracker:
        return self._uptime

    @property
    def cooldowns(self) -> CooldownLimiter:
        """Get the cooldown limiter, raising if not initialized."""
        if self._cooldowns is None:
            raise RuntimeError(
                "Cooldown limiter not initialized. setup_hook must complete first."
            )
        return self._cooldowns

    @property
    def media_source(self) -> MediaSource:
        """Get the media source, raising if not initialized."""
        if self._media_source is None:
            raise RuntimeError(
                "Media source not initialized. setup_hook must complete first."
            )
        return self._media_source

    @property
    def media_picker(self) -> MediaPicker:
        """Get the media picker, raising if not initialized."""
        if self._media_picker is None:
            raise RuntimeError(
                "Media picker not initialized. setup_hook must complete first."
            )
        return self._media_picker

    @property
    def http_session(self) -> aiohttp.ClientSession:
        """Get the shared HTTP session, raising if not initialized."""
        if self._http_session is None:
            raise RuntimeError(
                "HTTP session not initialized. setup_hook must complete first."
            )
        return self._http_session

    def cdn_url(self, key: str) -> str:
        """Public URL for a fixed media key."""
        return self.media_source.url_for(key)

    async def setup_hook(self) -> None:
        """Initialize storage, media access and sync commands with Discord."""
        # Persistent cooldowns
        data_dir = Path(getenv("USAGE_DATA_DIR", "data"))
        lucky_store = UsageStore(data_dir / getenv("LUCKY_DATA_FILE", "user_data.json"))
        lucky_store.load()
        self._cooldowns = CooldownLimiter({LUCKY_SCOPE: lucky_store}, data_dir=data_dir)
        logger.info("cooldowns_initialized", data_dir=str(data_dir))

        self._http_session = aiohttp.ClientSession()

        # Media listing
        backend = getenv("MEDIA_BACKEND", "http").lower()
        cdn_domain_url = getenv("CDN_DOMAIN_URL")
        if backend != "memory" and not cdn_domain_url:
            raise RuntimeError("CDN_DOMAIN_URL environment variable is required")
        self._media_source = create_media_source(
            backend,
            cdn_domain_url=cdn_domain_url,
            bucket_url=getenv("MEDIA_BUCKET_URL"),
            bucket_name=getenv("GCS_BUCKET"),
            session=self._http_session,
        )
        self._media_picker = MediaPicker(self._media_source)
        logger.info("media_initialized", backend=backend, cdn_domain_url=cdn_domain_url)

        self._cleanup_task = asyncio.create_task(self._cleanup_chat_quota())

        # Only sync commands when explicitly requested via environment variable.
        # Discord allows 200 command creates per day.
        if getenv("SYNC_COMMANDS", "").lower() == "true":
            await self.tree.sync()
            logger.info("commands_synced_globally")
        else:
            logger.info("command_sync_skipped", reason="SYNC_COMMANDS not set")

    async def _cleanup_chat_quota(self) -> None:
        while True:
            await asyncio.sleep(QUOTA_CLEANUP_INTERVAL_SECONDS)
            removed = self._chat_limiter.cleanup()
            if removed:
                logger.debug("chat_quota_cleaned", removed=removed)

    async def on_message(self, message: discord.Message) -> None:
        await handle_message(self, message)

    async def close(self) -> None:
        """Clean up resources when the client is closing."""
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._cleanup_task
            self._cleanup_task = None
        if self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            logger.info("http_session_closed")
        await super().close()

    async def on_guild_join(self, guild: discord.Guild) -> None:
        """Sync commands to a newly joined guild.

        Args:
            guild: The guild the bot has joined.
        """
        await self.tree.sync(guild=guild)
        logger.info("guild_joined", guild=guild.name, guild_id=guild.id)


def create_bot() -> DiscordBot:
    """Create and return a configured Discord bot instance."""
    return DiscordBot()
