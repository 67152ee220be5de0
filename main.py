"""Entry point for the Discord bot."""

import asyncio
import os

import discord

from rapibot.clients.discord import (
    DiscordBot,
    create_bot,
    register_general_commands,
    register_keyword_commands,
    register_spam_commands,
)
from rapibot.core.health import (
    HealthChecker,
    ServiceCheck,
    ServiceStatus,
    start_health_server,
)
from rapibot.core.logging import configure_logging, get_logger, set_service_fields

# Configure structured logging (reads ENVIRONMENT and LOG_LEVEL from env)
configure_logging()

logger = get_logger(__name__)

APP_VERSION = os.getenv("APP_VERSION", "1.0.0")


def create_health_checker(bot: DiscordBot) -> HealthChecker:
    """Create health checker with service checks for the bot.

    Args:
        bot: The Discord bot instance.

    Returns:
        Configured HealthChecker instance.
    """
    checker = HealthChecker(version=APP_VERSION, uptime=bot.uptime)

    async def check_discord() -> ServiceCheck:
        """Check Discord connection status."""
        if bot.is_ready():
            return ServiceCheck(
                name="discord",
                status=ServiceStatus.HEALTHY,
                message="Connected",
                details={"guilds": len(bot.guilds), "latency_ms": round(bot.latency * 1000)},
            )
        if bot.is_closed():
            return ServiceCheck(
                name="discord",
                status=ServiceStatus.UNHEALTHY,
                message="Connection closed",
            )
        return ServiceCheck(
            name="discord",
            status=ServiceStatus.DEGRADED,
            message="Connecting...",
        )

    async def check_usage_store() -> ServiceCheck:
        """Check the cooldown stores are loaded."""
        try:
            cooldowns = bot.cooldowns
        except RuntimeError as ex:
            return ServiceCheck(
                name="usage_store",
                status=ServiceStatus.UNHEALTHY,
                message=str(ex),
            )
        return ServiceCheck(
            name="usage_store",
            status=ServiceStatus.HEALTHY,
            message="Loaded",
            details={
                scope: len(cooldowns.store_for(scope)) for scope in cooldowns.scopes
            },
        )

    async def check_media_source() -> ServiceCheck:
        """Check media source configuration."""
        try:
            source = bot.media_source
        except RuntimeError as ex:
            return ServiceCheck(
                name="media_source",
                status=ServiceStatus.UNHEALTHY,
                message=str(ex),
            )
        return ServiceCheck(
            name="media_source",
            status=ServiceStatus.HEALTHY,
            message="Configured",
            details={"backend": type(source).__name__},
        )

    checker.add_check("discord", check_discord)
    checker.add_check("usage_store", check_usage_store)
    checker.add_check("media_source", check_media_source)

    return checker


async def main() -> None:
    """Initialize and start the Discord bot with health monitoring."""
    bot = create_bot()
    set_service_fields(deployment_id=bot.uptime.deployment_id, version=APP_VERSION)

    # Register command handlers
    register_general_commands(bot)
    register_spam_commands(bot)
    register_keyword_commands(bot)

    health_checker = create_health_checker(bot)

    # Start health server if enabled (default: enabled)
    health_server = None
    health_enabled = os.getenv("HEALTH_ENABLED", "true").lower() == "true"
    health_port = int(os.getenv("HEALTH_PORT", "8080"))

    if health_enabled:
        health_server = await start_health_server(
            health_checker,
            host="0.0.0.0",
            port=health_port,
        )

    @bot.event
    async def on_ready() -> None:
        """On bot startup, log success and set presence."""
        if bot.user:
            logger.info("bot_ready", user=str(bot.user), user_id=bot.user.id)

        await bot.change_presence(
            activity=discord.CustomActivity(name="/help for commands")
        )

        for guild in bot.guilds:
            logger.info("guild_connected", guild=guild.name, guild_id=guild.id)

    try:
        logger.info("bot_starting", version=APP_VERSION)
        await bot.start(os.environ["DISCORD_BOT_TOKEN"])
    finally:
        if health_server:
            await health_server.stop()
        if not bot.is_closed():
            await bot.close()


if __name__ == "__main__":
    asyncio.run(main())
