"""``/spam`` command group for the hourly chat-command quota."""

import math
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import discord
from discord import app_commands

from rapibot.clients.discord.checks import is_moderator
from rapibot.clients.discord.constants import (
    EMBED_COLOR_ERROR,
    EMBED_COLOR_INFO,
    EMBED_COLOR_SUCCESS,
)
from rapibot.clients.discord.decorators import count_command
from rapibot.core.logging import get_logger

if TYPE_CHECKING:
    from rapibot.clients.discord.bot import DiscordBot

logger = get_logger(__name__)

FOOTER = "Rate limiting helps keep the chat clean!"


class SpamGroup(app_commands.Group):
    """Check or manage the chat-command quota."""

    def __init__(self, bot: "DiscordBot") -> None:
        """Initialize the spam command group.

        Args:
            bot: The Discord bot instance.
        """
        super().__init__(
            name="spam",
            description="Check your spam limit status or manage spam limits",
            guild_only=True,
        )
        self.bot = bot

    @app_commands.command(name="check")
    @count_command
    async def check(self, interaction: discord.Interaction) -> None:
        """Check your current rate limit status."""
        limiter = self.bot.chat_limiter
        remaining = limiter.remaining_commands(interaction.guild_id, interaction.user.id)
        reset_seconds = math.ceil(limiter.remaining_time_ms() / 1000)

        embed = discord.Embed(
            title="Your Rate Limit Status",
            color=EMBED_COLOR_SUCCESS if remaining > 0 else EMBED_COLOR_ERROR,
            timestamp=datetime.now(UTC),
        )
        embed.add_field(
            name="🎯 Remaining Commands",
            value=f"{remaining}/{limiter.quota.max_commands}",
            inline=True,
        )
        embed.add_field(name="⏰ Time Until Reset", value=f"{reset_seconds} seconds", inline=True)
        embed.set_footer(text=FOOTER)
        await interaction.response.send_message(embed=embed, ephemeral=True)

    @app_commands.command(name="stats")
    @count_command
    async def stats(self, interaction: discord.Interaction) -> None:
        """View rate limit statistics (Mods/King only)."""
        if not is_moderator(interaction):
            await interaction.response.send_message(
                "Commander, you need the Mods or King role to view statistics.",
                ephemeral=True,
            )
            return

        limiter = self.bot.chat_limiter
        stats = limiter.usage_stats(interaction.guild_id)

        embed = discord.Embed(
            title="Rate Limit Statistics",
            color=EMBED_COLOR_INFO,
            timestamp=datetime.now(UTC),
        )
        embed.add_field(name="📊 Total Users", value=str(stats.total_users), inline=True)
        embed.add_field(name="🎯 Active Users", value=str(stats.active_users), inline=True)
        embed.add_field(name="📈 Total Usage", value=str(stats.total_usage), inline=True)

        if stats.top_violators:
            violators = "\n".join(
                f"{rank}. <@{user_id}> - {attempts} attempts"
                for rank, (user_id, attempts) in enumerate(stats.top_violators, start=1)
            )
            embed.add_field(
                name=f"🚨 Top Violators ({limiter.quota.violator_threshold}+ attempts)",
                value=violators,
                inline=False,
            )
        if stats.most_used_commands:
            commands = "\n".join(
                f"`{name}` - {count}" for name, count in stats.most_used_commands
            )
            embed.add_field(name="🔥 Most Used Commands", value=commands, inline=False)

        embed.set_footer(text=FOOTER)
        await interaction.response.send_message(embed=embed, ephemeral=True)

    @app_commands.command(name="reset")
    @app_commands.describe(user="User to reset rate limit for")
    @count_command
    async def reset(self, interaction: discord.Interaction, user: discord.Member) -> None:
        """Reset rate limit for a user (Mods/King only)."""
        if not is_moderator(interaction):
            await interaction.response.send_message(
                "Commander, you need the Mods or King role to reset rate limits.",
                ephemeral=True,
            )
            return

        self.bot.chat_limiter.reset_user(interaction.guild_id, user.id)
        logger.info("chat_quota_reset", target_user_id=user.id)
        await interaction.response.send_message(
            f"Rate limit reset for user {user.mention}", ephemeral=True
        )


def register_spam_commands(bot: "DiscordBot") -> None:
    """Register the ``/spam`` command group with the bot.

    Args:
        bot: The Discord bot instance.
    """
    bot.tree.add_command(SpamGroup(bot))
