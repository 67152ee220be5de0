"""General-purpose Discord slash commands."""

import random
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import discord
from discord import app_commands

from rapibot.clients.discord import phrases
from rapibot.clients.discord.checks import enforce_channel_restriction
from rapibot.clients.discord.commands.keywords import add_reactions
from rapibot.clients.discord.constants import EMBED_COLOR_UPTIME, RAPI_BOT_CHANNEL
from rapibot.clients.discord.decorators import count_command
from rapibot.clients.discord.utils import send_media_followup
from rapibot.core.logging import get_logger
from rapibot.core.media import DEFAULT_IMAGE_EXTENSIONS, DEFAULT_VIDEO_EXTENSIONS
from rapibot.core.rate_limit import ONE_DAY_MS, describe_remaining

if TYPE_CHECKING:
    from rapibot.clients.discord.bot import DiscordBot

logger = get_logger(__name__)

LUCKY_SCOPE = "lucky"
MEME_PATH = "memes/"
NIKKE_MEME_PATH = "nikke/"
MEME_TRACK_LAST = 10


def lucky_reply(luck: int) -> tuple[str, tuple[str, ...]]:
    """Pick the ``/lucky`` message and the guild emoji to react with.

    Args:
        luck: Rolled luck percentage, 1 to 100.

    Returns:
        Tuple of (reply text, emoji names).
    """
    reactions: tuple[str, ...] = ("rapidd",)
    if luck < 3:
        template = random.choice(phrases.LUCKY_LOW)
        reactions += ("HAH", "ICANT", "wecant")
    elif luck == 69:
        template = random.choice(phrases.LUCKY_69)
        reactions += ("KirbyS",)
    elif luck == 100:
        template = random.choice(phrases.LUCKY_PERFECT)
        reactions += ("Gamer", "GachaFlex")
    else:
        template = random.choice(phrases.LUCKY_DEFAULT)
    return template.format(luck=luck), reactions


def build_age_embed(bot: "DiscordBot", guild_id: int | None) -> discord.Embed:
    """Build the ``/age`` uptime embed."""
    info = bot.uptime.deployment_info()
    limiter = bot.chat_limiter
    server_commands = limiter.guild_command_count(guild_id) if guild_id else 0
    started_at = datetime.fromtimestamp(info["start_time"] / 1000, tz=UTC)

    embed = discord.Embed(
        title="System Uptime",
        description=f"I have been running for {info['formatted_uptime']}!",
        color=EMBED_COLOR_UPTIME,
        timestamp=datetime.now(UTC),
    )
    embed.add_field(
        name="📅 Started At", value=discord.utils.format_dt(started_at), inline=True
    )
    embed.add_field(
        name="⚡ Commands (Server)", value=f"**{server_commands:,}**", inline=True
    )
    embed.add_field(name="​", value="​", inline=True)
    embed.add_field(
        name="🌐 Servers Connected", value=f"**{len(bot.guilds)}**", inline=True
    )
    embed.add_field(
        name="🌍 Commands (Global)",
        value=f"**{limiter.global_command_count():,}**",
        inline=True,
    )
    embed.set_footer(text=f"Stay safe on the surface, Commander! ({info['deployment_id']})")
    return embed


def register_general_commands(bot: "DiscordBot") -> None:
    """Register general slash commands with the bot.

    Args:
        bot: The Discord bot instance.
    """

    @bot.tree.command()  # type: ignore[arg-type]
    @count_command
    async def help(interaction: discord.Interaction) -> None:
        """List of custom commands available for all Commanders."""
        await interaction.response.send_message(phrases.HELP, ephemeral=True)

    @bot.tree.command()  # type: ignore[arg-type]
    @count_command
    async def lucky(interaction: discord.Interaction) -> None:
        """Tells you your luck for today."""
        result = await bot.cooldowns.check_and_record(
            LUCKY_SCOPE, interaction.user.id, ONE_DAY_MS
        )
        if not result.allowed:
            await interaction.response.send_message(
                "Sorry, Commander. You can use this command again in "
                f"{describe_remaining(result.remaining_ms)}."
            )
            return

        luck = random.randint(1, 100)
        content, reactions = lucky_reply(luck)
        await interaction.response.send_message(content)
        logger.info("lucky_rolled", luck=luck)

        message = await interaction.original_response()
        await add_reactions(message, reactions)

    @bot.tree.command()  # type: ignore[arg-type]
    @count_command
    async def age(interaction: discord.Interaction) -> None:
        """Show how long the bot has been running."""
        embed = build_age_embed(bot, interaction.guild_id)
        await interaction.response.send_message(embed=embed, ephemeral=True)

    @bot.tree.command()  # type: ignore[arg-type]
    @app_commands.describe(question="Your question for Rapi")
    @count_command
    async def rapiball(interaction: discord.Interaction, question: str) -> None:
        """Ask Rapi a question and receive her tactical assessment."""
        if await enforce_channel_restriction(interaction, RAPI_BOT_CHANNEL):
            return

        response = random.choice(phrases.RAPIBALL)
        await interaction.response.send_message(
            f"**Question:** {question}\n\n **{response}**"
        )

    @bot.tree.command()  # type: ignore[arg-type]
    @count_command
    async def compositions(interaction: discord.Interaction) -> None:
        """Get help for NIKKE team compositions."""
        await interaction.response.send_message(phrases.COMPOSITIONS)

    @bot.tree.command()  # type: ignore[arg-type]
    @count_command
    async def relics(interaction: discord.Interaction) -> None:
        """Get the Lost Relics guide for NIKKE."""
        await interaction.response.send_message(phrases.RELICS)

    @bot.tree.command()  # type: ignore[arg-type]
    @count_command
    async def rules(interaction: discord.Interaction) -> None:
        """Rapi Rules (she'll ban you if you don't behave)."""
        await interaction.response.send_message(phrases.RULES, ephemeral=True)

    async def send_random_meme(interaction: discord.Interaction, path: str) -> None:
        if interaction.guild_id is None:
            await interaction.response.send_message(
                "Commander, this command only works in a server.", ephemeral=True
            )
            return
        # Downloading can exceed the 3 second interaction deadline
        await interaction.response.defer()
        url = await bot.media_picker.pick_random(
            path,
            interaction.guild_id,
            extensions=DEFAULT_IMAGE_EXTENSIONS + DEFAULT_VIDEO_EXTENSIONS,
            track_last=MEME_TRACK_LAST,
        )
        await send_media_followup(bot, interaction, url)

    @bot.tree.command()  # type: ignore[arg-type]
    @count_command
    async def meme(interaction: discord.Interaction) -> None:
        """Random general memes from the community."""
        await send_random_meme(interaction, MEME_PATH)

    @bot.tree.command()  # type: ignore[arg-type]
    @count_command
    async def nikke(interaction: discord.Interaction) -> None:
        """Random Nikke memes from the community."""
        await send_random_meme(interaction, NIKKE_MEME_PATH)
