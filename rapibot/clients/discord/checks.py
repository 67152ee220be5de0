"""Channel and role checks for Discord commands."""

import discord

from rapibot.clients.discord.constants import MOD_ROLES
from rapibot.clients.discord.utils import has_role
from rapibot.core.logging import get_logger

logger = get_logger(__name__)


def is_in_channel(interaction: discord.Interaction, channel_name: str) -> bool:
    """Check if the interaction was used in the named guild text channel."""
    channel = interaction.channel
    if not isinstance(channel, discord.TextChannel):
        return False
    return channel.name == channel_name


async def enforce_channel_restriction(
    interaction: discord.Interaction, required_channel: str
) -> bool:
    """Tell the user where a channel-bound command may be used.

    Args:
        interaction: The Discord interaction.
        required_channel: Name of the only channel the command runs in.

    Returns:
        True if the command was blocked (a reply has been sent), False if it
        may proceed.
    """
    if is_in_channel(interaction, required_channel):
        return False

    await interaction.response.send_message(
        f"Commander, this command is restricted to the **#{required_channel}** channel. "
        "Navigate there if you wish to proceed.",
        ephemeral=True,
    )
    logger.info(
        "channel_restricted_command_blocked",
        required_channel=required_channel,
        user_id=interaction.user.id,
        channel_id=interaction.channel_id,
    )
    return True


def is_moderator(interaction: discord.Interaction) -> bool:
    """True if the invoking member holds the Mods or King role."""
    member = interaction.user
    if not isinstance(member, discord.Member):
        return False
    return has_role(member, MOD_ROLES)
