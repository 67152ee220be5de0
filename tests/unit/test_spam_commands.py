"""Tests for the /spam command group."""

import pytest

from rapibot.clients.discord.commands.spam import SpamGroup, register_spam_commands
from tests.mocks import FakeBot, make_guild, make_interaction, make_member, make_role


@pytest.fixture
def group(fake_bot: FakeBot) -> SpamGroup:
    return SpamGroup(fake_bot)


def moderator_interaction(bot: FakeBot):
    guild = make_guild()
    return make_interaction(bot, guild=guild, user=make_member(guild, user_id=1, roles=[make_role("Mods")]))


class TestSpamGroup:
    """Tests for /spam check, stats and reset."""

    def test_registered_on_tree(self, fake_bot: FakeBot) -> None:
        register_spam_commands(fake_bot)
        assert [group.name for group in fake_bot.tree.groups] == ["spam"]

    def test_subcommands(self, group: SpamGroup) -> None:
        assert {command.name for command in group.commands} == {"check", "stats", "reset"}

    async def test_check_shows_remaining(self, group: SpamGroup, fake_bot: FakeBot) -> None:
        interaction = make_interaction(fake_bot)
        fake_bot.chat_limiter.check(interaction.guild_id, interaction.user.id)

        await group.check.callback(group, interaction)

        embed = interaction.response.send_message.await_args.kwargs["embed"]
        assert embed.fields[0].value == "2/3"
        assert embed.fields[1].value.endswith(" seconds")
        assert fake_bot.uptime.commands_executed == 1

    async def test_stats_requires_moderator(self, group: SpamGroup, fake_bot: FakeBot) -> None:
        interaction = make_interaction(fake_bot)

        await group.stats.callback(group, interaction)

        interaction.response.send_message.assert_awaited_once_with(
            "Commander, you need the Mods or King role to view statistics.", ephemeral=True
        )

    async def test_stats_lists_violators(self, group: SpamGroup, fake_bot: FakeBot) -> None:
        interaction = moderator_interaction(fake_bot)
        for _ in range(6):
            fake_bot.chat_limiter.check(interaction.guild_id, 42, "booba?")

        await group.stats.callback(group, interaction)

        embed = interaction.response.send_message.await_args.kwargs["embed"]
        fields = {field.name: field.value for field in embed.fields}
        assert fields["📈 Total Usage"] == "3"
        assert "<@42> - 6 attempts" in fields["🚨 Top Violators (5+ attempts)"]
        assert fields["🔥 Most Used Commands"] == "`booba?` - 6"

    async def test_reset_clears_user(self, group: SpamGroup, fake_bot: FakeBot) -> None:
        interaction = moderator_interaction(fake_bot)
        target = make_member(interaction.guild, user_id=42)
        for _ in range(4):
            fake_bot.chat_limiter.check(interaction.guild_id, 42)

        await group.reset.callback(group, interaction, user=target)

        assert fake_bot.chat_limiter.remaining_commands(interaction.guild_id, 42) == 3
        interaction.response.send_message.assert_awaited_once_with(
            "Rate limit reset for user <@42>", ephemeral=True
        )

    async def test_reset_requires_moderator(self, group: SpamGroup, fake_bot: FakeBot) -> None:
        interaction = make_interaction(fake_bot)
        fake_bot.chat_limiter.check(interaction.guild_id, 42)

        await group.reset.callback(group, interaction, user=make_member(interaction.guild, user_id=42))

        assert fake_bot.chat_limiter.remaining_commands(interaction.guild_id, 42) == 2
