"""Tests for general slash commands."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import discord
import pytest

from rapibot.clients.discord import phrases
from rapibot.clients.discord.commands.general import (
    build_age_embed,
    lucky_reply,
    register_general_commands,
)
from rapibot.core.rate_limit import CooldownLimiter
from rapibot.core.usage_store import UsageStore
from tests.mocks import FakeBot, make_guild, make_interaction, make_message, make_text_channel


@pytest.fixture
def bot(fake_bot: FakeBot, usage_store: UsageStore, clock, tmp_path: Path) -> FakeBot:
    fake_bot.cooldowns = CooldownLimiter({"lucky": usage_store}, data_dir=tmp_path, clock=clock)
    register_general_commands(fake_bot)
    return fake_bot


class TestLuckyReply:
    """Tests for lucky_reply."""

    def test_regular_roll(self) -> None:
        text, reactions = lucky_reply(50)
        assert "50" in text
        assert reactions == ("rapidd",)

    def test_low_roll(self) -> None:
        text, reactions = lucky_reply(2)
        assert text in {t.format(luck=2) for t in phrases.LUCKY_LOW}
        assert "HAH" in reactions

    def test_nice_roll(self) -> None:
        _, reactions = lucky_reply(69)
        assert reactions == ("rapidd", "KirbyS")

    def test_perfect_roll(self) -> None:
        text, reactions = lucky_reply(100)
        assert text in {t.format(luck=100) for t in phrases.LUCKY_PERFECT}
        assert reactions == ("rapidd", "Gamer", "GachaFlex")


class TestRegistration:
    """Tests for register_general_commands."""

    def test_registers_every_command(self, bot: FakeBot) -> None:
        assert set(bot.tree.commands) == {
            "help",
            "lucky",
            "age",
            "rapiball",
            "compositions",
            "relics",
            "rules",
            "meme",
            "nikke",
        }

    @pytest.mark.parametrize(
        ("name", "text", "ephemeral"),
        [
            ("help", phrases.HELP, True),
            ("rules", phrases.RULES, True),
            ("compositions", phrases.COMPOSITIONS, False),
            ("relics", phrases.RELICS, False),
        ],
    )
    async def test_static_replies(self, bot: FakeBot, name: str, text: str, ephemeral: bool) -> None:
        interaction = make_interaction(bot)

        await bot.tree.commands[name](interaction)

        args, kwargs = interaction.response.send_message.await_args
        assert args == (text,)
        assert kwargs.get("ephemeral", False) is ephemeral
        assert bot.uptime.commands_executed == 1


class TestLucky:
    """Tests for /lucky."""

    async def test_first_use_rolls_and_reacts(self, bot: FakeBot) -> None:
        interaction = make_interaction(bot)
        reply = make_message("")
        interaction.original_response.return_value = reply

        with patch("rapibot.clients.discord.commands.general.random.randint", return_value=50):
            await bot.tree.commands["lucky"](interaction)

        assert "50" in interaction.response.send_message.await_args.args[0]
        interaction.original_response.assert_awaited_once()

    async def test_second_use_same_day_denied(self, bot: FakeBot, clock) -> None:
        await bot.tree.commands["lucky"](make_interaction(bot))
        clock.now_ms += 86_000_000
        interaction = make_interaction(bot)

        await bot.tree.commands["lucky"](interaction)

        interaction.response.send_message.assert_awaited_once_with(
            "Sorry, Commander. You can use this command again in 0 hours and 6 minutes."
        )

    async def test_next_day_allowed(self, bot: FakeBot, clock) -> None:
        await bot.tree.commands["lucky"](make_interaction(bot))
        clock.now_ms += 86_400_001
        interaction = make_interaction(bot)

        await bot.tree.commands["lucky"](interaction)

        assert not interaction.response.send_message.await_args.args[0].startswith("Sorry")


class TestRapiball:
    """Tests for /rapiball."""

    async def test_answers_in_rapi_bot(self, bot: FakeBot) -> None:
        interaction = make_interaction(bot, channel=make_text_channel("rapi-bot"))

        await bot.tree.commands["rapiball"](interaction, question="Will I pull Red Hood?")

        text = interaction.response.send_message.await_args.args[0]
        assert text.startswith("**Question:** Will I pull Red Hood?\n\n **")
        assert any(answer in text for answer in phrases.RAPIBALL)

    async def test_blocked_elsewhere(self, bot: FakeBot) -> None:
        interaction = make_interaction(bot, channel=make_text_channel("general"))

        await bot.tree.commands["rapiball"](interaction, question="?")

        assert "restricted to the **#rapi-bot** channel" in (
            interaction.response.send_message.await_args.args[0]
        )


class TestAge:
    """Tests for /age."""

    def test_embed_fields(self, bot: FakeBot) -> None:
        bot.guilds = [make_guild(), make_guild(guild_id=101)]
        bot.chat_limiter.check(100, 1)
        bot.chat_limiter.check(101, 1)

        embed = build_age_embed(bot, 100)

        fields = {field.name: field.value for field in embed.fields}
        assert embed.title == "System Uptime"
        assert fields["⚡ Commands (Server)"] == "**1**"
        assert fields["🌐 Servers Connected"] == "**2**"
        assert fields["🌍 Commands (Global)"] == "**2**"
        assert bot.uptime.deployment_id in embed.footer.text

    async def test_age_command_is_ephemeral(self, bot: FakeBot) -> None:
        interaction = make_interaction(bot)

        await bot.tree.commands["age"](interaction)

        kwargs = interaction.response.send_message.await_args.kwargs
        assert isinstance(kwargs["embed"], discord.Embed)
        assert kwargs["ephemeral"] is True


class TestMemes:
    """Tests for /meme and /nikke."""

    async def test_meme_defers_then_sends(self, bot: FakeBot) -> None:
        interaction = make_interaction(bot)

        with patch(
            "rapibot.clients.discord.commands.general.send_media_followup", new=AsyncMock()
        ) as send:
            await bot.tree.commands["meme"](interaction)

        interaction.response.defer.assert_awaited_once()
        url = send.await_args.args[2]
        assert url in {"https://cdn.example.com/memes/a.png", "https://cdn.example.com/memes/b.webp"}

    async def test_empty_folder_gets_error_reply(self, bot: FakeBot) -> None:
        """No files under nikke/ in the fixture source."""
        interaction = make_interaction(bot)
        interaction.response.is_done.return_value = True

        await bot.tree.commands["nikke"](interaction)

        interaction.followup.send.assert_awaited_once_with(
            "Commander, there's no media available for that right now.", ephemeral=True
        )

    async def test_outside_guild(self, bot: FakeBot) -> None:
        interaction = make_interaction(bot)
        interaction.guild_id = None

        await bot.tree.commands["meme"](interaction)

        interaction.response.defer.assert_not_awaited()
        assert interaction.response.send_message.await_args.kwargs["ephemeral"] is True
