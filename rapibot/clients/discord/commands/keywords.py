"""Keyword-triggered chat commands.

Most keyword commands reply with a random file from a CDN folder and an
optional line of text, so they are declared as ``MediaReply`` rows. The few
with extra behaviour (reactions, timeouts, fixed files) are plain handlers.
"""

import random
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, time, timedelta
from typing import TYPE_CHECKING

import discord

from rapibot.clients.discord import phrases
from rapibot.clients.discord.constants import NIKKE_CHANNEL, SPAM_TIMEOUT_SECONDS
from rapibot.clients.discord.utils import find_emoji, send_media_reply
from rapibot.core.logging import get_logger
from rapibot.core.media import (
    DEFAULT_IMAGE_EXTENSIONS,
    DEFAULT_TRACK_LAST,
    DEFAULT_VIDEO_EXTENSIONS,
)
from rapibot.core.rate_limit import is_rate_limited_command
from rapibot.core.registry import ChatCommand, ChatHandler

if TYPE_CHECKING:
    from rapibot.clients.discord.bot import DiscordBot

logger = get_logger(__name__)

MEDIA_EXTENSIONS = DEFAULT_IMAGE_EXTENSIONS + DEFAULT_VIDEO_EXTENSIONS

# "good girl" stays quiet in #nikke during the daily reset announcement
NIKKE_RESET_START = time(20, 0, 0)
NIKKE_RESET_END = time(20, 0, 15)

TIMEOUT_CHANCE = 0.04

ReplyText = str | Callable[[discord.Message], str] | None


def _pick(options: tuple[str, ...]) -> Callable[[discord.Message], str]:
    return lambda _message: random.choice(options)


def _read_nikke(message: discord.Message) -> str:
    mentioned = message.mentions[0] if message.mentions else None
    prefix = f"Commander {mentioned.mention}, " if mentioned else "Commander, "
    return prefix + random.choice(phrases.READ_NIKKE)


def _get_dat_nikke(message: discord.Message) -> str:
    mentioned = message.mentions[0] if message.mentions else None
    return f"Commander {mentioned.mention}... " if mentioned else ""


def _quiet_rapi(message: discord.Message) -> str:
    return f"{message.author.mention}, {random.choice(phrases.QUIET_RAPI)}"


@dataclass(frozen=True)
class MediaReply:
    """A chat command answered with random media from one CDN folder.

    Attributes:
        key: Registry key.
        name: Trigger text.
        path: CDN folder the media is picked from.
        extensions: Allowed file extensions.
        track_last: Recent picks per guild that are not repeated.
        reply: Fixed text, a function building text from the message, or None.
        reactions: Emoji (unicode or guild emoji names) added to the trigger.
    """

    key: str
    name: str
    path: str
    extensions: tuple[str, ...] = DEFAULT_IMAGE_EXTENSIONS
    track_last: int = DEFAULT_TRACK_LAST
    reply: ReplyText = None
    reactions: tuple[str, ...] = ()

    def reply_text(self, message: discord.Message) -> str | None:
        if callable(self.reply):
            return self.reply(message)
        return self.reply


MEDIA_REPLIES: tuple[MediaReply, ...] = (
    MediaReply("readnikke", "read nikke", "commands/readNikke/", reply=_read_nikke),
    MediaReply("getdatnikke", "rapi get dat nikke", "commands/getDatNikke/", reply=_get_dat_nikke),
    MediaReply("booba", "booba?", "commands/booba/", track_last=20),
    MediaReply("booty", "booty?", "commands/booty/", track_last=20),
    MediaReply(
        "skillissue",
        "sounds like...",
        "commands/skillIssue/",
        extensions=MEDIA_EXTENSIONS,
        reply="It sounds like you have some skill issues Commander.",
    ),
    MediaReply(
        "skillissueiphone",
        "sounds like…",
        "commands/skillIssue/",
        reply="It sounds like you have some skill issues Commander.",
    ),
    MediaReply(
        "seggs",
        "seggs?",
        "commands/seggs/",
        extensions=DEFAULT_VIDEO_EXTENSIONS,
        reply="Wait, Shifty, what are you talking about?",
    ),
    MediaReply("kindaweird", "kinda weird...", "commands/kindaWeird/", reply="But why, Commander?..."),
    MediaReply(
        "iswear",
        "i swear she is actually 3000 years old",
        "commands/iSwear/",
        reply="Commander... I'm calling the authorities.",
    ),
    MediaReply(
        "teengame",
        "12+ game",
        "commands/12Game/",
        reply="Commander the surface is obviously safe for 12 year old kids.",
    ),
    MediaReply(
        "justice",
        "justice for...",
        "commands/justice/",
        track_last=4,
        reply="Commander, let's take her out of NPC jail.",
    ),
    MediaReply("whale", "whale levels", "commands/whaling/", reply="Commander, it's fine if you are poor."),
    MediaReply(
        "wronggirl",
        "wrong girl",
        "commands/wrongGirl/",
        track_last=1,
        reply="(￢з￢) Well well, so you DO see us that way, interesting!",
    ),
    MediaReply(
        "moldrates",
        "mold rates are not that bad",
        "commands/moldRates/",
        track_last=1,
        reply="Commander, what are you talking about?",
    ),
    MediaReply("readyrapi", "ready rapi?", "commands/ready/", track_last=1, reply="Commander... ready for what?"),
    MediaReply("badgirl", "bad girl", "commands/wrong/", track_last=1, reply="Commander..."),
    MediaReply("reward", "reward?", "commands/reward/", track_last=1, reply="Commander..."),
    MediaReply(
        "damntrain",
        "damn train",
        "commands/damnTrain/",
        track_last=1,
        reply="Commander...we don't talk about trains here.",
        reactions=("❌",),
    ),
    MediaReply("ikuyo", "lets go!", "commands/ikuyo/", track_last=20, reply="Ikuyo, AZX!"),
    MediaReply(
        "damngravedigger",
        "damn gravedigger",
        "commands/damnGravedigger/",
        track_last=2,
        reply="Commander...damn gravedigger?",
    ),
    MediaReply(
        "deadspicy",
        "dead spicy?",
        "commands/deadSpicy/",
        extensions=(".gif",),
        track_last=1,
        reply="Commander...dead spicy?",
    ),
    MediaReply(
        "curseofbelorta",
        "belorta...",
        "commands/belorta/",
        extensions=MEDIA_EXTENSIONS,
        track_last=5,
        reply=phrases.BELORTA,
    ),
    MediaReply(
        "ccprules",
        "ccp rules...",
        "commands/ccpRules/",
        track_last=1,
        reply="Commander...please review our CCP Guidelines set by El Shafto...",
    ),
    MediaReply("bestgirl", "best girl?", "commands/bestGirl/", reply=_pick(phrases.BEST_GIRL)),
    MediaReply(
        "gambleradvice",
        "99%",
        "commands/gamblerAdvice/",
        reply="Commander...did you know 99% of gamblers quit before hitting it big?",
    ),
    MediaReply(
        "ccpnumbahone",
        "ccp #1",
        "commands/ccp/",
        extensions=DEFAULT_VIDEO_EXTENSIONS,
        track_last=1,
        reply=_pick(phrases.MANTRAS),
    ),
    MediaReply(
        "dorover",
        "is it over?",
        "commands/dorover/",
        extensions=(".jpg",),
        track_last=1,
        reply="Commander....ITS DOROVER",
    ),
    MediaReply("cinema", "absolute...", "commands/cinema/", track_last=1),
    MediaReply("plan", "we had a plan!", "commands/plan/", track_last=8, reply=_pick(phrases.PLAN)),
    MediaReply(
        "leadership",
        "ccp leadership",
        "commands/leadership/",
        extensions=DEFAULT_VIDEO_EXTENSIONS,
        track_last=20,
        reply=_pick(phrases.LEADERSHIP),
    ),
    MediaReply(
        "goodidea",
        "good idea!",
        "commands/goodIdea/",
        reply=_pick(phrases.GOOD_IDEA),
        reactions=("wecant", "HAH"),
    ),
    MediaReply("quietrapi", "quiet rapi", "commands/quietRapi/", reply=_quiet_rapi),
    MediaReply(
        "entertainmentttt",
        "entertainmentttt",
        "commands/entertainmentttt/",
        extensions=DEFAULT_VIDEO_EXTENSIONS,
    ),
    MediaReply("casualunion", "we casual", "commands/casualUnion/"),
)

LAP_OF_COUNTERS_KEY = "commands/lapOfDiscipline/lapOfCounters.webp"
LAP_OF_DISCIPLINE_KEY = "commands/lapOfDiscipline/lapOfDiscipline.jpg"


async def add_reactions(message: discord.Message, reactions: tuple[str, ...]) -> None:
    """React with unicode emoji or guild emoji looked up by name."""
    for reaction in reactions:
        emoji: str | discord.Emoji | None = reaction
        if reaction.isascii():
            emoji = find_emoji(message.guild, reaction)
            if emoji is None:
                logger.warning("emoji_not_found", emoji=reaction)
                continue
        try:
            await message.add_reaction(emoji)
        except discord.HTTPException as ex:
            logger.warning("reaction_failed", emoji=reaction, error=str(ex))


def media_handler(bot: "DiscordBot", entry: MediaReply) -> ChatHandler:
    """Build the chat handler for a ``MediaReply`` row."""

    async def execute(message: discord.Message, args: list[str]) -> None:
        url = await bot.media_picker.pick_random(
            entry.path,
            message.guild.id,
            extensions=entry.extensions,
            track_last=entry.track_last,
        )
        await send_media_reply(bot, message, url, entry.reply_text(message))
        if entry.reactions:
            await add_reactions(message, entry.reactions)

    return execute


def in_nikke_reset_window(now: datetime) -> bool:
    current = now.astimezone(UTC).time()
    return NIKKE_RESET_START <= current <= NIKKE_RESET_END


async def timeout_for_peace(message: discord.Message) -> None:
    """Rapi occasionally asks for some quiet time away from the Commander."""
    author = message.author
    if random.random() < 0.5:
        try:
            await author.timeout(
                timedelta(seconds=SPAM_TIMEOUT_SECONDS),
                reason="Commander, I need a moment of peace away from you!",
            )
        except discord.HTTPException as ex:
            logger.warning("peace_timeout_failed", error=str(ex))
            await message.reply(f"Something caught me off guard...Commander {author.mention}...")
            return
        await add_reactions(message, ("❌",))
        await message.reply(
            f"Honestly, Commander {author.mention}, can't I get a moment of peace?! "
            "Enjoy your 5 minutes of quiet time!"
        )
    else:
        await message.reply(
            f"Well, I tried to give myself a break from you, Commander {author.mention}..."
            "but maybe I was being too rash. Thank you, Commander..."
        )


def register_keyword_commands(bot: "DiscordBot") -> None:
    """Register keyword chat commands with the bot.

    Args:
        bot: The Discord bot instance.
    """

    def add(key: str, name: str, execute: ChatHandler, description: str | None = None) -> None:
        bot.registry.register(
            ChatCommand(
                key=key,
                name=name,
                execute=execute,
                description=description,
                rate_limited=is_rate_limited_command(name),
            )
        )

    for entry in MEDIA_REPLIES:
        add(entry.key, entry.name, media_handler(bot, entry))

    async def discipline(message: discord.Message, args: list[str]) -> None:
        author = message.author.mention
        await send_media_reply(
            bot, message, bot.cdn_url(LAP_OF_COUNTERS_KEY), f"Commander {author}..."
        )
        await send_media_reply(
            bot,
            message,
            bot.cdn_url(LAP_OF_DISCIPLINE_KEY),
            f"Commander {author}... Lap of discipline.",
        )

    async def good_girl(message: discord.Message, args: list[str]) -> None:
        channel_name = getattr(message.channel, "name", None)
        if channel_name == NIKKE_CHANNEL and in_nikke_reset_window(datetime.now(UTC)):
            return
        if random.random() < TIMEOUT_CHANCE:
            await timeout_for_peace(message)
        else:
            await message.reply(f"Thank you Commander {message.author.mention}.")

    async def dammit(message: discord.Message, args: list[str]) -> None:
        await message.reply("Sorry Commander.")

    add("discipline", "lap of discipline.", discipline)
    add("goodgirl", "good girl", good_girl, "good girl Rapi")
    add("dammit", "dammit rapi", dammit, "dammit rapi")

    logger.info("keyword_commands_registered", count=len(bot.registry))
