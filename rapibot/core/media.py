"""Random media selection from a CDN with per-guild repeat avoidance.

The picker lists files under a path from a ``MediaSource``, filters them by
extension and size, skips files recently served in the same guild and picks
one at random.
"""

import random
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from rapibot.core.errors import EmptyMediaPool
from rapibot.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_IMAGE_EXTENSIONS: tuple[str, ...] = (".gif", ".png", ".jpg", ".webp")
DEFAULT_VIDEO_EXTENSIONS: tuple[str, ...] = (".mp4",)
DEFAULT_TRACK_LAST = 3
DEFAULT_MAX_SIZE_MB = 100


@dataclass(frozen=True)
class MediaObject:
    """A file in the media bucket.

    Attributes:
        key: Full object key, e.g. ``commands/booba/01.png``.
        size: Size in bytes (0 when the source does not report it).
    """

    key: str
    size: int = 0


class MediaSource(Protocol):
    """Protocol for media listings (CDN bucket, GCS, in-memory)."""

    async def list_objects(self, prefix: str) -> list[MediaObject]:
        """List every object whose key starts with ``prefix``."""
        ...

    def url_for(self, key: str) -> str:
        """Return a publicly fetchable URL for a key."""
        ...


class RecentMediaHistory:
    """Bounded FIFO of recently served keys per (guild, path).

    Lives in memory only and is reset on restart.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], deque[str]] = {}

    def get(self, guild_id: str, path: str) -> list[str]:
        """Return the tracked keys, oldest first."""
        entries = self._entries.get((guild_id, path))
        return list(entries) if entries else []

    def record(self, guild_id: str, path: str, key: str, track_last: int) -> None:
        """Append a key, evicting the oldest beyond ``track_last``."""
        if track_last <= 0:
            self._entries.pop((guild_id, path), None)
            return
        entries = self._entries.get((guild_id, path))
        if entries is None or entries.maxlen != track_last:
            entries = deque(entries or (), maxlen=track_last)
            self._entries[(guild_id, path)] = entries
        entries.append(key)

    def reset(self, guild_id: str, path: str) -> None:
        self._entries.pop((guild_id, path), None)

    def __len__(self) -> int:
        return len(self._entries)


def matches_extension(key: str, extensions: Iterable[str]) -> bool:
    """Case-insensitive suffix match. An empty filter accepts everything."""
    lowered = key.lower()
    extensions = tuple(ext.lower() for ext in extensions)
    return not extensions or lowered.endswith(extensions)


class MediaPicker:
    """Pick random media URLs without immediate repeats per guild.

    Example:
        picker = MediaPicker(source)
        url = await picker.pick_random(
            "commands/booba/", guild_id="123", track_last=20
        )
    """

    def __init__(
        self,
        source: MediaSource,
        history: RecentMediaHistory | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the picker.

        Args:
            source: Where candidate files are listed from.
            history: Recent-pick tracker; a fresh one is created if omitted.
            rng: Random generator, injectable for deterministic tests.
        """
        self._source = source
        self._history = history or RecentMediaHistory()
        self._rng = rng or random.Random()

    @property
    def source(self) -> MediaSource:
        return self._source

    def history(self, guild_id: str, path: str) -> list[str]:
        """Keys recently served for a guild and path, oldest first."""
        return self._history.get(str(guild_id), path)

    async def candidates(
        self,
        path: str,
        extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS,
        max_size_mb: float = DEFAULT_MAX_SIZE_MB,
    ) -> list[str]:
        """List keys under ``path`` passing the extension and size filters.

        Raises:
            EmptyMediaPool: If nothing passes the filters.
        """
        extensions = tuple(extensions)
        max_bytes = max_size_mb * 1024 * 1024
        objects = await self._source.list_objects(path)
        keys = [
            obj.key
            for obj in objects
            if obj.key and obj.size <= max_bytes and matches_extension(obj.key, extensions)
        ]
        if not keys:
            raise EmptyMediaPool(path, extensions)
        return keys

    async def pick_random(
        self,
        path: str,
        guild_id: str | int,
        extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS,
        track_last: int = DEFAULT_TRACK_LAST,
        max_size_mb: float = DEFAULT_MAX_SIZE_MB,
    ) -> str:
        """Return a URL for a random file under ``path``.

        Files served recently in the same guild are skipped unless that would
        leave nothing to pick, in which case the history is reset and every
        candidate is eligible again.

        Args:
            path: Bucket prefix, e.g. ``commands/booba/``.
            guild_id: Guild the media is for.
            extensions: Allowed file extensions (case-insensitive).
            track_last: How many recent picks to avoid repeating.
            max_size_mb: Files larger than this are ignored.

        Returns:
            Public URL of the chosen file.

        Raises:
            ValueError: If ``path`` or ``guild_id`` is empty.
            EmptyMediaPool: If no file passes the filters.
        """
        if not path or not isinstance(path, str):
            raise ValueError("Valid prefix path is required")
        guild = str(guild_id) if guild_id is not None else ""
        if not guild:
            raise ValueError("Valid guild ID is required")

        keys = await self.candidates(path, extensions, max_size_mb)
        recent = set(self._history.get(guild, path))
        available = [key for key in keys if key not in recent]

        if not available:
            logger.info("media_history_exhausted", path=path, guild_id=guild)
            self._history.reset(guild, path)
            available = keys

        key = self._rng.choice(available)
        self._history.record(guild, path, key, track_last)

        logger.debug("media_picked", path=path, guild_id=guild, key=key, pool=len(keys))
        return self._source.url_for(key)
