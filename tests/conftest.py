"""Shared pytest fixtures for rapi-bot tests."""

import random
from pathlib import Path

import pytest

from rapibot.adapters.memory_source import MemoryMediaSource
from rapibot.core.media import MediaPicker
from rapibot.core.usage_store import UsageStore
from tests.mocks import FakeBot


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


@pytest.fixture
def clock() -> FakeClock:
    """Provide a controllable clock for cooldown tests."""
    return FakeClock()


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    """Path for a usage store file inside the test's temp directory."""
    return tmp_path / "user_data.json"


@pytest.fixture
def usage_store(store_path: Path) -> UsageStore:
    """Provide an empty, loaded usage store backed by a temp file."""
    store = UsageStore(store_path)
    store.load()
    return store


@pytest.fixture
def media_source() -> MemoryMediaSource:
    """Provide an in-memory media source with a few folders of files.

    Returns:
        MemoryMediaSource: Source containing ``commands/booba/`` images,
        a ``commands/seggs/`` video and ``memes/`` files.
    """
    return MemoryMediaSource(
        [
            "commands/booba/01.png",
            "commands/booba/02.JPG",
            "commands/booba/03.gif",
            "commands/seggs/01.mp4",
            "memes/a.png",
            "memes/b.webp",
        ],
        cdn_domain_url="https://cdn.example.com",
    )


@pytest.fixture
def media_picker(media_source: MemoryMediaSource) -> MediaPicker:
    """Provide a picker over ``media_source`` with a seeded RNG."""
    return MediaPicker(media_source, rng=random.Random(1234))


@pytest.fixture
def fake_bot(media_picker: MediaPicker) -> FakeBot:
    """Provide a FakeBot wired to the in-memory media picker."""
    return FakeBot(media_picker=media_picker)
