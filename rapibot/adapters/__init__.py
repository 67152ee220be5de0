"""Adapters for external media storage.

This module contains implementations of the MediaSource protocol for the
storage backends the bot can read media listings from.
"""

from rapibot.adapters.bucket_source import BucketListingError, HttpBucketSource
from rapibot.adapters.factory import create_media_source
from rapibot.adapters.memory_source import MemoryMediaSource

__all__ = [
    "BucketListingError",
    "HttpBucketSource",
    "MemoryMediaSource",
    "create_media_source",
]
