"""Tests for the media source factory and in-memory source."""

from unittest.mock import patch

import pytest

from rapibot.adapters.bucket_source import HttpBucketSource
from rapibot.adapters.factory import create_media_source
from rapibot.adapters.memory_source import MemoryMediaSource
from rapibot.core.media import MediaObject


class TestCreateMediaSource:
    """Tests for create_media_source."""

    def test_http_backend(self) -> None:
        source = create_media_source("http", cdn_domain_url="https://cdn.example.com")
        assert isinstance(source, HttpBucketSource)
        assert source.url_for("a.png") == "https://cdn.example.com/a.png"

    def test_http_requires_cdn_url(self) -> None:
        with pytest.raises(ValueError, match="cdn_domain_url"):
            create_media_source("http")

    @patch("rapibot.adapters.gcs_source.storage.Client")
    def test_gcs_backend(self, mock_client_class) -> None:
        from rapibot.adapters.gcs_source import GCSMediaSource

        source = create_media_source("gcs", bucket_name=None)
        assert isinstance(source, GCSMediaSource)
        assert source.url_for("x") == "https://storage.googleapis.com/rapi-bot-media/x"
        mock_client_class.assert_not_called()

    def test_memory_backend(self) -> None:
        source = create_media_source("memory", objects=["a.png"])
        assert isinstance(source, MemoryMediaSource)

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError, match="Unsupported media backend"):
            create_media_source("ftp")


class TestMemoryMediaSource:
    """Tests for MemoryMediaSource."""

    async def test_prefix_filter_and_call_log(self) -> None:
        source = MemoryMediaSource(["memes/a.png", "nikke/b.png"])
        source.add("memes/c.gif", size=5)

        objects = await source.list_objects("memes/")

        assert objects == [MediaObject("memes/a.png"), MediaObject("memes/c.gif", 5)]
        assert source.list_calls == ["memes/"]

    def test_url_for(self) -> None:
        source = MemoryMediaSource(cdn_domain_url="https://cdn.test/")
        assert source.url_for("/a.png") == "https://cdn.test/a.png"
