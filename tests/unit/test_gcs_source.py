"""Tests for the Google Cloud Storage media source."""

from unittest.mock import MagicMock, patch

import pytest

from rapibot.adapters.gcs_source import GCSListingError, GCSMediaSource
from rapibot.core.media import MediaObject


def blob(name: str, size: int | None = 1) -> MagicMock:
    item = MagicMock()
    item.name = name
    item.size = size
    return item


class TestGCSMediaSource:
    """Tests for GCSMediaSource."""

    def test_default_public_url(self) -> None:
        source = GCSMediaSource(bucket_name="media")
        assert source.url_for("memes/a.png") == "https://storage.googleapis.com/media/memes/a.png"

    def test_custom_cdn_url(self) -> None:
        source = GCSMediaSource(cdn_domain_url="https://cdn.example.com/")
        assert source.url_for("a.png") == "https://cdn.example.com/a.png"

    @patch("rapibot.adapters.gcs_source.storage.Client")
    async def test_lists_objects(self, mock_client_class: MagicMock) -> None:
        client = mock_client_class.return_value
        client.list_blobs.return_value = [
            blob("memes/", 0),
            blob("memes/a.png", 10),
            blob("memes/b.gif", None),
        ]
        source = GCSMediaSource(bucket_name="media")

        objects = await source.list_objects("memes/")

        assert objects == [MediaObject("memes/a.png", 10), MediaObject("memes/b.gif", 0)]
        client.list_blobs.assert_called_once_with("media", prefix="memes/")

    @patch("rapibot.adapters.gcs_source.storage.Client")
    def test_client_created_lazily_once(self, mock_client_class: MagicMock) -> None:
        mock_client_class.return_value.list_blobs.return_value = []
        source = GCSMediaSource()
        mock_client_class.assert_not_called()

        source.list_objects_sync("a/")
        source.list_objects_sync("b/")

        mock_client_class.assert_called_once()

    @patch("rapibot.adapters.gcs_source.storage.Client")
    def test_failure_wrapped(self, mock_client_class: MagicMock) -> None:
        mock_client_class.return_value.list_blobs.side_effect = RuntimeError("no auth")
        source = GCSMediaSource()

        with pytest.raises(GCSListingError) as exc_info:
            source.list_objects_sync("memes/")

        assert exc_info.value.prefix == "memes/"
        assert isinstance(exc_info.value.original_error, RuntimeError)
