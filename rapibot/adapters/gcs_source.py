"""Google Cloud Storage media listing.

This module provides a GCSMediaSource that lists media objects in a GCS
bucket and builds their public URLs. The google-cloud-storage client is
blocking, so listings run in a worker thread.
"""

import asyncio
import logging

from google.cloud import storage

from rapibot.core.media import MediaObject

logger = logging.getLogger(__name__)


class GCSListingError(Exception):
    """Exception raised when a GCS listing fails.

    Attributes:
        prefix: The prefix that was being listed.
        original_error: The underlying exception that caused the failure.
    """

    def __init__(
        self,
        message: str,
        prefix: str,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.prefix = prefix
        self.original_error = original_error


class GCSMediaSource:
    """MediaSource backed by a Google Cloud Storage bucket.

    Example:
        source = GCSMediaSource(bucket_name="rapi-bot-media")
        objects = await source.list_objects("commands/booba/")
        url = source.url_for(objects[0].key)
    """

    def __init__(
        self,
        bucket_name: str = "rapi-bot-media",
        cdn_domain_url: str | None = None,
    ) -> None:
        """Initialize the GCS source.

        Args:
            bucket_name: Name of the GCS bucket holding the media.
            cdn_domain_url: Public URL prefix for objects. Defaults to the
                bucket's storage.googleapis.com URL.
        """
        self._bucket_name = bucket_name
        self._cdn_domain_url = (
            cdn_domain_url or f"https://storage.googleapis.com/{bucket_name}"
        ).rstrip("/")
        self._client: storage.Client | None = None

    def _get_client(self) -> storage.Client:
        """Get or create the GCS client (lazily, on first listing)."""
        if self._client is None:
            self._client = storage.Client()
        return self._client

    def url_for(self, key: str) -> str:
        return f"{self._cdn_domain_url}/{key.lstrip('/')}"

    def list_objects_sync(self, prefix: str) -> list[MediaObject]:
        """List objects under ``prefix`` (blocking).

        Raises:
            GCSListingError: If the listing fails for any reason.
        """
        try:
            client = self._get_client()
            blobs = client.list_blobs(self._bucket_name, prefix=prefix)
            objects = [
                MediaObject(key=blob.name, size=blob.size or 0)
                for blob in blobs
                if not blob.name.endswith("/")
            ]
        except Exception as ex:
            logger.error(
                "Failed to list GCS objects",
                extra={"bucket": self._bucket_name, "prefix": prefix, "error": str(ex)},
                exc_info=True,
            )
            raise GCSListingError(
                f"Failed to list {prefix!r} in GCS: {ex}",
                prefix=prefix,
                original_error=ex,
            ) from ex

        logger.debug(
            "Listed GCS objects",
            extra={"bucket": self._bucket_name, "prefix": prefix, "count": len(objects)},
        )
        return objects

    async def list_objects(self, prefix: str) -> list[MediaObject]:
        return await asyncio.to_thread(self.list_objects_sync, prefix)
