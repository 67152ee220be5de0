"""Media source factory.

Supported backends:
- "http": Public S3-compatible bucket listed over HTTP (production default)
- "gcs": Google Cloud Storage bucket
- "memory": In-memory source for testing

Example:
    source = create_media_source(
        "http",
        bucket_url="https://rapi.sfo3.digitaloceanspaces.com",
        cdn_domain_url="https://cdn.example.com",
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rapibot.adapters.bucket_source import HttpBucketSource

if TYPE_CHECKING:
    from rapibot.core.media import MediaSource


def create_media_source(backend: str, **kwargs: Any) -> MediaSource:
    """Create a media source for the given backend.

    Args:
        backend: One of "http", "gcs" or "memory".
        **kwargs: Backend-specific options:
            - http: ``cdn_domain_url`` (required), ``bucket_url`` (defaults
              to ``cdn_domain_url``), ``session``
            - gcs: ``bucket_name``, ``cdn_domain_url``
            - memory: ``objects``, ``cdn_domain_url``

    Returns:
        A MediaSource instance.

    Raises:
        ValueError: If the backend is not supported or required kwargs are missing.
    """
    if backend == "http":
        cdn_domain_url = kwargs.get("cdn_domain_url")
        if not cdn_domain_url:
            raise ValueError("'cdn_domain_url' is required for http backend")
        return HttpBucketSource(
            bucket_url=kwargs.get("bucket_url") or cdn_domain_url,
            cdn_domain_url=cdn_domain_url,
            session=kwargs.get("session"),
        )

    if backend == "gcs":
        # Imported lazily so google-cloud-storage auth is only touched when used
        from rapibot.adapters.gcs_source import GCSMediaSource

        return GCSMediaSource(
            bucket_name=kwargs.get("bucket_name") or "rapi-bot-media",
            cdn_domain_url=kwargs.get("cdn_domain_url"),
        )

    if backend == "memory":
        from rapibot.adapters.memory_source import MemoryMediaSource

        return MemoryMediaSource(
            objects=kwargs.get("objects", ()),
            cdn_domain_url=kwargs.get("cdn_domain_url") or "https://cdn.example.com",
        )

    raise ValueError(
        f"Unsupported media backend: {backend!r}. Supported backends: 'http', 'gcs', 'memory'"
    )
