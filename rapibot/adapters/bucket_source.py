"""Media listing for S3-compatible public buckets over HTTP(S).

Uses the ListObjectsV2 REST call (``GET /?list-type=2&prefix=...``), which
DigitalOcean Spaces, AWS S3 and most S3 clones answer with an XML document
when the bucket allows public listing. No credentials are sent.
"""

import xml.etree.ElementTree as ET

import aiohttp

from rapibot.core.errors import retry_with_backoff
from rapibot.core.logging import get_logger
from rapibot.core.media import MediaObject

logger = get_logger(__name__)

S3_NAMESPACE = "{http://s3.amazonaws.com/doc/2006-03-01/}"
REQUEST_TIMEOUT_SECONDS = 30
MAX_PAGES = 50


class BucketListingError(Exception):
    """Raised when the bucket listing cannot be fetched or parsed.

    Attributes:
        prefix: The prefix that was being listed.
        status: HTTP status of the failed response, if any.
    """

    def __init__(self, message: str, prefix: str, status: int | None = None) -> None:
        super().__init__(message)
        self.prefix = prefix
        self.status = status


def _find_text(element: ET.Element, tag: str) -> str | None:
    # Some S3 clones omit the namespace
    found = element.find(f"{S3_NAMESPACE}{tag}")
    if found is None:
        found = element.find(tag)
    return found.text if found is not None else None


def parse_listing(xml_text: str, prefix: str) -> tuple[list[MediaObject], str | None]:
    """Parse one ListObjectsV2 page.

    Args:
        xml_text: Response body.
        prefix: The listed prefix (for error context).

    Returns:
        Objects on the page and the continuation token (None on the last page).

    Raises:
        BucketListingError: If the body is not a valid listing.
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as ex:
        raise BucketListingError(f"Malformed bucket listing: {ex}", prefix) from ex

    contents = root.findall(f"{S3_NAMESPACE}Contents") or root.findall("Contents")
    objects: list[MediaObject] = []
    for item in contents:
        key = _find_text(item, "Key")
        if not key or key.endswith("/"):
            # Folder placeholder objects
            continue
        size_text = _find_text(item, "Size") or "0"
        try:
            size = int(size_text)
        except ValueError:
            size = 0
        objects.append(MediaObject(key=key, size=size))

    truncated = (_find_text(root, "IsTruncated") or "false").lower() == "true"
    token = _find_text(root, "NextContinuationToken") if truncated else None
    return objects, token


class HttpBucketSource:
    """MediaSource backed by a public S3-compatible bucket.

    Example:
        source = HttpBucketSource(
            bucket_url="https://rapi.sfo3.digitaloceanspaces.com",
            cdn_domain_url="https://rapi.sfo3.cdn.digitaloceanspaces.com",
        )
        objects = await source.list_objects("commands/booba/")
    """

    def __init__(
        self,
        bucket_url: str,
        cdn_domain_url: str,
        session: aiohttp.ClientSession | None = None,
        max_retries: int = 2,
    ) -> None:
        """Initialize the source.

        Args:
            bucket_url: Endpoint that answers ListObjectsV2 requests.
            cdn_domain_url: Public URL prefix used to build file URLs.
            session: Shared client session; a short-lived one is opened per
                listing when omitted.
            max_retries: Retries for transient network failures.
        """
        self._bucket_url = bucket_url.rstrip("/")
        self._cdn_domain_url = cdn_domain_url.rstrip("/")
        self._session = session
        self._max_retries = max_retries

    def url_for(self, key: str) -> str:
        return f"{self._cdn_domain_url}/{key.lstrip('/')}"

    async def list_objects(self, prefix: str) -> list[MediaObject]:
        """List every object under ``prefix``, following continuation tokens.

        Raises:
            BucketListingError: If the bucket answers with an error status or
                an unparseable body.
            TransientError: If network failures persist after retries.
        """
        return await retry_with_backoff(
            self._list_all, prefix, max_retries=self._max_retries
        )

    async def _list_all(self, prefix: str) -> list[MediaObject]:
        if self._session is not None:
            return await self._list_with(self._session, prefix)
        async with aiohttp.ClientSession() as session:
            return await self._list_with(session, prefix)

    async def _list_with(
        self, session: aiohttp.ClientSession, prefix: str
    ) -> list[MediaObject]:
        objects: list[MediaObject] = []
        token: str | None = None

        for _ in range(MAX_PAGES):
            params = {"list-type": "2", "prefix": prefix}
            if token:
                params["continuation-token"] = token

            async with session.get(
                f"{self._bucket_url}/",
                params=params,
                timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT_SECONDS),
            ) as response:
                body = await response.text()
                if response.status != 200:
                    logger.error(
                        "bucket_listing_failed",
                        prefix=prefix,
                        status=response.status,
                        body=body[:200],
                    )
                    raise BucketListingError(
                        f"Bucket listing failed with status {response.status}",
                        prefix,
                        status=response.status,
                    )

            page, token = parse_listing(body, prefix)
            objects.extend(page)
            if token is None:
                break

        logger.debug("bucket_listed", prefix=prefix, objects=len(objects))
        return objects
