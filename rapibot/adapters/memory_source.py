"""In-memory media source for tests and offline runs."""

from collections.abc import Iterable

from rapibot.core.media import MediaObject


class MemoryMediaSource:
    """MediaSource over a fixed set of keys.

    Attributes:
        list_calls: Prefixes passed to ``list_objects``, in call order.
    """

    def __init__(
        self,
        objects: Iterable[MediaObject | str] = (),
        cdn_domain_url: str = "https://cdn.example.com",
    ) -> None:
        self._objects: list[MediaObject] = [
            obj if isinstance(obj, MediaObject) else MediaObject(key=obj)
            for obj in objects
        ]
        self._cdn_domain_url = cdn_domain_url.rstrip("/")
        self.list_calls: list[str] = []

    def add(self, key: str, size: int = 0) -> None:
        self._objects.append(MediaObject(key=key, size=size))

    async def list_objects(self, prefix: str) -> list[MediaObject]:
        self.list_calls.append(prefix)
        return [obj for obj in self._objects if obj.key.startswith(prefix)]

    def url_for(self, key: str) -> str:
        return f"{self._cdn_domain_url}/{key.lstrip('/')}"
