"""JSON-file backed store of per-user last-invocation timestamps.

One store holds one cooldown scope. The on-disk document is a JSON object
keyed by user id::

    {
        "123456789": {"lastTime": 1718000000000},
        "987654321": {"lastTime": 1718003600000}
    }

The document is loaded once at startup and rewritten whole after every
update. A missing or corrupt file is treated as an empty store.
"""

import asyncio
import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rapibot.core.errors import PersistenceError
from rapibot.core.logging import get_logger

logger = get_logger(__name__)

LAST_TIME_KEY = "lastTime"


@dataclass
class UsageRecord:
    """Last allowed invocation of a scoped command by one user.

    Attributes:
        user_id: Discord user id (as a string, like the file keys).
        last_time: Epoch milliseconds of the last allowed use.
        extra: Unknown keys read from the file, written back untouched.
    """

    user_id: str
    last_time: int
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the on-disk entry shape."""
        return {**self.extra, LAST_TIME_KEY: self.last_time}


class UsageStore:
    """In-memory map of user id to UsageRecord, mirrored to a JSON file.

    Records are never removed, so the store grows with every new user.

    Example:
        store = UsageStore(Path("user_data.json"))
        store.load()
        store.set("123", 1718000000000)
        await store.save_async()
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize the store.

        Args:
            path: Location of the JSON document.
        """
        self._path = Path(path)
        self._records: dict[str, UsageRecord] = {}
        self._save_lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        """Location of the JSON document."""
        return self._path

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, user_id: object) -> bool:
        return str(user_id) in self._records

    def load(self) -> int:
        """Replace the in-memory records with the file contents.

        Never raises: a missing, unreadable or malformed file leaves the
        store empty and logs the reason.

        Returns:
            Number of records loaded.
        """
        self._records = {}

        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("usage_store_missing", path=str(self._path))
            return 0
        except OSError as ex:
            logger.warning("usage_store_load_failed", path=str(self._path), error=str(ex))
            return 0

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as ex:
            logger.warning("usage_store_load_failed", path=str(self._path), error=str(ex))
            return 0

        if not isinstance(data, dict):
            logger.warning(
                "usage_store_load_failed",
                path=str(self._path),
                error=f"expected a JSON object, got {type(data).__name__}",
            )
            return 0

        for user_id, entry in data.items():
            record = self._parse_entry(str(user_id), entry)
            if record is not None:
                self._records[record.user_id] = record

        logger.info("usage_store_loaded", path=str(self._path), records=len(self._records))
        return len(self._records)

    def _parse_entry(self, user_id: str, entry: object) -> UsageRecord | None:
        if not isinstance(entry, dict):
            logger.warning("usage_entry_skipped", user_id=user_id, reason="not an object")
            return None

        last_time = entry.get(LAST_TIME_KEY)
        # bool is an int subclass but never a valid timestamp
        if isinstance(last_time, bool) or not isinstance(last_time, int):
            logger.warning("usage_entry_skipped", user_id=user_id, reason="bad lastTime")
            return None

        extra = {k: v for k, v in entry.items() if k != LAST_TIME_KEY}
        return UsageRecord(user_id=user_id, last_time=last_time, extra=extra)

    def get(self, user_id: str | int) -> UsageRecord | None:
        """Return the record for a user, or None if they never used the scope."""
        return self._records.get(str(user_id))

    def set(self, user_id: str | int, last_time: int) -> UsageRecord:
        """Create or overwrite the record for a user (memory only).

        Args:
            user_id: The user id.
            last_time: Epoch milliseconds of the allowed use.

        Returns:
            The updated record.
        """
        key = str(user_id)
        record = self._records.get(key)
        if record is None:
            record = UsageRecord(user_id=key, last_time=last_time)
            self._records[key] = record
        else:
            record.last_time = last_time
        return record

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Return the serializable document for the current records."""
        return {user_id: record.to_dict() for user_id, record in self._records.items()}

    def serialize(self) -> str:
        """Render the current records as the on-disk JSON text.

        Raises:
            PersistenceError: If a record holds a value JSON cannot encode.
        """
        try:
            return json.dumps(self.snapshot(), indent=4)
        except (TypeError, ValueError) as ex:
            raise PersistenceError(
                f"Failed to serialize usage store {self._path}: {ex}",
                path=str(self._path),
                original_error=ex,
            ) from ex

    def write(self, payload: str) -> None:
        """Atomically replace the file with ``payload``.

        The write goes to a temporary file in the same directory which then
        replaces the target, so readers never see a half-written file. Does
        not touch the records, so it is safe to run off the event loop.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as ex:
            raise PersistenceError(
                f"Failed to save usage store {self._path}: {ex}",
                path=str(self._path),
                original_error=ex,
            ) from ex

    def save(self) -> None:
        """Write the whole document to disk.

        Raises:
            PersistenceError: If the document cannot be serialized or written.
        """
        self.write(self.serialize())

    async def save_async(self) -> None:
        """Snapshot on the event loop, then write in a worker thread.

        Saves are serialized per store and each takes its snapshot once it
        holds the lock, so the last write on disk reflects the latest records.

        Raises:
            PersistenceError: If the write fails.
        """
        async with self._save_lock:
            payload = self.serialize()
            await asyncio.to_thread(self.write, payload)
