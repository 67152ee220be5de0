"""Tests for the JSON-backed usage store."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from rapibot.core.errors import PersistenceError
from rapibot.core.usage_store import LAST_TIME_KEY, UsageRecord, UsageStore


class TestUsageRecord:
    """Tests for UsageRecord serialization."""

    def test_to_dict_uses_file_key(self) -> None:
        record = UsageRecord(user_id="1", last_time=42)
        assert record.to_dict() == {"lastTime": 42}

    def test_to_dict_keeps_extra_keys(self) -> None:
        """Unknown keys read from disk are written back."""
        record = UsageRecord(user_id="1", last_time=42, extra={"note": "x"})
        assert record.to_dict() == {"note": "x", "lastTime": 42}


class TestLoad:
    """Tests for UsageStore.load."""

    def test_missing_file_gives_empty_store(self, store_path: Path) -> None:
        store = UsageStore(store_path)
        assert store.load() == 0
        assert len(store) == 0

    def test_malformed_json_gives_empty_store(self, store_path: Path) -> None:
        """A corrupt file must not crash startup."""
        store_path.write_text("{not json", encoding="utf-8")
        store = UsageStore(store_path)

        assert store.load() == 0
        assert len(store) == 0

    def test_non_object_top_level_gives_empty_store(self, store_path: Path) -> None:
        store_path.write_text("[1, 2, 3]", encoding="utf-8")
        store = UsageStore(store_path)
        assert store.load() == 0

    def test_loads_valid_entries(self, store_path: Path) -> None:
        store_path.write_text(
            json.dumps({"111": {"lastTime": 1000}, "222": {"lastTime": 2000}}),
            encoding="utf-8",
        )
        store = UsageStore(store_path)

        assert store.load() == 2
        assert store.get("111").last_time == 1000
        assert store.get(222).last_time == 2000
        assert "111" in store
        assert 111 in store

    def test_skips_invalid_entries(self, store_path: Path) -> None:
        """Entries without an integer lastTime are dropped, others kept."""
        store_path.write_text(
            json.dumps({
                "ok": {"lastTime": 5},
                "string": {"lastTime": "5"},
                "bool": {"lastTime": True},
                "missing": {},
                "scalar": 7,
            }),
            encoding="utf-8",
        )
        store = UsageStore(store_path)

        assert store.load() == 1
        assert store.get("ok") is not None
        assert store.get("bool") is None

    def test_preserves_unknown_keys(self, store_path: Path) -> None:
        store_path.write_text(
            json.dumps({"111": {"lastTime": 1, "streak": 3}}), encoding="utf-8"
        )
        store = UsageStore(store_path)
        store.load()

        assert store.get("111").extra == {"streak": 3}

    def test_reload_replaces_records(self, store_path: Path) -> None:
        store = UsageStore(store_path)
        store.set("stale", 1)
        store.load()
        assert "stale" not in store


class TestSetAndSave:
    """Tests for UsageStore.set and persistence."""

    def test_set_creates_then_overwrites(self, usage_store: UsageStore) -> None:
        usage_store.set("1", 100)
        usage_store.set("1", 200)

        assert len(usage_store) == 1
        assert usage_store.get("1").last_time == 200

    def test_save_round_trip(self, usage_store: UsageStore, store_path: Path) -> None:
        usage_store.set("1", 100)
        usage_store.set(2, 200)
        usage_store.save()

        on_disk = json.loads(store_path.read_text(encoding="utf-8"))
        assert on_disk == {"1": {LAST_TIME_KEY: 100}, "2": {LAST_TIME_KEY: 200}}

        reloaded = UsageStore(store_path)
        assert reloaded.load() == 2

    def test_save_creates_parent_directory(self, tmp_path: Path) -> None:
        store = UsageStore(tmp_path / "nested" / "dir" / "scope.json")
        store.set("1", 1)
        store.save()
        assert store.path.exists()

    def test_save_leaves_no_temp_files(self, usage_store: UsageStore, store_path: Path) -> None:
        usage_store.set("1", 1)
        usage_store.save()
        assert [p.name for p in store_path.parent.iterdir()] == [store_path.name]

    def test_save_failure_raises_persistence_error(self, usage_store: UsageStore) -> None:
        usage_store.set("1", 1)
        with patch("rapibot.core.usage_store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceError) as exc_info:
                usage_store.save()

        assert exc_info.value.path == str(usage_store.path)
        assert isinstance(exc_info.value.original_error, OSError)

    async def test_save_async_writes_file(self, usage_store: UsageStore, store_path: Path) -> None:
        usage_store.set("1", 123)
        await usage_store.save_async()
        assert json.loads(store_path.read_text(encoding="utf-8"))["1"]["lastTime"] == 123

    async def test_save_async_snapshots_before_thread(
        self, usage_store: UsageStore, store_path: Path
    ) -> None:
        """Records changed while the write runs are left for the next save."""
        usage_store.set("1", 1)

        async def to_thread(func, *args):
            usage_store.set("2", 2)
            return func(*args)

        with patch("rapibot.core.usage_store.asyncio.to_thread", new=to_thread):
            await usage_store.save_async()

        assert json.loads(store_path.read_text(encoding="utf-8")) == {"1": {"lastTime": 1}}

    def test_serialize_failure_raises_persistence_error(self, usage_store: UsageStore) -> None:
        usage_store.set("1", 1)
        usage_store.get("1").extra["bad"] = object()

        with pytest.raises(PersistenceError) as exc_info:
            usage_store.serialize()

        assert isinstance(exc_info.value.original_error, TypeError)

    def test_records_are_never_removed(self, usage_store: UsageStore) -> None:
        """The store only grows."""
        for user in range(50):
            usage_store.set(str(user), user)
        assert len(usage_store) == 50
