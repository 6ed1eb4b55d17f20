"""Tests for local persistence."""

import asyncio
import json
from decimal import Decimal

import pytest

from smsexpense.core.errors import PersistenceError, SourceUnavailableError
from smsexpense.core.models import TransactionRecord, TransactionType
from smsexpense.sources.json_source import JsonFileMessageSource
from smsexpense.storage.kv_store import KeyValueStore
from smsexpense.storage.sync_state import SyncStateStore, last_sync_key
from smsexpense.storage.transaction_store import KeyValueTransactionStore

from .conftest import NOW_MS, UPI_SWIGGY


def _record(amount="750.00", vendor="SWIGGY"):
    return TransactionRecord(
        amount=Decimal(amount),
        type=TransactionType.EXPENSE,
        vendor=vendor,
        category="food",
        description="SMS Import: test",
        tags=["sms-import", "confidence:100%"],
    )


class TestKeyValueStore:
    """Test the JSON key-value store."""

    def test_round_trip_through_file(self, tmp_path):
        path = tmp_path / "state" / "kv.json"
        asyncio.run(KeyValueStore(path).write_json("a", {"b": 1}))

        assert asyncio.run(KeyValueStore(path).read_json("a")) == {"b": 1}
        assert not path.with_suffix(".json.tmp").exists()

    def test_missing_key(self):
        assert asyncio.run(KeyValueStore().read_json("nope")) is None

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "kv.json"
        path.write_text("{not json")

        with pytest.raises(PersistenceError):
            asyncio.run(KeyValueStore(path).read_json("a"))

    def test_keys_by_prefix(self):
        kv = KeyValueStore()
        asyncio.run(kv.write_json("x:1", 1))
        asyncio.run(kv.write_json("y:1", 2))

        assert asyncio.run(kv.keys("x:")) == ["x:1"]


class TestTransactionStore:
    """Test the key-value backed transaction store."""

    def test_create_and_list_newest_first(self, tmp_path):
        store = KeyValueTransactionStore(KeyValueStore(tmp_path / "tx.json"))
        asyncio.run(store.create(_record("100.00", "First")))
        created = asyncio.run(store.create(_record("200.00", "Second")))

        reloaded = KeyValueTransactionStore(KeyValueStore(tmp_path / "tx.json"))
        rows = asyncio.run(reloaded.list_transactions())

        assert [r.record.vendor for r in rows] == ["Second", "First"]
        assert rows[0].id == created.id
        assert rows[0].record.amount == Decimal("200.0")

    def test_rejects_non_positive_amount(self):
        store = KeyValueTransactionStore()

        with pytest.raises(PersistenceError):
            asyncio.run(store.create(_record("0")))


class TestSyncStateStore:
    """Test the per-day sync cursor."""

    def test_key_is_local_day(self):
        assert last_sync_key(NOW_MS) == "smsImport:lastSync:2024-01-15"

    def test_cursor_never_moves_backwards(self):
        state = SyncStateStore(KeyValueStore())
        asyncio.run(state.set_last_sync(NOW_MS, NOW_MS))
        asyncio.run(state.set_last_sync(NOW_MS, NOW_MS - 1000))

        assert asyncio.run(state.get_last_sync(NOW_MS)) == NOW_MS
        assert asyncio.run(state.latest_sync()) == NOW_MS

    def test_empty(self):
        state = SyncStateStore(KeyValueStore())

        assert asyncio.run(state.get_last_sync(NOW_MS)) is None
        assert asyncio.run(state.latest_sync()) is None


class TestJsonFileMessageSource:
    """Test reading an exported inbox."""

    def test_reads_bare_list(self, tmp_path, make_record):
        path = tmp_path / "sms.json"
        path.write_text(json.dumps([make_record(1, UPI_SWIGGY), make_record(2, "hi", box_type=2)]))

        records = asyncio.run(JsonFileMessageSource(path).list_messages())

        assert [r["_id"] for r in records] == [1]

    def test_reads_wrapped_list(self, tmp_path, make_record):
        path = tmp_path / "sms.json"
        path.write_text(json.dumps({"messages": [make_record(1, UPI_SWIGGY)]}))

        assert len(asyncio.run(JsonFileMessageSource(path).list_messages())) == 1

    def test_missing_file(self, tmp_path):
        source = JsonFileMessageSource(tmp_path / "missing.json")

        assert not source.is_available()
        with pytest.raises(SourceUnavailableError):
            asyncio.run(source.list_messages())

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "sms.json"
        path.write_text(json.dumps({"count": 3}))

        with pytest.raises(SourceUnavailableError):
            asyncio.run(JsonFileMessageSource(path).list_messages())
