"""Contract tests shared by every record-store backend."""

from __future__ import annotations

import time
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine

from ragsync.stores.base import RecordStoreBase
from ragsync.stores.memory import InMemoryRecordStore
from ragsync.stores.sql_record_store import SQLRecordStore

from conftest import TickingClock


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path) -> RecordStoreBase:
    if request.param == "memory":
        return InMemoryRecordStore("ns", clock=TickingClock())
    sql_store = SQLRecordStore("ns", engine=create_engine(f"sqlite:///{tmp_path / 'ledger.db'}"))
    sql_store.create_schema()
    return sql_store


class TestRecordStoreContract:
    def test_get_time_is_epoch_seconds(self, store) -> None:
        assert isinstance(store.get_time(), float)

    def test_exists_follows_input_order(self, store) -> None:
        store.update(["a", "c"])
        assert store.exists(["a", "b", "c"]) == [True, False, True]

    def test_exists_empty(self, store) -> None:
        assert store.exists([]) == []

    def test_update_is_an_upsert(self, store) -> None:
        store.update(["a"], group_ids=["g1"])
        store.update(["a"], group_ids=["g2"])
        assert store.list_keys(group_ids=["g2"]) == ["a"]
        assert store.list_keys(group_ids=["g1"]) == []
        assert store.list_keys() == ["a"]

    def test_list_keys_by_group(self, store) -> None:
        store.update(["a", "b", "c"], group_ids=["g1", "g1", "g2"])
        assert sorted(store.list_keys(group_ids=["g1"])) == ["a", "b"]
        assert sorted(store.list_keys(group_ids=["g1", "g2"])) == ["a", "b", "c"]

    def test_list_keys_before_and_after(self, store) -> None:
        store.update(["a", "b"])
        later = store.get_time() + 1
        assert sorted(store.list_keys(before=later)) == ["a", "b"]
        assert store.list_keys(before=0.0) == []
        assert sorted(store.list_keys(after=0.0)) == ["a", "b"]
        assert store.list_keys(after=later) == []

    def test_list_keys_limit(self, store) -> None:
        store.update([f"k{i}" for i in range(5)])
        assert len(store.list_keys(limit=3)) == 3

    def test_delete_keys(self, store) -> None:
        store.update(["a", "b"])
        store.delete_keys(["a", "missing"])
        assert store.exists(["a", "b"]) == [False, True]

    def test_group_ids_length_mismatch(self, store) -> None:
        with pytest.raises(ValueError, match="does not match"):
            store.update(["a", "b"], group_ids=["g1"])

    def test_refuses_to_write_before_time_floor(self, store) -> None:
        floor = store.get_time() + 3600
        with pytest.raises(ValueError, match="Time sync issue"):
            store.update(["a"], time_at_least=floor)
        assert store.exists(["a"]) == [False]


class TestInMemoryRecordStore:
    def test_update_timestamp_comes_from_clock(self) -> None:
        store = InMemoryRecordStore(clock=lambda: 42.0)
        store.update(["a"], group_ids=["g"], time_at_least=40.0)
        record = store.records["a"]
        assert (record.group_id, record.updated_at) == ("g", 42.0)


class TestSQLRecordStore:
    def test_namespaces_are_isolated(self, tmp_path) -> None:
        engine = create_engine(f"sqlite:///{tmp_path / 'shared.db'}")
        first = SQLRecordStore("chroma/one", engine=engine)
        second = SQLRecordStore("chroma/two", engine=engine)
        first.create_schema()

        first.update(["a"])
        second.update(["a", "b"])
        first.delete_keys(["a"])

        assert first.list_keys() == []
        assert sorted(second.list_keys()) == ["a", "b"]

    def test_create_schema_is_idempotent(self, tmp_path) -> None:
        store = SQLRecordStore("ns", db_url=f"sqlite:///{tmp_path / 'l.db'}")
        store.create_schema()
        store.create_schema()
        store.update(["a"])
        assert store.exists(["a"]) == [True]

    def test_unsupported_dialect(self) -> None:
        store = SQLRecordStore("ns", engine=MagicMock(**{"dialect.name": "oracle"}))
        with pytest.raises(NotImplementedError, match="oracle"):
            store.get_time()

    def test_index_runs_against_sqlite(self, tmp_path) -> None:
        """End-to-end: two runs with full cleanup against a real SQLite ledger."""
        from langchain_core.documents import Document

        from ragsync.indexing import index
        from ragsync.stores.memory import InMemoryVectorStore

        store = SQLRecordStore("chroma/docs", db_url=f"sqlite:///{tmp_path / 'ledger.db'}")
        store.create_schema()
        vectors = InMemoryVectorStore()
        keep = Document(page_content="keep", metadata={"source": "a"})
        drop = Document(page_content="drop", metadata={"source": "b"})

        first = index([keep, drop], store, vectors, cleanup="full", source_id_key="source")
        time.sleep(0.05)  # SQLite's clock has millisecond resolution
        second = index([keep], store, vectors, cleanup="full", source_id_key="source")

        assert (first.added, first.skipped, first.deleted) == (2, 0, 0)
        assert (second.added, second.skipped, second.deleted) == (0, 1, 1)
        assert vectors.count() == 1
        assert len(store.list_keys()) == 1
