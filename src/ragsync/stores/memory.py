"""In-memory implementations of both store contracts.

Useful for local experiments and as test doubles.  Neither survives the
process, so a "run" against them is only meaningful within one session.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence

from langchain_core.documents import Document
from pydantic import BaseModel

from ragsync.stores.base import RecordStoreBase, VectorStoreBase, check_clock, check_same_length


class LedgerRecord(BaseModel):
    """One ledger entry."""

    key: str
    group_id: str | None = None
    updated_at: float


class InMemoryRecordStore(RecordStoreBase):
    """Dict-backed ledger.

    Parameters
    ----------
    namespace:
        Ledger namespace.
    clock:
        Zero-argument callable returning epoch seconds.  Defaults to
        :func:`time.time`; tests inject a deterministic clock.
    """

    def __init__(self, namespace: str = "memory", *, clock: Callable[[], float] = time.time) -> None:
        super().__init__(namespace)
        self._clock = clock
        self.records: dict[str, LedgerRecord] = {}

    def get_time(self) -> float:
        return self._clock()

    def exists(self, keys: Sequence[str]) -> list[bool]:
        return [key in self.records for key in keys]

    def update(
        self,
        keys: Sequence[str],
        *,
        group_ids: Sequence[str | None] | None = None,
        time_at_least: float | None = None,
    ) -> None:
        check_same_length(keys, group_ids)
        now = self.get_time()
        check_clock(now, time_at_least)
        if group_ids is None:
            group_ids = [None] * len(keys)
        for key, group_id in zip(keys, group_ids):
            self.records[key] = LedgerRecord(key=key, group_id=group_id, updated_at=now)

    def list_keys(
        self,
        *,
        before: float | None = None,
        after: float | None = None,
        group_ids: Sequence[str] | None = None,
        limit: int | None = None,
    ) -> list[str]:
        wanted_groups = set(group_ids) if group_ids is not None else None
        keys: list[str] = []
        for record in self.records.values():
            if before is not None and record.updated_at >= before:
                continue
            if after is not None and record.updated_at <= after:
                continue
            if wanted_groups is not None and record.group_id not in wanted_groups:
                continue
            keys.append(record.key)
            if limit is not None and len(keys) >= limit:
                break
        return keys

    def delete_keys(self, keys: Sequence[str]) -> None:
        for key in keys:
            self.records.pop(key, None)


class InMemoryVectorStore(VectorStoreBase):
    """Stores documents by id without computing embeddings."""

    def __init__(self) -> None:
        self.documents: dict[str, Document] = {}

    def add_documents(self, documents: Sequence[Document], *, ids: Sequence[str]) -> None:
        if len(documents) != len(ids):
            raise ValueError(
                f"Got {len(documents)} documents but {len(ids)} ids"
            )
        for doc_id, doc in zip(ids, documents):
            self.documents[doc_id] = doc

    def delete(self, ids: Sequence[str]) -> None:
        for doc_id in ids:
            self.documents.pop(doc_id, None)

    def count(self) -> int:
        return len(self.documents)

    def get(self, doc_id: str) -> Document | None:
        return self.documents.get(doc_id)
