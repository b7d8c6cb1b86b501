"""Cleanup strategies — decide which ledger entries are stale, and when.

A strategy is chosen once per run and never changes mid-run:

* :class:`NoCleanup` never deletes.
* :class:`IncrementalCleanup` settles each source group right after a
  batch touching it.
* :class:`FullCleanup` sweeps the entire namespace once, after the last
  batch.

Deletion always goes vector store first, ledger second: a crash between
the two leaves an orphan vector, never a ledger entry pointing at
nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ragsync.indexing.models import CleanupMode
from ragsync.stores.base import RecordStoreBase, VectorStoreBase

logger = logging.getLogger(__name__)


class CleanupStrategy:
    """Base strategy: hooks default to deleting nothing.

    Parameters
    ----------
    record_store / vector_store:
        The stores of the current run.
    index_start:
        The run's reference timestamp; entries last seen strictly before
        it belong to a previous run.
    """

    requires_source_ids = False

    def __init__(
        self,
        record_store: RecordStoreBase,
        vector_store: VectorStoreBase,
        index_start: float,
    ) -> None:
        self.record_store = record_store
        self.vector_store = vector_store
        self.index_start = index_start

    def after_batch(self, source_ids: Sequence[str | None]) -> int:
        """Called once a batch's writes have landed.  Returns keys deleted."""
        return 0

    def finalize(self) -> int:
        """Called after the last batch.  Returns keys deleted."""
        return 0

    def _delete(self, uids: list[str]) -> int:
        self.vector_store.delete(uids)
        self.record_store.delete_keys(uids)
        return len(uids)


class NoCleanup(CleanupStrategy):
    """Append / refresh only."""


class IncrementalCleanup(CleanupStrategy):
    """Delete stale members of every source group the batch touched."""

    requires_source_ids = True

    def after_batch(self, source_ids: Sequence[str | None]) -> int:
        groups = [sid for sid in dict.fromkeys(source_ids) if sid is not None]
        if not groups:
            return 0
        stale = self.record_store.list_keys(group_ids=groups, before=self.index_start)
        if not stale:
            return 0
        logger.debug("Removing %d stale documents from %d source groups", len(stale), len(groups))
        return self._delete(stale)


class FullCleanup(CleanupStrategy):
    """Delete everything in the namespace not seen during this run."""

    def __init__(
        self,
        record_store: RecordStoreBase,
        vector_store: VectorStoreBase,
        index_start: float,
        *,
        cleanup_batch_size: int = 1000,
    ) -> None:
        super().__init__(record_store, vector_store, index_start)
        self.cleanup_batch_size = cleanup_batch_size

    def finalize(self) -> int:
        deleted = 0
        while True:
            stale = self.record_store.list_keys(before=self.index_start, limit=self.cleanup_batch_size)
            if not stale:
                break
            deleted += self._delete(stale)
            logger.debug("Swept %d stale documents (%d so far)", len(stale), deleted)
        return deleted


def make_cleanup_strategy(
    mode: CleanupMode,
    record_store: RecordStoreBase,
    vector_store: VectorStoreBase,
    index_start: float,
    *,
    cleanup_batch_size: int = 1000,
) -> CleanupStrategy:
    """Build the strategy for *mode*."""
    if mode is CleanupMode.INCREMENTAL:
        return IncrementalCleanup(record_store, vector_store, index_start)
    if mode is CleanupMode.FULL:
        return FullCleanup(
            record_store, vector_store, index_start, cleanup_batch_size=cleanup_batch_size
        )
    return NoCleanup(record_store, vector_store, index_start)
