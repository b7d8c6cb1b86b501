"""Index synchronization — reconcile documents against the ledger.

Usage::

    from ragsync.indexing import index
    from ragsync.stores import ChromaVectorStore, SQLRecordStore

    record_store = SQLRecordStore("chroma/docs", db_url="sqlite:///ledger.db")
    record_store.create_schema()
    result = index(
        docs,
        record_store,
        ChromaVectorStore("docs"),
        cleanup="full",
        source_id_key="source",
    )
    print(result.added, result.skipped, result.deleted)

Re-running with the same documents is cheap and safe: uids are derived
from content, so unchanged documents are only refreshed in the ledger,
and a run interrupted half-way converges on the next attempt.
"""

from __future__ import annotations

import logging
from typing import Any

from langchain_core.documents import Document
from pydantic import ValidationError

from ragsync.indexing.batching import batch, deduplicate_in_order
from ragsync.indexing.cleanup import make_cleanup_strategy
from ragsync.indexing.errors import IndexingConfigError
from ragsync.indexing.hashing import HashedDocument, hash_document, to_document
from ragsync.indexing.models import (
    IndexingOptions,
    IndexingResult,
    as_document_source,
    resolve_documents,
)
from ragsync.indexing.source_ids import (
    SourceIdKey,
    assign_source_ids,
    get_source_id_assigner,
)
from ragsync.stores.base import RecordStoreBase, VectorStoreBase

logger = logging.getLogger(__name__)


def _build_options(**kwargs: Any) -> IndexingOptions:
    try:
        return IndexingOptions(**kwargs)
    except ValidationError as exc:
        raise IndexingConfigError(str(exc)) from exc


def _require_source_ids(hashed_docs: list[HashedDocument], source_ids: list[str | None]) -> None:
    for hashed, source_id in zip(hashed_docs, source_ids):
        if source_id is None:
            raise IndexingConfigError(
                "Source ids are required when cleanup mode is incremental. "
                f"Document that starts with content: {hashed.page_content[:100]!r} "
                "was not assigned a source id."
            )


def index(
    docs_source: Any,
    record_store: RecordStoreBase,
    vector_store: VectorStoreBase,
    *,
    batch_size: int = 100,
    cleanup: str | None = None,
    source_id_key: SourceIdKey = None,
    cleanup_batch_size: int = 1000,
    force_update: bool = False,
) -> IndexingResult:
    """Index *docs_source* into *vector_store*, tracking state in *record_store*.

    Parameters
    ----------
    docs_source:
        Documents, a LangChain loader, a callable returning documents, or a
        :class:`~ragsync.indexing.models.Materialized` /
        :class:`~ragsync.indexing.models.Lazy` value.  Lazy sources are
        drained completely before any store is contacted.
    record_store:
        Ledger of indexed uids.
    vector_store:
        Destination index.  Documents are written with their uid as id.
    batch_size:
        Documents per round-trip to the stores.
    cleanup:
        ``None`` / ``"none"``, ``"incremental"`` or ``"full"``.
    source_id_key:
        Metadata key or function assigning each document a source id.
    cleanup_batch_size:
        Keys deleted per round-trip during the ``full`` sweep.
    force_update:
        Re-write documents even when their uid is already indexed.

    Returns
    -------
    IndexingResult
        Counts of added, skipped and deleted documents.

    Raises
    ------
    IndexingConfigError
        Invalid options, or a document without source id under
        ``incremental`` cleanup.  Raised before the offending batch
        touches either store.
    DocumentSourceError
        The loader failed; no store has been contacted.
    """
    options = _build_options(
        batch_size=batch_size,
        cleanup=cleanup,
        source_id_key=source_id_key,
        cleanup_batch_size=cleanup_batch_size,
        force_update=force_update,
    )
    try:
        assigner = get_source_id_assigner(options.source_id_key)
    except ValueError as exc:
        raise IndexingConfigError(str(exc)) from exc

    docs = resolve_documents(as_document_source(docs_source))

    index_start = record_store.get_time()
    strategy = make_cleanup_strategy(
        options.cleanup,
        record_store,
        vector_store,
        index_start,
        cleanup_batch_size=options.cleanup_batch_size,
    )
    logger.info(
        "Indexing %d documents into namespace %r (cleanup=%s, force_update=%s)",
        len(docs),
        record_store.namespace,
        options.cleanup.value,
        options.force_update,
    )

    result = IndexingResult()
    for batch_no, doc_batch in enumerate(batch(options.batch_size, docs), 1):
        hashed_docs = deduplicate_in_order([hash_document(doc) for doc in doc_batch])
        source_ids = assign_source_ids(hashed_docs, assigner)
        if strategy.requires_source_ids:
            _require_source_ids(hashed_docs, source_ids)

        uids = [hashed.uid for hashed in hashed_docs]
        exists = record_store.exists(uids)

        docs_to_index: list[Document] = []
        uids_to_index: list[str] = []
        num_skipped = 0
        for hashed, already_indexed in zip(hashed_docs, exists):
            if already_indexed and not options.force_update:
                num_skipped += 1
                continue
            docs_to_index.append(to_document(hashed))
            uids_to_index.append(hashed.uid)

        # Vector store first, ledger second: a crash in between leaves an
        # orphan vector that the next run overwrites under the same uid.
        if docs_to_index:
            vector_store.add_documents(docs_to_index, ids=uids_to_index)

        # Refresh every uid in the batch, skipped ones included.
        record_store.update(uids, group_ids=source_ids, time_at_least=index_start)

        num_deleted = strategy.after_batch(source_ids)

        result.added += len(docs_to_index)
        result.skipped += num_skipped
        result.deleted += num_deleted
        logger.debug(
            "Batch %d: %d added, %d skipped, %d deleted",
            batch_no,
            len(docs_to_index),
            num_skipped,
            num_deleted,
        )

    result.deleted += strategy.finalize()

    logger.info(
        "Indexing finished: %d added, %d skipped, %d deleted",
        result.added,
        result.skipped,
        result.deleted,
    )
    return result
