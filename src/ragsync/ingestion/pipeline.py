"""Ingestion run: load → split → normalise metadata → index."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from langchain_core.documents import Document

from ragsync.config import settings
from ragsync.indexing import DocumentSourceError, IndexingResult, index
from ragsync.ingestion.chunker import chunk_documents
from ragsync.ingestion.loader import SourceSpec, load_source
from ragsync.stores.base import RecordStoreBase, VectorStoreBase

logger = logging.getLogger(__name__)

# Retrieval returns these keys; some vector stores fail queries when a hit lacks one.
REQUIRED_METADATA_KEYS = ("source", "title")


def normalize_metadata(documents: Sequence[Document]) -> None:
    """Give every document a ``source`` and ``title``, defaulting to ``""``."""
    for doc in documents:
        for key in REQUIRED_METADATA_KEYS:
            if doc.metadata.get(key) is None:
                doc.metadata[key] = ""


def load_all(sources: Sequence[SourceSpec]) -> list[Document]:
    """Load every source, refusing to continue if one comes back empty.

    An empty source usually means the site or path is unreachable; indexing
    with ``full`` cleanup would then delete everything it previously held.
    """
    docs: list[Document] = []
    for spec in sources:
        loaded = load_source(spec)
        if not loaded:
            raise DocumentSourceError(f"No documents loaded from {spec.kind} source {spec.location!r}")
        docs.extend(loaded)
    return docs


def ingest_docs(
    sources: Sequence[SourceSpec],
    record_store: RecordStoreBase,
    vector_store: VectorStoreBase,
    *,
    chunk_size: int = settings.chunk_size,
    chunk_overlap: int = settings.chunk_overlap,
    batch_size: int = settings.batch_size,
    cleanup_batch_size: int = settings.cleanup_batch_size,
    force_update: bool = settings.force_update,
) -> IndexingResult:
    """Run one full ingestion of *sources* into *vector_store*.

    Uses ``full`` cleanup keyed on the ``source`` metadata field, so pages
    that disappeared from every source are removed from the index.
    """
    if not sources:
        raise ValueError("At least one source is required")

    docs = load_all(sources)
    chunks = chunk_documents(docs, chunk_size=chunk_size, chunk_overlap=chunk_overlap)
    logger.info("Split %d docs into %d chunks", len(docs), len(chunks))
    normalize_metadata(chunks)

    return index(
        chunks,
        record_store,
        vector_store,
        batch_size=batch_size,
        cleanup="full",
        source_id_key="source",
        cleanup_batch_size=cleanup_batch_size,
        force_update=force_update,
    )
