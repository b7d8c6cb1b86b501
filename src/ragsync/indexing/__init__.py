"""
Indexing — keep a vector store in sync with a changing document set.

Public surface
--------------
- :func:`index` — the synchronization driver.
- :class:`IndexingResult` — counts returned by :func:`index`.
- :class:`CleanupMode`, :class:`Materialized`, :class:`Lazy` — inputs.
- :func:`hash_document`, :func:`deduplicate_in_order`,
  :func:`get_source_id_assigner` — the building blocks, usable on their own.
- :class:`IndexingError` and subclasses.
"""

from ragsync.indexing.batching import batch, deduplicate_in_order
from ragsync.indexing.engine import index
from ragsync.indexing.errors import DocumentSourceError, IndexingConfigError, IndexingError
from ragsync.indexing.hashing import HashedDocument, hash_document, to_document
from ragsync.indexing.models import CleanupMode, IndexingOptions, IndexingResult, Lazy, Materialized
from ragsync.indexing.source_ids import get_source_id_assigner

__all__ = [
    "CleanupMode",
    "DocumentSourceError",
    "HashedDocument",
    "IndexingConfigError",
    "IndexingError",
    "IndexingOptions",
    "IndexingResult",
    "Lazy",
    "Materialized",
    "batch",
    "deduplicate_in_order",
    "get_source_id_assigner",
    "hash_document",
    "index",
    "to_document",
]
