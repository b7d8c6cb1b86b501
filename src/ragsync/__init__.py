"""
ragsync — keep a vector search index in sync with its content sources.

Public surface
--------------
- :func:`index` — reconcile a batch of documents against the ledger.
- :class:`IndexingResult` — ``added`` / ``skipped`` / ``deleted`` counts.
- :class:`RecordStoreBase`, :class:`VectorStoreBase` — store contracts.
"""

from ragsync.indexing import IndexingResult, index
from ragsync.stores.base import RecordStoreBase, VectorStoreBase

__all__ = [
    "IndexingResult",
    "RecordStoreBase",
    "VectorStoreBase",
    "index",
]

__version__ = "0.1.0"
