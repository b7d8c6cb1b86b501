"""
Stores — the ledger and vector-index contracts plus their backends.

Public surface
--------------
- :class:`RecordStoreBase`, :class:`VectorStoreBase` — abstract contracts.
- :class:`InMemoryRecordStore`, :class:`InMemoryVectorStore` — local / test backends.
- :class:`SQLRecordStore` — SQLAlchemy ledger (SQLite, PostgreSQL).
- :class:`LangChainVectorStore` — adapter for any LangChain vector store.
- :class:`ChromaVectorStore` — default Chroma backend.
"""

from ragsync.stores.base import RecordStoreBase, VectorStoreBase
from ragsync.stores.langchain_store import LangChainVectorStore
from ragsync.stores.memory import InMemoryRecordStore, InMemoryVectorStore
from ragsync.stores.sql_record_store import SQLRecordStore

__all__ = [
    "ChromaVectorStore",
    "InMemoryRecordStore",
    "InMemoryVectorStore",
    "LangChainVectorStore",
    "RecordStoreBase",
    "SQLRecordStore",
    "VectorStoreBase",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorStore to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorStore":
        from ragsync.stores.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
