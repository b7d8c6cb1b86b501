"""Adapter exposing any LangChain ``VectorStore`` through :class:`VectorStoreBase`.

Lets the engine write to Weaviate, PGVector, FAISS, … via their
LangChain integrations without a dedicated backend class.
"""

from __future__ import annotations

from collections.abc import Sequence

from langchain_core.documents import Document
from langchain_core.vectorstores import VectorStore

from ragsync.stores.base import VectorStoreBase


class LangChainVectorStore(VectorStoreBase):
    """Wrap a :class:`langchain_core.vectorstores.VectorStore`."""

    def __init__(self, store: VectorStore) -> None:
        self.store = store

    def add_documents(self, documents: Sequence[Document], *, ids: Sequence[str]) -> None:
        if len(documents) != len(ids):
            raise ValueError(f"Got {len(documents)} documents but {len(ids)} ids")
        if not documents:
            return
        self.store.add_documents(list(documents), ids=list(ids))

    def delete(self, ids: Sequence[str]) -> None:
        if not ids:
            return
        # LangChain stores report failure by returning False rather than raising.
        if self.store.delete(ids=list(ids)) is False:
            raise RuntimeError(
                f"{type(self.store).__name__} failed to delete {len(ids)} vectors"
            )
