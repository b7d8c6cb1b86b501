"""Chroma implementation of the vector-store contract."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import chromadb
from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings
from langchain_huggingface import HuggingFaceEmbeddings

from ragsync.config import settings
from ragsync.stores.base import VectorStoreBase

logger = logging.getLogger(__name__)


def _flatten_metadata(metadata: dict[str, Any]) -> dict[str, Any] | None:
    """Keep only the scalar values Chroma accepts as metadata."""
    flat = {k: v for k, v in metadata.items() if isinstance(v, (str, int, float, bool))}
    return flat or None


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Parameters
    ----------
    collection_name:
        Name of the Chroma collection.
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    embedding_model:
        HuggingFace model id used for text → embedding conversion.
        Ignored when *embedding* is given.
    client:
        Pre-built Chroma client.  When *None*, an ``HttpClient`` is created.
    embedding:
        Any LangChain :class:`~langchain_core.embeddings.Embeddings`.
    distance_metric:
        Distance function of a newly created collection (``cosine`` | ``l2`` | ``ip``).
    """

    def __init__(
        self,
        collection_name: str = settings.chroma_collection,
        *,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        embedding_model: str = settings.embedding_model,
        client: Any | None = None,
        embedding: Embeddings | None = None,
        distance_metric: str = "cosine",
    ) -> None:
        self.collection_name = collection_name
        self._client = client or chromadb.HttpClient(host=host, port=port)
        self._collection = self._client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": distance_metric},
        )
        self._embedder = embedding or HuggingFaceEmbeddings(model_name=embedding_model)

    # -- VectorStoreBase overrides --------------------------------------------

    def add_documents(self, documents: Sequence[Document], *, ids: Sequence[str]) -> None:
        if len(documents) != len(ids):
            raise ValueError(f"Got {len(documents)} documents but {len(ids)} ids")
        if not documents:
            return
        texts = [doc.page_content for doc in documents]
        embeddings = self._embedder.embed_documents(texts)
        # Upsert so that a forced re-write replaces the existing vector.
        self._collection.upsert(
            ids=list(ids),
            embeddings=embeddings,
            documents=texts,
            metadatas=[_flatten_metadata(doc.metadata) for doc in documents],
        )
        logger.debug("Upserted %d vectors into %r", len(ids), self.collection_name)

    def delete(self, ids: Sequence[str]) -> None:
        if not ids:
            return
        self._collection.delete(ids=list(ids))

    def count(self) -> int:
        return self._collection.count()

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False
