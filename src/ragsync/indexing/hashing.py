"""Content fingerprinting — derive a stable uid from content and metadata.

A document's uid is a pure function of its ``page_content`` and its
metadata: identical inputs always map to the same uid, and changing a
single metadata value yields a different one.  The uid is formatted as
a UUID so that it is accepted as an item id by every vector-store
backend we write to.
"""

from __future__ import annotations

import hashlib
import json
import uuid
from typing import Any

from langchain_core.documents import Document
from pydantic import BaseModel, ConfigDict, Field

from ragsync.indexing.errors import IndexingConfigError

# Fixed namespace for uid generation.  Changing it re-keys every ledger.
NAMESPACE_UUID = uuid.UUID("8c3f6bd6-9f1e-4a0e-b6a4-52a3d9c3f0a1")


def _sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def _hash_metadata(metadata: dict[str, Any]) -> str:
    try:
        serialized = json.dumps(metadata, sort_keys=True)
    except TypeError as exc:
        raise IndexingConfigError(
            "Document metadata must be JSON-serializable to be fingerprinted: "
            f"{exc}"
        ) from exc
    return _sha256_hex(serialized)


class HashedDocument(BaseModel):
    """A document together with its content-derived identity.

    Attributes
    ----------
    uid:
        Stable identifier used both as the ledger key and as the
        vector-store item id.
    page_content:
        The textual content, unchanged.
    metadata:
        The metadata mapping, unchanged.
    content_hash / metadata_hash:
        SHA-256 digests of the two halves of the identity.
    """

    model_config = ConfigDict(frozen=True)

    uid: str
    page_content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    content_hash: str
    metadata_hash: str


def hash_document(document: Document) -> HashedDocument:
    """Fingerprint *document*.

    Raises
    ------
    IndexingConfigError
        If the metadata cannot be serialized to JSON.
    """
    content_hash = _sha256_hex(document.page_content)
    metadata_hash = _hash_metadata(document.metadata)
    uid = uuid.uuid5(NAMESPACE_UUID, _sha256_hex(content_hash + metadata_hash))
    return HashedDocument(
        uid=str(uid),
        page_content=document.page_content,
        metadata=dict(document.metadata),
        content_hash=content_hash,
        metadata_hash=metadata_hash,
    )


def to_document(hashed: HashedDocument) -> Document:
    """Convert a :class:`HashedDocument` back into a plain LangChain document."""
    return Document(page_content=hashed.page_content, metadata=dict(hashed.metadata))
