"""Source-group assignment.

A *source id* groups the chunks that came from the same origin (a URL,
a file path, …).  Incremental cleanup uses it to decide which ledger
entries a batch is authoritative for.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Union

from langchain_core.documents import Document

from ragsync.indexing.hashing import HashedDocument, to_document

SourceIdAssigner = Callable[[Document], Union[str, None]]
SourceIdKey = Union[str, SourceIdAssigner, None]


def get_source_id_assigner(source_id_key: SourceIdKey) -> SourceIdAssigner:
    """Return a callable mapping a document to its source id.

    Parameters
    ----------
    source_id_key:
        ``None`` (every document gets ``None``), the name of a metadata
        field, or a function of the document.
    """
    if source_id_key is None:
        return lambda _doc: None
    if isinstance(source_id_key, str):
        return lambda doc: doc.metadata.get(source_id_key)
    if callable(source_id_key):
        return source_id_key
    raise ValueError(
        "source_id_key should be a metadata key, a callable or None, "
        f"got {type(source_id_key).__name__}"
    )


def assign_source_ids(
    hashed_documents: list[HashedDocument],
    assigner: SourceIdAssigner,
) -> list[str | None]:
    """Apply *assigner* to each document, in order.

    The assigner sees a plain :class:`~langchain_core.documents.Document`
    so that user-supplied functions never depend on ``HashedDocument``.
    """
    return [assigner(to_document(hashed)) for hashed in hashed_documents]
