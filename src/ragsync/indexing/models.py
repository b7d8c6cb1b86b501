"""Option, result, and document-source models for the indexing engine."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any, Union

from langchain_core.documents import Document
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ragsync.indexing.errors import DocumentSourceError, IndexingConfigError


class CleanupMode(str, Enum):
    """How stale ledger entries are removed during a run."""

    NONE = "none"
    INCREMENTAL = "incremental"
    FULL = "full"


class IndexingOptions(BaseModel):
    """Validated options of a single :func:`~ragsync.indexing.index` run.

    Attributes
    ----------
    batch_size:
        Documents processed per round-trip to the stores.
    cleanup:
        ``none`` only adds/refreshes, ``incremental`` deletes stale members
        of each touched source group after its batch, ``full`` sweeps the
        whole ledger after the last batch.
    source_id_key:
        Metadata key or ``document -> source id`` function.  Required for
        ``incremental``.
    cleanup_batch_size:
        Maximum keys deleted per round-trip during the ``full`` sweep.
    force_update:
        Re-write documents whose uid is already in the ledger.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    batch_size: int = Field(default=100, ge=1)
    cleanup: CleanupMode = CleanupMode.NONE
    source_id_key: Union[str, Callable[[Document], Union[str, None]], None] = None
    cleanup_batch_size: int = Field(default=1000, ge=1)
    force_update: bool = False

    @field_validator("cleanup", mode="before")
    @classmethod
    def _none_means_no_cleanup(cls, value: Any) -> Any:
        return CleanupMode.NONE if value is None else value

    @model_validator(mode="after")
    def _incremental_needs_source_ids(self) -> IndexingOptions:
        if self.cleanup is CleanupMode.INCREMENTAL and not self.source_id_key:
            raise ValueError("Source id key is required when cleanup mode is incremental.")
        return self


class IndexingResult(BaseModel):
    """Counts reported by a run."""

    added: int = 0
    skipped: int = 0
    deleted: int = 0


# ── Document sources ──────────────────────────────────────────────────


class Materialized(BaseModel):
    """Documents already held in memory."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    documents: list[Document]


class Lazy(BaseModel):
    """A zero-argument callable producing the documents on demand."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    load: Callable[[], Iterable[Document]]


DocumentSource = Union[Materialized, Lazy]


def as_document_source(source: Any) -> DocumentSource:
    """Coerce the accepted input shapes into a :data:`DocumentSource`.

    Accepts a :class:`Materialized` / :class:`Lazy` value, a LangChain
    loader (anything with a ``load()`` method), a bare callable, or an
    iterable of documents.
    """
    if isinstance(source, (Materialized, Lazy)):
        return source
    load = getattr(source, "load", None)
    if callable(load):
        return Lazy(load=load)
    if callable(source):
        return Lazy(load=source)
    if isinstance(source, (str, bytes)) or not isinstance(source, Iterable):
        raise IndexingConfigError(
            "docs_source must be a document loader, a callable or an iterable "
            f"of documents, got {type(source).__name__}"
        )
    return Materialized(documents=list(source))


def resolve_documents(source: DocumentSource) -> list[Document]:
    """Return the documents of *source*, draining a lazy loader completely."""
    if isinstance(source, Materialized):
        return list(source.documents)
    try:
        return list(source.load())
    except Exception as exc:
        raise DocumentSourceError(f"Error loading documents from source: {exc}") from exc
