"""Exceptions raised by the indexing engine.

Store failures are deliberately *not* wrapped: whatever the record store
or vector store client raises reaches the caller unchanged.
"""

from __future__ import annotations


class IndexingError(Exception):
    """Base class for errors raised by :func:`ragsync.indexing.index`."""


class IndexingConfigError(IndexingError, ValueError):
    """Invalid options or documents; raised before any store is mutated."""


class DocumentSourceError(IndexingError):
    """The document loader failed before indexing started."""
