"""Batch helpers used by the indexing engine."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from itertools import islice
from typing import TypeVar

from ragsync.indexing.hashing import HashedDocument

T = TypeVar("T")


def batch(size: int, iterable: Iterable[T]) -> Iterator[list[T]]:
    """Yield consecutive lists of at most *size* items from *iterable*."""
    if size < 1:
        raise ValueError(f"batch size must be >= 1, got {size}")
    it = iter(iterable)
    while chunk := list(islice(it, size)):
        yield chunk


def deduplicate_in_order(hashed_documents: Sequence[HashedDocument]) -> list[HashedDocument]:
    """Drop repeated uids, keeping the first occurrence of each.

    Only deduplicates within the given sequence; documents seen in
    earlier batches or runs are the ledger's concern.
    """
    seen: set[str] = set()
    unique: list[HashedDocument] = []
    for hashed in hashed_documents:
        if hashed.uid in seen:
            continue
        seen.add(hashed.uid)
        unique.append(hashed)
    return unique
