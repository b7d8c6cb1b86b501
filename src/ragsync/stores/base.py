"""Abstract contracts for the two stores the indexing engine coordinates.

* :class:`RecordStoreBase` — the *ledger*: which uids are indexed, in
  which source group, and when they were last seen.
* :class:`VectorStoreBase` — the vector index itself.

Adding a new backend (Postgres, Pinecone, Weaviate, Qdrant …) only
requires subclassing one of these and implementing its abstract
methods.  The engine is backend-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from langchain_core.documents import Document


class RecordStoreBase(ABC):
    """Backend-agnostic ledger interface.

    Parameters
    ----------
    namespace:
        Logical partition of the ledger, usually ``"<backend>/<collection>"``.
        Keys in one namespace never collide with keys in another.
    """

    def __init__(self, namespace: str) -> None:
        self.namespace = namespace

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def get_time(self) -> float:
        """Return the store's current time as epoch seconds.

        The engine stamps every run with this value; it must come from
        the store's clock, not the caller's.
        """
        ...

    @abstractmethod
    def exists(self, keys: Sequence[str]) -> list[bool]:
        """Return, for each key, whether it is present in the ledger."""
        ...

    @abstractmethod
    def update(
        self,
        keys: Sequence[str],
        *,
        group_ids: Sequence[str | None] | None = None,
        time_at_least: float | None = None,
    ) -> None:
        """Upsert *keys*, setting their group id and bumping ``last_seen``.

        Parameters
        ----------
        keys:
            Ledger keys (document uids).
        group_ids:
            Group id per key, same length as *keys*.  ``None`` stores no group.
        time_at_least:
            Floor for the new ``last_seen``.  Implementations must refuse to
            write a timestamp earlier than this.
        """
        ...

    @abstractmethod
    def list_keys(
        self,
        *,
        before: float | None = None,
        after: float | None = None,
        group_ids: Sequence[str] | None = None,
        limit: int | None = None,
    ) -> list[str]:
        """List keys matching every given filter.

        ``before`` and ``after`` are strict bounds on ``last_seen``.
        """
        ...

    @abstractmethod
    def delete_keys(self, keys: Sequence[str]) -> None:
        """Remove *keys* from the ledger.  Unknown keys are ignored."""
        ...

    # -- optional overrides ---------------------------------------------------

    def create_schema(self) -> None:
        """Create backing tables if needed.  No-op by default."""


class VectorStoreBase(ABC):
    """Write-side vector-store interface used by the indexing engine."""

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def add_documents(self, documents: Sequence[Document], *, ids: Sequence[str]) -> None:
        """Embed and store *documents*; ``ids[i]`` becomes the id of ``documents[i]``.

        Writing an id that already exists must replace the stored item.
        """
        ...

    @abstractmethod
    def delete(self, ids: Sequence[str]) -> None:
        """Delete items by id."""
        ...

    # -- optional overrides ---------------------------------------------------

    def count(self) -> int:
        """Return the number of stored vectors.  Optional — raises by default."""
        raise NotImplementedError(f"{type(self).__name__} does not support count")


def check_same_length(keys: Sequence[str], group_ids: Sequence[str | None] | None) -> None:
    """Validate the ``update`` contract shared by every record store."""
    if group_ids is not None and len(group_ids) != len(keys):
        raise ValueError(
            f"Number of keys ({len(keys)}) does not match number of "
            f"group_ids ({len(group_ids)})"
        )


def check_clock(now: float, time_at_least: float | None) -> None:
    """Refuse to write a ``last_seen`` earlier than the run's floor."""
    if time_at_least is not None and now < time_at_least:
        raise ValueError(
            f"Time sync issue: store clock {now} is earlier than time_at_least "
            f"{time_at_least}"
        )
