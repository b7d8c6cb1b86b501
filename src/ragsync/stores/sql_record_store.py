"""SQLAlchemy-backed ledger for SQLite (development) or PostgreSQL (production)."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from typing import Any

from sqlalchemy import Column, Float, Index, String, Text, UniqueConstraint, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ragsync.config import settings
from ragsync.stores.base import RecordStoreBase, check_clock, check_same_length

logger = logging.getLogger(__name__)

Base = declarative_base()

# Server-side "now" as epoch seconds, per dialect.
_TIME_QUERIES = {
    "sqlite": "SELECT (julianday('now') - 2440587.5) * 86400.0",
    "postgresql": "SELECT EXTRACT(EPOCH FROM CURRENT_TIMESTAMP)",
}


class UpsertionRecord(Base):
    """One ledger row: a document uid seen in a namespace."""

    __tablename__ = "upsertion_record"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    key = Column(String(255), nullable=False)
    namespace = Column(String(255), nullable=False)
    group_id = Column(Text, nullable=True)
    updated_at = Column(Float, nullable=False)

    __table_args__ = (
        UniqueConstraint("key", "namespace", name="uix_key_namespace"),
        Index("ix_upsertion_record_namespace_updated_at", "namespace", "updated_at"),
        Index("ix_upsertion_record_namespace_group_id", "namespace", "group_id"),
    )


class SQLRecordStore(RecordStoreBase):
    """Ledger persisted in a relational database.

    Parameters
    ----------
    namespace:
        Ledger namespace, e.g. ``"chroma/ragsync_docs"``.
    db_url:
        SQLAlchemy URL.  Ignored when *engine* is given.
    engine:
        Pre-built SQLAlchemy engine (shared pools, tests).
    engine_kwargs:
        Extra keyword arguments for :func:`sqlalchemy.create_engine`.
    """

    def __init__(
        self,
        namespace: str,
        *,
        db_url: str = settings.record_db_url,
        engine: Engine | None = None,
        engine_kwargs: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(namespace)
        self.engine = engine or create_engine(db_url, **(engine_kwargs or {}))
        self._session_factory = sessionmaker(bind=self.engine)

    def create_schema(self) -> None:
        Base.metadata.create_all(self.engine)
        logger.debug("Record store schema ready on %s", self.engine.url)

    def get_time(self) -> float:
        dialect = self.engine.dialect.name
        query = _TIME_QUERIES.get(dialect)
        if query is None:
            raise NotImplementedError(f"get_time is not implemented for dialect {dialect!r}")
        with self.engine.connect() as conn:
            return float(conn.execute(text(query)).scalar_one())

    def exists(self, keys: Sequence[str]) -> list[bool]:
        if not keys:
            return []
        with self._session_factory() as session:
            rows = (
                session.query(UpsertionRecord.key)
                .filter(
                    UpsertionRecord.namespace == self.namespace,
                    UpsertionRecord.key.in_(list(keys)),
                )
                .all()
            )
        found = {row.key for row in rows}
        return [key in found for key in keys]

    def update(
        self,
        keys: Sequence[str],
        *,
        group_ids: Sequence[str | None] | None = None,
        time_at_least: float | None = None,
    ) -> None:
        check_same_length(keys, group_ids)
        if not keys:
            return
        now = self.get_time()
        check_clock(now, time_at_least)
        if group_ids is None:
            group_ids = [None] * len(keys)

        with self._session_factory.begin() as session:
            existing = {
                record.key: record
                for record in session.query(UpsertionRecord).filter(
                    UpsertionRecord.namespace == self.namespace,
                    UpsertionRecord.key.in_(list(keys)),
                )
            }
            for key, group_id in zip(keys, group_ids):
                record = existing.get(key)
                if record is None:
                    record = UpsertionRecord(key=key, namespace=self.namespace)
                    session.add(record)
                    existing[key] = record
                record.group_id = group_id
                record.updated_at = now

    def list_keys(
        self,
        *,
        before: float | None = None,
        after: float | None = None,
        group_ids: Sequence[str] | None = None,
        limit: int | None = None,
    ) -> list[str]:
        with self._session_factory() as session:
            query = session.query(UpsertionRecord.key).filter(
                UpsertionRecord.namespace == self.namespace
            )
            if before is not None:
                query = query.filter(UpsertionRecord.updated_at < before)
            if after is not None:
                query = query.filter(UpsertionRecord.updated_at > after)
            if group_ids is not None:
                query = query.filter(UpsertionRecord.group_id.in_(list(group_ids)))
            if limit is not None:
                query = query.limit(limit)
            return [row.key for row in query.all()]

    def delete_keys(self, keys: Sequence[str]) -> None:
        if not keys:
            return
        with self._session_factory.begin() as session:
            session.query(UpsertionRecord).filter(
                UpsertionRecord.namespace == self.namespace,
                UpsertionRecord.key.in_(list(keys)),
            ).delete(synchronize_session=False)
