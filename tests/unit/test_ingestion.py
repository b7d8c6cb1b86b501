"""Unit tests for the ingestion layer — loaders, pipeline, and CLI."""

from __future__ import annotations

import sys
import types
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from langchain_core.documents import Document

from ragsync.indexing import DocumentSourceError
from ragsync.ingestion import cli
from ragsync.ingestion.loader import SourceSpec, load_directory, load_source
from ragsync.ingestion.pipeline import ingest_docs, load_all, normalize_metadata
from ragsync.stores.memory import InMemoryRecordStore, InMemoryVectorStore

from conftest import TickingClock


def _pages(*sources: str) -> list[Document]:
    return [
        Document(page_content=f"Content of {src}", metadata={"source": src, "title": src.upper()})
        for src in sources
    ]


# ──────────────────────────────────────────────────────────────────────
# Loaders
# ──────────────────────────────────────────────────────────────────────


class TestLoaders:
    def test_load_directory(self, tmp_path: Path) -> None:
        (tmp_path / "a.md").write_text("# Hello\nWorld")
        (tmp_path / "b.md").write_text("# Goodbye\nMoon")
        (tmp_path / "skip.txt").write_text("not markdown")

        docs = load_directory(tmp_path, glob="**/*.md")

        assert sorted(Path(d.metadata["source"]).name for d in docs) == ["a.md", "b.md"]

    def test_dispatch_url(self) -> None:
        with patch("ragsync.ingestion.loader.RecursiveUrlLoader") as loader_cls:
            loader_cls.return_value.load.return_value = _pages("https://x.dev/")
            docs = load_source(SourceSpec(kind="url", location="https://x.dev/", max_depth=2))

        loader_cls.assert_called_once_with("https://x.dev/", max_depth=2, timeout=600)
        assert len(docs) == 1

    def test_dispatch_sitemap(self) -> None:
        with patch("ragsync.ingestion.loader.SitemapLoader") as loader_cls:
            loader_cls.return_value.load.return_value = _pages("https://x.dev/a", "https://x.dev/b")
            docs = load_source(SourceSpec(kind="sitemap", location="https://x.dev/sitemap.xml"))

        loader_cls.assert_called_once_with(web_path="https://x.dev/sitemap.xml")
        assert len(docs) == 2

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(ValueError):
            SourceSpec(kind="ftp", location="ftp://x")  # type: ignore[arg-type]


# ──────────────────────────────────────────────────────────────────────
# Pipeline
# ──────────────────────────────────────────────────────────────────────


class TestNormalizeMetadata:
    def test_fills_missing_keys(self) -> None:
        docs = [Document(page_content="x"), Document(page_content="y", metadata={"title": None})]
        normalize_metadata(docs)
        assert [d.metadata for d in docs] == [
            {"source": "", "title": ""},
            {"source": "", "title": ""},
        ]

    def test_keeps_existing_values(self) -> None:
        docs = _pages("a.md")
        normalize_metadata(docs)
        assert docs[0].metadata == {"source": "a.md", "title": "A.MD"}


class TestIngestDocs:
    @pytest.fixture()
    def stores(self):
        return InMemoryRecordStore("chroma/test", clock=TickingClock()), InMemoryVectorStore()

    def test_empty_source_aborts(self) -> None:
        spec = SourceSpec(kind="url", location="https://down.example.com")
        with patch("ragsync.ingestion.pipeline.load_source", return_value=[]):
            with pytest.raises(DocumentSourceError, match="No documents loaded"):
                load_all([spec])

    def test_requires_a_source(self, stores) -> None:
        with pytest.raises(ValueError, match="At least one source"):
            ingest_docs([], *stores)

    def test_full_sync_removes_vanished_pages(self, stores) -> None:
        record_store, vector_store = stores
        spec = SourceSpec(kind="sitemap", location="https://x.dev/sitemap.xml")

        with patch("ragsync.ingestion.pipeline.load_source", return_value=_pages("a", "b", "c")):
            first = ingest_docs([spec], record_store, vector_store)
        with patch("ragsync.ingestion.pipeline.load_source", return_value=_pages("a", "b")):
            second = ingest_docs([spec], record_store, vector_store)

        assert (first.added, first.skipped, first.deleted) == (3, 0, 0)
        assert (second.added, second.skipped, second.deleted) == (0, 2, 1)
        assert vector_store.count() == 2
        assert sorted(r.group_id for r in record_store.records.values()) == ["a", "b"]

    def test_force_update_rewrites(self, stores) -> None:
        record_store, vector_store = stores
        spec = SourceSpec(kind="directory", location="/docs")
        with patch("ragsync.ingestion.pipeline.load_source", return_value=_pages("a")):
            ingest_docs([spec], record_store, vector_store)
            result = ingest_docs([spec], record_store, vector_store, force_update=True)
        assert (result.added, result.skipped) == (1, 0)

    def test_concatenates_sources(self, stores) -> None:
        specs = [
            SourceSpec(kind="url", location="https://one.dev"),
            SourceSpec(kind="url", location="https://two.dev"),
        ]
        with patch("ragsync.ingestion.pipeline.load_source", side_effect=[_pages("1"), _pages("2")]):
            result = ingest_docs(specs, *stores)
        assert result.added == 2


# ──────────────────────────────────────────────────────────────────────
# CLI
# ──────────────────────────────────────────────────────────────────────


class _HealthyStore(InMemoryVectorStore):
    healthy = True

    def health_check(self) -> bool:
        return self.healthy


@pytest.fixture()
def fake_backends():
    """Replace Chroma and the SQL ledger with in-memory stores."""
    vector_store = _HealthyStore()
    record_store = InMemoryRecordStore("chroma/test", clock=TickingClock())
    chroma_module = types.ModuleType("ragsync.stores.chroma_store")
    chroma_module.ChromaVectorStore = MagicMock(return_value=vector_store)

    with patch.dict(sys.modules, {"ragsync.stores.chroma_store": chroma_module}), \
            patch("ragsync.stores.sql_record_store.SQLRecordStore", return_value=record_store) as sql_cls:
        yield vector_store, record_store, chroma_module.ChromaVectorStore, sql_cls


class TestCli:
    def test_requires_a_source(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])
        assert exc_info.value.code == 2

    def test_sources_from_args(self) -> None:
        args = cli.build_parser().parse_args(
            ["--url", "https://a.dev", "--sitemap", "https://b.dev/sitemap.xml", "--directory", "docs"]
        )
        sources = cli.sources_from_args(args)
        assert [(s.kind, s.location) for s in sources] == [
            ("url", "https://a.dev"),
            ("sitemap", "https://b.dev/sitemap.xml"),
            ("directory", "docs"),
        ]

    def test_successful_run(self, fake_backends) -> None:
        vector_store, record_store, chroma_cls, sql_cls = fake_backends
        with patch("ragsync.ingestion.pipeline.load_source", return_value=_pages("a", "b")):
            code = cli.main(["--sitemap", "https://x.dev/sitemap.xml", "--collection", "docs"])

        assert code == 0
        assert vector_store.count() == 2
        chroma_cls.assert_called_once_with("docs")
        assert sql_cls.call_args.args == ("chroma/docs",)

    def test_unreachable_chroma(self, fake_backends) -> None:
        vector_store = fake_backends[0]
        vector_store.healthy = False
        assert cli.main(["--url", "https://x.dev"]) == 1

    def test_empty_source_fails(self, fake_backends) -> None:
        with patch("ragsync.ingestion.pipeline.load_source", return_value=[]):
            assert cli.main(["--url", "https://x.dev"]) == 1
        assert fake_backends[0].count() == 0
