"""Command-line entry point: ``ragsync-ingest``.

Examples
--------
    ragsync-ingest --sitemap https://docs.example.com/sitemap.xml
    ragsync-ingest --url https://docs.example.com/ --directory ./docs --force-update

Connection details (Chroma, ledger database) come from the environment;
see :class:`ragsync.config.Settings`.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

from ragsync.config import settings
from ragsync.indexing import IndexingError
from ragsync.ingestion.loader import SourceSpec
from ragsync.ingestion.pipeline import ingest_docs

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ragsync-ingest",
        description="Load, split and index documents into the vector store.",
    )
    parser.add_argument("--url", action="append", default=[], help="Start URL to crawl recursively")
    parser.add_argument("--sitemap", action="append", default=[], help="Sitemap URL")
    parser.add_argument("--directory", action="append", default=[], help="Local directory")
    parser.add_argument("--glob", default="**/*.md", help="File pattern for --directory")
    parser.add_argument("--max-depth", type=int, default=8, help="Crawl depth for --url")
    parser.add_argument(
        "--collection",
        default=settings.chroma_collection,
        help="Chroma collection name",
    )
    parser.add_argument(
        "--force-update",
        action="store_true",
        default=settings.force_update,
        help="Re-embed every document even if unchanged (e.g. after a model change)",
    )
    return parser


def sources_from_args(args: argparse.Namespace) -> list[SourceSpec]:
    sources = [SourceSpec(kind="url", location=u, max_depth=args.max_depth) for u in args.url]
    sources += [SourceSpec(kind="sitemap", location=u) for u in args.sitemap]
    sources += [SourceSpec(kind="directory", location=d, glob=args.glob) for d in args.directory]
    return sources


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=settings.log_level)

    sources = sources_from_args(args)
    if not sources:
        parser.error("at least one of --url, --sitemap or --directory is required")

    from ragsync.stores.chroma_store import ChromaVectorStore
    from ragsync.stores.sql_record_store import SQLRecordStore

    vector_store = ChromaVectorStore(args.collection)
    if not vector_store.health_check():
        logger.error("Chroma is not reachable at %s:%s", settings.chroma_host, settings.chroma_port)
        return 1

    namespace = settings.record_namespace or f"chroma/{args.collection}"
    record_store = SQLRecordStore(namespace, db_url=settings.record_db_url)
    record_store.create_schema()

    try:
        result = ingest_docs(
            sources,
            record_store,
            vector_store,
            force_update=args.force_update,
        )
    except IndexingError:
        logger.exception("Failed to ingest docs")
        return 1

    logger.info("Indexing stats: %s", result.model_dump())
    logger.info("Collection %r now holds %d vectors", args.collection, vector_store.count())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
