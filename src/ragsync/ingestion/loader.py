"""Document loaders — thin wrappers around LangChain community loaders."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from langchain_community.document_loaders import (
    DirectoryLoader,
    RecursiveUrlLoader,
    SitemapLoader,
    TextLoader,
)
from pydantic import BaseModel

if TYPE_CHECKING:
    from langchain_core.documents import Document

logger = logging.getLogger(__name__)


class SourceSpec(BaseModel):
    """Where to load documents from.

    Attributes
    ----------
    kind:
        ``"directory"`` (local files), ``"url"`` (recursive crawl from a
        start page) or ``"sitemap"`` (every page listed in a sitemap).
    location:
        Directory path, start URL, or sitemap URL.
    glob:
        File-matching pattern (directory only).
    max_depth:
        Link depth followed by the recursive crawler (url only).
    timeout:
        Per-request timeout in seconds (url only).
    """

    kind: Literal["directory", "url", "sitemap"]
    location: str
    glob: str = "**/*.md"
    max_depth: int = 8
    timeout: int = 600


def load_directory(path: str | Path, glob: str = "**/*.md") -> list[Document]:
    """Recursively load text documents under *path* matching *glob*."""
    loader = DirectoryLoader(
        str(path),
        glob=glob,
        loader_cls=TextLoader,  # type: ignore[arg-type]
        show_progress=False,
        use_multithreading=True,
    )
    return loader.load()


def load_recursive_url(url: str, max_depth: int = 8, timeout: int = 600) -> list[Document]:
    """Crawl *url* and every same-site page reachable within *max_depth* links."""
    return RecursiveUrlLoader(url, max_depth=max_depth, timeout=timeout).load()


def load_sitemap(url: str) -> list[Document]:
    """Load every page listed in the sitemap at *url*."""
    return SitemapLoader(web_path=url).load()


def load_source(spec: SourceSpec) -> list[Document]:
    """Dispatch *spec* to the matching loader."""
    if spec.kind == "directory":
        docs = load_directory(spec.location, glob=spec.glob)
    elif spec.kind == "url":
        docs = load_recursive_url(spec.location, max_depth=spec.max_depth, timeout=spec.timeout)
    else:
        docs = load_sitemap(spec.location)
    logger.info("Loaded %d docs from %s %s", len(docs), spec.kind, spec.location)
    return docs
