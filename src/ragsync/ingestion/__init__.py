"""
Ingestion — load, split and index documents.

Thin layer over :mod:`ragsync.indexing`: it turns configured sources
into chunked LangChain documents and hands them to :func:`~ragsync.indexing.index`.
"""
