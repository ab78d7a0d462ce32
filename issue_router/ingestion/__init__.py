"""Indexing of stored issues into the vector store."""

from issue_router.ingestion.indexer import (
    IndexingStats,
    IssueDocument,
    IssueIndexer,
    build_document_text,
)

__all__ = [
    "IndexingStats",
    "IssueDocument",
    "IssueIndexer",
    "build_document_text",
]
