"""Issue indexing pipeline: build documents, chunk, embed and store."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

import structlog
from langchain_text_splitters import RecursiveCharacterTextSplitter

from issue_router.common.dataset import load_issue_files
from issue_router.common.errors import IndexingError
from issue_router.common.models import ChunkMetadata, DocumentChunk, IssueRecord
from issue_router.storage.vector_store import PgVectorStore

logger = structlog.get_logger()


@dataclass
class IssueDocument:
    """Searchable text for one labeled issue, before chunking."""
    text: str
    issue: IssueRecord


@dataclass
class IndexingStats:
    """Counts reported by an indexing run."""
    total_issues: int = 0
    issues_with_labels: int = 0
    issues_without_labels: int = 0
    documents: int = 0
    chunks: int = 0
    batches: int = 0


def build_document_text(issue: IssueRecord) -> str:
    """Text indexed for an issue; queries are phrased to match its shape."""
    return (
        f"Github issue number #{issue.issue_num}\n\n"
        f"Issue body: {issue.issue_title}\n\n"
        f"Description: {issue.issue_description}\n\n"
    )


class IssueIndexer:
    """Indexes stored GitHub issues into the pgvector table."""

    CHUNK_SIZE = 600
    CHUNK_OVERLAP = 50
    BATCH_SIZE = 100
    SEPARATORS = ["\n\n", "\n", " ", ""]

    def __init__(
        self,
        vector_store: PgVectorStore,
        issues_dir: Union[str, Path],
        document_source: str = "langchainjs-github-issues",
        chunk_size: int = CHUNK_SIZE,
        chunk_overlap: int = CHUNK_OVERLAP,
        batch_size: int = BATCH_SIZE,
    ):
        self.vector_store = vector_store
        self.issues_dir = Path(issues_dir)
        self.document_source = document_source
        self.batch_size = batch_size

        self.text_splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            length_function=len,
            separators=self.SEPARATORS,
        )

        logger.info("Issue indexer initialized",
                    issues_dir=str(self.issues_dir),
                    chunk_size=chunk_size,
                    chunk_overlap=chunk_overlap,
                    batch_size=batch_size)

    async def initialize(self) -> None:
        await self.vector_store.initialize()

    async def clear_index(self) -> int:
        """Delete all indexed rows.

        Returns:
            Number of rows deleted.
        """
        logger.info("Clearing existing index")
        return await self.vector_store.clear()

    def build_documents(
        self,
        issues: Sequence[IssueRecord],
        stats: Optional[IndexingStats] = None,
    ) -> List[IssueDocument]:
        """Build one document per issue that has at least one label."""
        stats = stats if stats is not None else IndexingStats()
        documents = []

        for issue in issues:
            stats.total_issues += 1
            if not issue.ground_truth_labels:
                stats.issues_without_labels += 1
                continue
            stats.issues_with_labels += 1
            documents.append(IssueDocument(text=build_document_text(issue), issue=issue))

        stats.documents = len(documents)
        return documents

    def chunk_document(self, document: IssueDocument) -> List[DocumentChunk]:
        """Split a document into chunks carrying the issue metadata."""
        issue = document.issue
        texts = self.text_splitter.split_text(document.text)

        return [
            DocumentChunk(
                content=text,
                metadata=ChunkMetadata(
                    issue_num=issue.issue_num,
                    issue_title=issue.issue_title,
                    issue_ref=f"Issue #{issue.issue_num}",
                    document_source=self.document_source,
                    source=self.document_source,
                    chunk_index=index,
                    chunk_size=len(text),
                    original_doc_length=len(document.text),
                    ground_truth_labels=list(issue.ground_truth_labels),
                ),
            )
            for index, text in enumerate(texts)
        ]

    def chunk_issues(
        self,
        issues: Sequence[IssueRecord],
        stats: Optional[IndexingStats] = None,
    ) -> List[DocumentChunk]:
        """Build and chunk documents for all labeled issues, in input order."""
        stats = stats if stats is not None else IndexingStats()
        chunks: List[DocumentChunk] = []
        for document in self.build_documents(issues, stats):
            chunks.extend(self.chunk_document(document))
        stats.chunks = len(chunks)
        return chunks

    async def store_chunks(self, chunks: Sequence[DocumentChunk]) -> int:
        """Upsert chunks in fixed-size batches.

        Returns:
            Number of batches written.

        Raises:
            IndexingError: If a batch fails; later batches are not attempted.
        """
        total_batches = (len(chunks) + self.batch_size - 1) // self.batch_size

        for batch_number, start in enumerate(range(0, len(chunks), self.batch_size), start=1):
            batch = chunks[start:start + self.batch_size]
            try:
                await self.vector_store.add_documents(batch)
            except Exception as e:
                logger.error("Batch indexing failed",
                             batch=batch_number,
                             total_batches=total_batches,
                             error=str(e))
                raise IndexingError(
                    f"Failed to index batch {batch_number}/{total_batches}: {e}",
                    batch_number=batch_number,
                    cause=e,
                ) from e
            logger.info("Indexed batch", batch=batch_number, total_batches=total_batches)

        return total_batches

    async def index_github_issues(self) -> IndexingStats:
        """Index every labeled issue from the issues directory.

        Raises:
            MissingInputError: If the issues directory does not exist.
            IndexingError: If a batch cannot be stored.
        """
        logger.info("Starting GitHub issues indexing", issues_dir=str(self.issues_dir))

        issues = [record for _, record in load_issue_files(self.issues_dir)]
        stats = IndexingStats()
        chunks = self.chunk_issues(issues, stats)

        logger.info("Filtering results",
                    total_issues=stats.total_issues,
                    issues_with_labels=stats.issues_with_labels,
                    issues_without_labels=stats.issues_without_labels)
        logger.info("Split documents into chunks", documents=stats.documents, chunks=stats.chunks)

        stats.batches = await self.store_chunks(chunks)

        logger.info("Successfully indexed issues", chunks=stats.chunks, documents=stats.documents)
        return stats

    async def index_all(self) -> IndexingStats:
        """Clear the index, then index every labeled issue."""
        logger.info("Starting complete indexing process")
        await self.clear_index()
        stats = await self.index_github_issues()
        logger.info("Complete indexing process finished")
        return stats
