"""Entry point: rebuild the vector index from the fetched issue files."""

import sys

from issue_router.common.cli import execute
from issue_router.common.config import IssueRouterSettings
from issue_router.common.metrics import PipelineMetrics
from issue_router.ingestion.indexer import IssueIndexer
from issue_router.storage.embeddings import create_vector_store


async def run(settings: IssueRouterSettings, metrics: PipelineMetrics) -> None:
    vector_store = create_vector_store(settings)
    indexer = IssueIndexer(
        vector_store=vector_store,
        issues_dir=settings.issues_dir,
        document_source=settings.document_source,
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
        batch_size=settings.index_batch_size,
    )
    try:
        await indexer.initialize()
        stats = await indexer.index_all()
        metrics.record_chunks_indexed(stats.chunks)
    finally:
        await vector_store.close()


def main() -> None:
    sys.exit(execute("index", run))


if __name__ == "__main__":
    main()
