"""Similarity search over indexed issue chunks."""

from typing import List

import structlog

from issue_router.common.models import LabelingMatch, SimilarIssue
from issue_router.storage.vector_store import PgVectorStore

logger = structlog.get_logger()


def build_labeling_query(title: str, description: str) -> str:
    """Phrase a new issue the way indexed documents are phrased."""
    return f"Issue body: {title}\n\nDescription: {description}"


class SimilaritySearch:
    """Finds stored issue chunks similar to a free-text query."""

    def __init__(self, vector_store: PgVectorStore):
        self.vector_store = vector_store

    async def initialize(self) -> None:
        logger.info("Initializing similarity search vector store")
        await self.vector_store.initialize()

    async def search_similar_issues(self, query: str, top_k: int = 5) -> List[SimilarIssue]:
        """Return at most ``top_k`` chunks, most similar first.

        Args:
            query: Free-text query.
            top_k: Maximum number of results.

        Returns:
            Matches carrying the stored metadata, the chunk content and the
            similarity score.

        Raises:
            ValueError: If the query is empty or ``top_k`` is below 1.
            VectorStoreError: If the search fails.
        """
        if not query or not query.strip():
            raise ValueError("Query cannot be empty")
        if top_k < 1:
            raise ValueError("top_k must be at least 1")

        logger.info("Searching for similar issues", top_k=top_k, query=query[:100])

        results = await self.vector_store.similarity_search_with_score(query, top_k)

        matches = [
            SimilarIssue(
                **chunk.metadata.model_dump(),
                content=chunk.content,
                similarity_score=score,
            )
            for chunk, score in results[:top_k]
        ]
        matches.sort(key=lambda match: match.similarity_score, reverse=True)

        logger.info("Found similar documents", count=len(matches))
        return matches

    async def find_similar_issues_for_labeling(
        self,
        title: str,
        description: str,
        top_k: int = 5,
    ) -> List[LabelingMatch]:
        """Search with a new issue and keep only the fields used for labeling."""
        query = build_labeling_query(title, description)
        results = await self.search_similar_issues(query, top_k)
        return [LabelingMatch.from_similar_issue(result) for result in results]
