"""Similarity search over indexed issues."""

from issue_router.search.similarity import SimilaritySearch, build_labeling_query

__all__ = [
    "SimilaritySearch",
    "build_labeling_query",
]
