"""
Property-based tests for similarity search ordering.

For any stored results, similarity search returns at most K matches
ordered by score, highest first, with the stored metadata intact.
"""

import asyncio

from hypothesis import given, settings, strategies as st

from fakes import FakeVectorStore
from issue_router.common.models import ChunkMetadata, DocumentChunk
from issue_router.search.similarity import SimilaritySearch


@st.composite
def search_results(draw, max_results=10):
    """Generate stored chunks with scores."""
    scores = draw(st.lists(
        st.floats(min_value=-1.0, max_value=1.0, allow_nan=False, allow_infinity=False),
        max_size=max_results,
    ))
    results = []
    for i, score in enumerate(scores):
        chunk = DocumentChunk(
            content=f"Document {i}",
            metadata=ChunkMetadata(
                issue_num=str(i),
                issue_title=f"Issue {i}",
                issue_ref=f"Issue #{i}",
                document_source="langchainjs-github-issues",
                source="langchainjs-github-issues",
                chunk_index=i,
                ground_truth_labels=draw(st.lists(st.sampled_from(["bug", "question", "nit"]), max_size=2)),
            ),
        )
        results.append((chunk, score))
    return results


@given(search_results(), st.integers(min_value=1, max_value=20))
@settings(max_examples=100, deadline=None)
def test_similarity_search_results_ordered_by_score(stored, k):
    search = SimilaritySearch(FakeVectorStore(results=stored))

    results = asyncio.run(search.search_similar_issues("query text", k))

    assert len(results) <= k
    scores = [r.similarity_score for r in results]
    assert scores == sorted(scores, reverse=True)

    by_num = {chunk.metadata.issue_num: chunk for chunk, _ in stored}
    for r in results:
        original = by_num[r.issue_num]
        assert r.content == original.content
        assert r.ground_truth_labels == original.metadata.ground_truth_labels
        assert r.chunk_index == original.metadata.chunk_index
