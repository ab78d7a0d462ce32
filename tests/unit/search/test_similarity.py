"""Unit tests for SimilaritySearch."""

import asyncio

import pytest

from fakes import FakeVectorStore
from issue_router.common.models import ChunkMetadata, DocumentChunk
from issue_router.search.similarity import SimilaritySearch, build_labeling_query


def run_async(coro):
    return asyncio.run(coro)


def stored(num, score, labels=("bug",)):
    chunk = DocumentChunk(
        content=f"content {num}",
        metadata=ChunkMetadata(
            issue_num=num,
            issue_title=f"Issue {num}",
            issue_ref=f"Issue #{num}",
            document_source="src",
            source="src",
            ground_truth_labels=list(labels),
        ),
    )
    return chunk, score


def test_results_carry_metadata_content_and_score():
    store = FakeVectorStore(results=[stored("1", 0.9, ("bug", "question"))])

    results = run_async(SimilaritySearch(store).search_similar_issues("zod error", 3))

    assert len(results) == 1
    assert results[0].issue_num == "1"
    assert results[0].issue_ref == "Issue #1"
    assert results[0].ground_truth_labels == ["bug", "question"]
    assert results[0].content == "content 1"
    assert results[0].similarity_score == 0.9
    assert store.queries == [("zod error", 3)]


def test_results_sorted_and_truncated():
    store = FakeVectorStore(results=[stored("1", 0.2), stored("2", 0.8), stored("3", 0.5)])

    results = run_async(SimilaritySearch(store).search_similar_issues("q", 2))

    assert [r.issue_num for r in results] == ["2", "1"]


@pytest.mark.parametrize("query, top_k", [("", 5), ("   ", 5), ("q", 0)])
def test_invalid_arguments(query, top_k):
    with pytest.raises(ValueError):
        run_async(SimilaritySearch(FakeVectorStore()).search_similar_issues(query, top_k))


def test_labeling_search_phrases_query_like_documents():
    store = FakeVectorStore(results=[stored("4", 0.7, ("documentation",))])

    matches = run_async(
        SimilaritySearch(store).find_similar_issues_for_labeling("Typo", "In the README", 5)
    )

    assert store.queries[0][0] == build_labeling_query("Typo", "In the README")
    assert store.queries[0][0] == "Issue body: Typo\n\nDescription: In the README"
    assert matches[0].model_dump() == {
        "issue_num": "4",
        "issue_title": "Issue 4",
        "similarity_score": 0.7,
        "ground_truth_labels": ["documentation"],
        "content": "content 4",
    }


def test_empty_store_returns_empty_list():
    assert run_async(SimilaritySearch(FakeVectorStore()).search_similar_issues("q")) == []
