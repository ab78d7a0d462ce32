"""Unit tests for IssueIndexer."""

import asyncio

import pytest

from fakes import FakeVectorStore
from issue_router.common.errors import IndexingError, MissingInputError
from issue_router.common.models import IssueRecord
from issue_router.ingestion.indexer import IndexingStats, IssueIndexer, build_document_text


def run_async(coro):
    return asyncio.run(coro)


def make_indexer(store=None, issues_dir="unused", **kwargs) -> IssueIndexer:
    return IssueIndexer(
        vector_store=store or FakeVectorStore(),
        issues_dir=issues_dir,
        document_source="langchainjs-github-issues",
        **kwargs,
    )


def test_document_text_shape():
    issue = IssueRecord(issue_num="12", issue_title="Crash", issue_description="Stack trace")

    assert build_document_text(issue) == (
        "Github issue number #12\n\nIssue body: Crash\n\nDescription: Stack trace\n\n"
    )


def test_unlabeled_issues_produce_no_chunks():
    indexer = make_indexer()
    stats = IndexingStats()
    issues = [
        IssueRecord(issue_num="1", issue_title="labeled", ground_truth_labels=["bug"]),
        IssueRecord(issue_num="2", issue_title="unlabeled"),
    ]

    chunks = indexer.chunk_issues(issues, stats)

    assert {chunk.metadata.issue_num for chunk in chunks} == {"1"}
    assert (stats.total_issues, stats.issues_with_labels, stats.issues_without_labels) == (2, 1, 1)
    assert stats.chunks == len(chunks)


def test_chunk_metadata_enrichment():
    indexer = make_indexer()
    issue = IssueRecord(
        issue_num="77",
        issue_title="Long issue",
        issue_description="word " * 400,
        ground_truth_labels=["enhancement"],
    )

    chunks = indexer.chunk_issues([issue])
    text = build_document_text(issue)

    assert len(chunks) > 1
    for index, chunk in enumerate(chunks):
        assert len(chunk.content) <= 600
        assert chunk.metadata.chunk_index == index
        assert chunk.metadata.chunk_size == len(chunk.content)
        assert chunk.metadata.original_doc_length == len(text)
        assert chunk.metadata.issue_ref == "Issue #77"
        assert chunk.metadata.document_source == "langchainjs-github-issues"
        assert chunk.metadata.source == "langchainjs-github-issues"
        assert chunk.metadata.ground_truth_labels == ["enhancement"]


def test_store_chunks_uses_configured_batch_size():
    store = FakeVectorStore()
    indexer = make_indexer(store, batch_size=2)
    issues = [
        IssueRecord(issue_num=str(n), issue_title=f"t{n}", ground_truth_labels=["bug"])
        for n in range(5)
    ]
    chunks = indexer.chunk_issues(issues)

    batches = run_async(indexer.store_chunks(chunks))

    assert batches == 3
    assert [len(batch) for batch in store.batches] == [2, 2, 1]


def test_failing_batch_aborts_run():
    store = FakeVectorStore(fail_on_batch=2)
    indexer = make_indexer(store, batch_size=1)
    issues = [
        IssueRecord(issue_num=str(n), issue_title=f"t{n}", ground_truth_labels=["bug"])
        for n in range(4)
    ]

    with pytest.raises(IndexingError) as exc_info:
        run_async(indexer.store_chunks(indexer.chunk_issues(issues)))

    assert exc_info.value.batch_number == 2
    assert len(store.batches) == 1


def test_index_all_clears_then_indexes(tmp_path, write_issue_files):
    issues_dir = write_issue_files([
        {"issue_num": "1", "issue_title": "a", "issue_description": "x", "ground_truth_labels": ["bug"]},
        {"issue_num": "2", "issue_title": "b", "issue_description": "y", "ground_truth_labels": []},
    ])
    store = FakeVectorStore()
    indexer = make_indexer(store, issues_dir=issues_dir)

    stats = run_async(indexer.index_all())

    assert store.cleared == 1
    assert stats.documents == 1
    assert stats.batches == 1
    assert sum(len(batch) for batch in store.batches) == stats.chunks


def test_missing_issues_directory(tmp_path):
    indexer = make_indexer(issues_dir=tmp_path / "absent")

    with pytest.raises(MissingInputError):
        run_async(indexer.index_github_issues())
