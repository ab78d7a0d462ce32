"""Unit tests for PgVectorStore against a fake asyncpg pool."""

import asyncio
import json

import asyncpg
import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding

from fakes import FakeConnection, FakePool
from issue_router.common.errors import VectorStoreError
from issue_router.common.models import ChunkMetadata, DocumentChunk
from issue_router.storage.vector_store import PgVectorStore, parse_row_count, to_vector_literal


def run_async(coro):
    return asyncio.run(coro)


def make_chunk(num: str, text: str, index: int = 0) -> DocumentChunk:
    return DocumentChunk(
        content=text,
        metadata=ChunkMetadata(
            issue_num=num,
            issue_title=f"Issue {num}",
            issue_ref=f"Issue #{num}",
            document_source="langchainjs-github-issues",
            source="langchainjs-github-issues",
            chunk_index=index,
            chunk_size=len(text),
            original_doc_length=len(text),
            ground_truth_labels=["bug"],
        ),
    )


def make_store(connection: FakeConnection) -> PgVectorStore:
    return PgVectorStore(
        connection_string="postgresql://localhost/test",
        table_name="issue_router_documents",
        embeddings=DeterministicFakeEmbedding(size=8),
        pool=FakePool(connection),
    )


def test_vector_literal():
    assert to_vector_literal([1, 0.5]) == "[1.0,0.5]"


def test_parse_row_count():
    assert parse_row_count("DELETE 42") == 42
    assert parse_row_count("") == 0


def test_invalid_table_name_rejected():
    with pytest.raises(ValueError):
        PgVectorStore("postgresql://x", "bad name", DeterministicFakeEmbedding(size=8))


def test_pool_required_before_use():
    store = PgVectorStore("postgresql://x", "docs", DeterministicFakeEmbedding(size=8))

    with pytest.raises(VectorStoreError):
        run_async(store.clear())


def test_initialize_creates_extension_and_table():
    connection = FakeConnection()
    store = make_store(connection)

    run_async(store.initialize())

    statements = [query for query, _ in connection.executed]
    assert statements[0] == "CREATE EXTENSION IF NOT EXISTS vector"
    assert "CREATE TABLE IF NOT EXISTS issue_router_documents" in statements[1]


def test_clear_returns_deleted_rows():
    store = make_store(FakeConnection(execute_status="DELETE 7"))

    assert run_async(store.clear()) == 7


def test_add_documents_inserts_one_row_per_chunk():
    connection = FakeConnection()
    store = make_store(connection)
    chunks = [make_chunk("1", "first chunk"), make_chunk("2", "second chunk")]

    ids = run_async(store.add_documents(chunks))

    assert len(ids) == 2
    assert connection.transactions == 1
    query, rows = connection.executemany_calls[0]
    assert "$2::vector" in query
    assert [row[2] for row in rows] == ["first chunk", "second chunk"]
    assert json.loads(rows[0][3])["issue_num"] == "1"
    assert rows[0][1].startswith("[") and rows[0][1].count(",") == 7


def test_add_documents_empty_is_noop():
    connection = FakeConnection()

    assert run_async(make_store(connection).add_documents([])) == []
    assert connection.executemany_calls == []


def test_add_documents_wraps_database_errors():
    store = make_store(FakeConnection(fail_with=asyncpg.PostgresError("boom")))

    with pytest.raises(VectorStoreError):
        run_async(store.add_documents([make_chunk("1", "text")]))


def test_similarity_search_converts_distance_to_similarity():
    metadata = make_chunk("5", "stored text").metadata.model_dump()
    connection = FakeConnection(rows=[
        {"document": "stored text", "metadata": json.dumps(metadata), "distance": 0.25},
        {"document": "other text", "metadata": metadata, "distance": 0.5},
    ])
    store = make_store(connection)

    results = run_async(store.similarity_search_with_score("query", k=2))

    assert [score for _, score in results] == [0.75, 0.5]
    chunk, _ = results[0]
    assert chunk.content == "stored text"
    assert chunk.metadata.model_dump() == metadata
    query, args = connection.fetch_calls[0]
    assert "<=>" in query
    assert args[1] == 2


def test_close_releases_pool():
    connection = FakeConnection()
    store = make_store(connection)
    pool = store.pool

    run_async(store.close())

    assert pool.closed
