"""PostgreSQL/pgvector store for issue chunks.

The table holds one row per chunk: a UUID id, the embedding vector, the chunk
text, and its metadata as JSONB. Embeddings are computed through a LangChain
``Embeddings`` implementation from the exact text that is stored, so the
content column and the vector column always describe the same text.

Similarity is cosine similarity, ``1 - (embedding <=> query)``, higher is
more similar.
"""

import json
import re
import uuid
from typing import Any, List, Optional, Sequence, Tuple

import asyncpg
import structlog
from langchain_core.embeddings import Embeddings

from issue_router.common.errors import VectorStoreError
from issue_router.common.models import ChunkMetadata, DocumentChunk

logger = structlog.get_logger()

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def to_vector_literal(vector: Sequence[float]) -> str:
    """Format an embedding as a pgvector text literal, e.g. ``[0.1,0.2]``."""
    return "[" + ",".join(repr(float(v)) for v in vector) + "]"


def parse_row_count(status: str) -> int:
    """Extract the row count from a command status such as ``DELETE 42``."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (ValueError, AttributeError, IndexError):
        return 0


class PgVectorStore:
    """Manages the pgvector table holding indexed issue chunks."""

    def __init__(
        self,
        connection_string: str,
        table_name: str,
        embeddings: Embeddings,
        pool: Optional[Any] = None,
    ):
        """
        Initialize vector store manager.

        Args:
            connection_string: PostgreSQL connection string.
            table_name: Table holding the chunks; must be a plain identifier.
            embeddings: LangChain embeddings used for documents and queries.
            pool: Optional pre-created asyncpg pool (for testing).
        """
        if not _IDENTIFIER_PATTERN.match(table_name):
            raise ValueError(f"Invalid table name: {table_name!r}")
        self.connection_string = connection_string
        self.table_name = table_name
        self.embeddings = embeddings
        self._pool = pool

    @property
    def pool(self):
        if self._pool is None:
            raise VectorStoreError("Vector store not initialized; call initialize() first")
        return self._pool

    async def initialize(self) -> None:
        """Connect and make sure the extension and table exist."""
        logger.info("Initializing pgvector store", table=self.table_name)
        try:
            if self._pool is None:
                self._pool = await asyncpg.create_pool(self.connection_string)
            async with self.pool.acquire() as conn:
                await conn.execute("CREATE EXTENSION IF NOT EXISTS vector")
                await conn.execute(f"""
                    CREATE TABLE IF NOT EXISTS {self.table_name} (
                        id uuid PRIMARY KEY,
                        embedding vector,
                        document text,
                        metadata jsonb
                    )
                """)
        except (asyncpg.PostgresError, OSError) as e:
            logger.error("Vector store initialization failed", table=self.table_name, error=str(e))
            raise VectorStoreError(f"Failed to initialize vector store: {e}", cause=e) from e

        logger.info("pgvector store initialized", table=self.table_name)

    async def clear(self) -> int:
        """Delete every row of the table.

        Returns:
            Number of rows deleted.
        """
        try:
            async with self.pool.acquire() as conn:
                status = await conn.execute(f"DELETE FROM {self.table_name}")
        except asyncpg.PostgresError as e:
            logger.error("Failed to clear vector store", table=self.table_name, error=str(e))
            raise VectorStoreError(f"Failed to clear vector store: {e}", cause=e) from e

        deleted = parse_row_count(status)
        logger.info("Vector store cleared", table=self.table_name, deleted_rows=deleted)
        return deleted

    async def add_documents(self, chunks: Sequence[DocumentChunk]) -> List[str]:
        """Embed chunks and insert them in a single transaction.

        Args:
            chunks: Chunks to store.

        Returns:
            The generated row ids, aligned with ``chunks``.

        Raises:
            VectorStoreError: If the embedding count does not match the chunk
                count or the insert fails.
        """
        if not chunks:
            return []

        texts = [chunk.content for chunk in chunks]
        vectors = await self.embeddings.aembed_documents(texts)
        if len(vectors) != len(chunks):
            raise VectorStoreError(
                f"Mismatch between chunks ({len(chunks)}) and embeddings ({len(vectors)})"
            )

        ids = [uuid.uuid4() for _ in chunks]
        rows = [
            (
                row_id,
                to_vector_literal(vector),
                chunk.content,
                json.dumps(chunk.metadata.model_dump()),
            )
            for row_id, vector, chunk in zip(ids, vectors, chunks)
        ]

        try:
            async with self.pool.acquire() as conn:
                async with conn.transaction():
                    await conn.executemany(
                        f"""
                        INSERT INTO {self.table_name} (id, embedding, document, metadata)
                        VALUES ($1, $2::vector, $3, $4::jsonb)
                        """,
                        rows,
                    )
        except asyncpg.PostgresError as e:
            logger.error("Document insert failed", table=self.table_name, error=str(e))
            raise VectorStoreError(f"Failed to insert documents: {e}", cause=e) from e

        logger.debug("Documents inserted", table=self.table_name, count=len(rows))
        return [str(row_id) for row_id in ids]

    async def similarity_search_with_score(
        self,
        query: str,
        k: int = 5,
    ) -> List[Tuple[DocumentChunk, float]]:
        """Return the k stored chunks closest to the query.

        Returns:
            ``(chunk, similarity)`` pairs, most similar first.
        """
        query_vector = await self.embeddings.aembed_query(query)

        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT document, metadata, embedding <=> $1::vector AS distance
                    FROM {self.table_name}
                    ORDER BY distance
                    LIMIT $2
                    """,
                    to_vector_literal(query_vector),
                    k,
                )
        except asyncpg.PostgresError as e:
            logger.error("Vector search failed", table=self.table_name, error=str(e))
            raise VectorStoreError(f"Vector search failed: {e}", cause=e) from e

        results = []
        for row in rows:
            metadata = row["metadata"]
            if isinstance(metadata, str):
                metadata = json.loads(metadata)
            chunk = DocumentChunk(
                content=row["document"],
                metadata=ChunkMetadata.model_validate(metadata),
            )
            results.append((chunk, 1.0 - float(row["distance"])))

        return results

    async def close(self) -> None:
        """Close connection pool."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
