"""pgvector storage for indexed issue chunks."""

from issue_router.storage.embeddings import create_embeddings, create_vector_store
from issue_router.storage.vector_store import PgVectorStore

__all__ = [
    "PgVectorStore",
    "create_embeddings",
    "create_vector_store",
]
