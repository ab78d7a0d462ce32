"""Factories for the embeddings client and the vector store."""

from langchain_openai import OpenAIEmbeddings

from issue_router.common.config import IssueRouterSettings
from issue_router.storage.vector_store import PgVectorStore


def create_embeddings(settings: IssueRouterSettings) -> OpenAIEmbeddings:
    return OpenAIEmbeddings(
        model=settings.embedding_model,
        api_key=settings.openai_api_key,
    )


def create_vector_store(settings: IssueRouterSettings) -> PgVectorStore:
    """Build the pgvector store described by the settings.

    Raises:
        ConfigurationError: If the API key or connection string is missing.
    """
    settings.require("openai_api_key", "postgres_connection_string")
    return PgVectorStore(
        connection_string=settings.postgres_connection_string,
        table_name=settings.vector_store_table_name,
        embeddings=create_embeddings(settings),
    )
