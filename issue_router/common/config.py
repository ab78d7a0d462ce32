"""Issue Router configuration using pydantic-settings.

All settings are read from environment variables (case-insensitive) and,
when present, from a ``.env`` file in the working directory. Secrets default
to empty strings so that commands which do not need them (fetching without a
token, segregation) can run; commands call ``require()`` for the values they
actually use.
"""

import re

import structlog
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from issue_router.common.errors import ConfigurationError

logger = structlog.get_logger()

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

SECRET_FIELDS = ("github_token", "openai_api_key", "postgres_connection_string")


def redact_secret(value: str, visible_chars: int = 4) -> str:
    """Redact a secret value, showing only the first few characters.

    Args:
        value: The secret value to redact.
        visible_chars: Number of characters to show at the start.

    Returns:
        Redacted string with asterisks replacing hidden characters.
    """
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)


class IssueRouterSettings(BaseSettings):
    """Issue Router configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # GitHub
    # -------------------------------------------------------------------------
    github_token: str = ""
    github_api_base: str = "https://api.github.com"
    repo_owner: str = "langchain-ai"
    repo_name: str = "langchainjs"

    fetch_per_page: int = 100
    # Pause after every successful page
    fetch_page_delay: float = 5.0
    fetch_max_retries: int = 5
    fetch_retry_base_delay: float = 10.0
    fetch_retry_max_delay: float = 120.0

    # -------------------------------------------------------------------------
    # Model providers
    # -------------------------------------------------------------------------
    openai_api_key: str = ""
    embedding_model: str = "text-embedding-3-small"
    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.0

    # -------------------------------------------------------------------------
    # Vector store
    # -------------------------------------------------------------------------
    postgres_connection_string: str = ""
    vector_store_table_name: str = "issue_router_documents"

    # -------------------------------------------------------------------------
    # Local data layout
    # -------------------------------------------------------------------------
    issues_dir: str = "langchainjs-gh-issues"
    devset_dir: str = "devset"
    testset_dir: str = "testset"
    results_dir: str = "results"

    # -------------------------------------------------------------------------
    # Segregation, indexing and retrieval
    # -------------------------------------------------------------------------
    label_prefix: str = "auto:"
    chunk_size: int = 600
    chunk_overlap: int = 50
    index_batch_size: int = 100
    document_source: str = "langchainjs-github-issues"
    retrieval_k: int = 5

    # -------------------------------------------------------------------------
    # Observability
    # -------------------------------------------------------------------------
    log_level: str = "INFO"
    log_format: str = "json"
    prometheus_gateway_url: str = ""

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator(
        "fetch_per_page",
        "fetch_max_retries",
        "chunk_size",
        "index_batch_size",
        "retrieval_k",
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate that counts and sizes are at least 1."""
        if v < 1:
            raise ValueError("value must be at least 1")
        return v

    @field_validator(
        "fetch_page_delay",
        "fetch_retry_base_delay",
        "fetch_retry_max_delay",
        "chunk_overlap",
    )
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        """Validate that delays and overlaps are not negative."""
        if v < 0:
            raise ValueError("value must not be negative")
        return v

    @field_validator("postgres_connection_string")
    @classmethod
    def validate_postgres_connection_string(cls, v: str) -> str:
        """Validate the connection string scheme when one is given."""
        if v and not v.startswith(("postgresql://", "postgres://")):
            raise ValueError(
                "postgres_connection_string must start with postgresql:// or postgres://"
            )
        return v

    @field_validator("vector_store_table_name")
    @classmethod
    def validate_table_name(cls, v: str) -> str:
        """Validate that the table name is a plain SQL identifier."""
        if not _IDENTIFIER_PATTERN.match(v):
            raise ValueError(
                "vector_store_table_name must contain only letters, digits and underscores"
            )
        return v

    @field_validator("label_prefix")
    @classmethod
    def validate_label_prefix(cls, v: str) -> str:
        """Validate that the label namespace prefix is not empty."""
        if not v:
            raise ValueError("label_prefix cannot be empty")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate the log renderer name."""
        v = v.lower()
        if v not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return v

    @model_validator(mode="after")
    def validate_chunk_overlap(self) -> "IssueRouterSettings":
        """Validate that chunk overlap is smaller than chunk size."""
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self

    def require(self, *field_names: str) -> "IssueRouterSettings":
        """Ensure the named settings are non-empty.

        Args:
            field_names: Names of the settings the caller depends on.

        Returns:
            The settings instance, for chaining.

        Raises:
            ConfigurationError: If any of the named settings is empty. The
                message lists every missing environment variable.
        """
        missing = [name.upper() for name in field_names if not getattr(self, name)]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )
        return self

    def log_summary(self) -> None:
        """Log configuration values with secrets redacted."""
        values = self.model_dump()
        for name in SECRET_FIELDS:
            values[name] = redact_secret(values[name]) if values[name] else "<unset>"
        logger.info("Configuration loaded", **values)


def get_settings() -> IssueRouterSettings:
    """Create and return an IssueRouterSettings instance.

    Raises:
        pydantic.ValidationError: If a setting has an invalid value.
    """
    return IssueRouterSettings()
