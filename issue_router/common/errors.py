"""Exception hierarchy shared by all Issue Router components."""

from typing import Optional


class IssueRouterError(Exception):
    """Base exception for Issue Router errors.

    Attributes:
        message: Human-readable error description.
        cause: The underlying exception that caused the failure, if any.
    """

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)


class ConfigurationError(IssueRouterError):
    """Raised when required configuration values are missing."""


class MissingInputError(IssueRouterError):
    """Raised when an expected input directory or file does not exist."""


class GitHubFetchError(IssueRouterError):
    """Raised when the GitHub issues listing cannot be fetched.

    Attributes:
        page: The page that failed.
        status_code: HTTP status code of the last response, if any.
        attempts: Number of attempts made before giving up.
    """

    def __init__(
        self,
        message: str,
        page: Optional[int] = None,
        status_code: Optional[int] = None,
        attempts: int = 0,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause=cause)
        self.page = page
        self.status_code = status_code
        self.attempts = attempts


class VectorStoreError(IssueRouterError):
    """Raised when vector store operations fail."""


class IndexingError(IssueRouterError):
    """Raised when an indexing run cannot complete.

    Attributes:
        batch_number: 1-based batch that failed, if the failure happened
            while upserting.
    """

    def __init__(
        self,
        message: str,
        batch_number: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause=cause)
        self.batch_number = batch_number


class LabelPredictionError(IssueRouterError):
    """Raised when the language model call for label prediction fails."""


class LabelParseError(LabelPredictionError):
    """Raised when the model response does not conform to the output schema."""
