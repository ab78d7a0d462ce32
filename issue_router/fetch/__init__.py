"""Issue fetching from the GitHub REST API."""

from issue_router.fetch.github_client import GitHubIssueFetcher
from issue_router.fetch.workflow import IssueFetchWorkflow
from issue_router.fetch.writer import (
    is_pull_request,
    issue_filename,
    sanitize_filename,
    save_issue,
    to_issue_record,
)

__all__ = [
    "GitHubIssueFetcher",
    "IssueFetchWorkflow",
    "is_pull_request",
    "issue_filename",
    "sanitize_filename",
    "save_issue",
    "to_issue_record",
]
