"""Conversion of raw GitHub issues to IssueRecord files on disk."""

import re
from pathlib import Path
from typing import Any, Dict, Union

from issue_router.common.models import IssueRecord

MAX_TITLE_LENGTH = 100

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def is_pull_request(raw_issue: Dict[str, Any]) -> bool:
    """Pull requests appear in the issues listing with a ``pull_request`` key."""
    return raw_issue.get("pull_request") is not None


def to_issue_record(raw_issue: Dict[str, Any]) -> IssueRecord:
    """Convert an issue object from the GitHub API to an IssueRecord."""
    return IssueRecord(
        issue_num=str(raw_issue["number"]),
        issue_title=raw_issue.get("title") or "",
        issue_description=raw_issue.get("body") or "",
        ground_truth_labels=[label["name"] for label in raw_issue.get("labels") or []],
    )


def sanitize_filename(value: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("-", value).lower()


def issue_filename(record: IssueRecord) -> str:
    """Build ``<issue_num>-<sanitized title>.json`` with the title part capped."""
    title = sanitize_filename(record.issue_title)[:MAX_TITLE_LENGTH]
    return f"{record.issue_num}-{title}.json"


def save_issue(record: IssueRecord, output_dir: Union[str, Path]) -> Path:
    """Write one issue record as JSON.

    Returns:
        Path of the written file.

    Raises:
        OSError: If the file cannot be written.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    file_path = output_path / issue_filename(record)
    file_path.write_text(record.to_json(), encoding="utf-8")
    return file_path
