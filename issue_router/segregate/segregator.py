"""Split labeled issues into disjoint dev and test sets.

Only issues carrying at least one label in the reserved namespace (for
example ``auto:bug``) take part. Their namespaced labels are kept with the
prefix stripped, every other label is discarded, and the resulting list is
split at its midpoint.
"""

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, TypeVar, Union

import structlog

from issue_router.common.dataset import load_issue_files
from issue_router.common.models import IssueRecord

logger = structlog.get_logger()

T = TypeVar("T")

NamedIssue = Tuple[str, IssueRecord]


@dataclass
class SegregationResult:
    """Outcome of a segregation run."""
    total_files: int
    filtered_count: int
    dev_count: int
    test_count: int
    labels: List[str] = field(default_factory=list)


def strip_prefixed_labels(labels: Sequence[str], prefix: str) -> List[str]:
    """Keep only labels in the prefix namespace, with the prefix removed."""
    return [label[len(prefix):] for label in labels if label.startswith(prefix)]


def filter_prefixed(issues: Sequence[NamedIssue], prefix: str) -> List[NamedIssue]:
    """Keep issues with at least one prefixed label, rewriting their labels.

    Args:
        issues: ``(filename, record)`` pairs.
        prefix: The reserved label namespace prefix.

    Returns:
        New ``(filename, record)`` pairs in input order; records are copies
        whose ``ground_truth_labels`` hold the stripped labels only.
    """
    kept: List[NamedIssue] = []
    for filename, record in issues:
        stripped = strip_prefixed_labels(record.ground_truth_labels, prefix)
        if stripped:
            kept.append(
                (filename, record.model_copy(update={"ground_truth_labels": stripped}))
            )
    return kept


def split_halves(items: Sequence[T]) -> Tuple[List[T], List[T]]:
    """Split at ``floor(len / 2)``; the second half gets the odd item."""
    midpoint = len(items) // 2
    return list(items[:midpoint]), list(items[midpoint:])


def _recreate_directory(path: Path) -> None:
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True)


def _write_issues(issues: Sequence[NamedIssue], directory: Path) -> None:
    for filename, record in issues:
        (directory / filename).write_text(record.to_json(), encoding="utf-8")


def segregate(
    source_dir: Union[str, Path],
    dev_dir: Union[str, Path],
    test_dir: Union[str, Path],
    prefix: str = "auto:",
    issues: Optional[Sequence[NamedIssue]] = None,
) -> SegregationResult:
    """Partition the issues of ``source_dir`` into dev and test directories.

    Both output directories are deleted and recreated on every run.

    Args:
        source_dir: Directory of fetched issue files.
        dev_dir: Output directory for the first half.
        test_dir: Output directory for the second half.
        prefix: The reserved label namespace prefix.
        issues: Pre-loaded issues; read from ``source_dir`` when omitted.

    Returns:
        SegregationResult with counts and the sorted distinct stripped labels.

    Raises:
        MissingInputError: If ``source_dir`` does not exist.
    """
    logger.info("Starting issue segregation", source_dir=str(source_dir), prefix=prefix)

    if issues is None:
        issues = load_issue_files(source_dir)

    dev_path = Path(dev_dir)
    test_path = Path(test_dir)
    _recreate_directory(dev_path)
    _recreate_directory(test_path)
    logger.info("Created output directories", dev_dir=str(dev_path), test_dir=str(test_path))

    filtered = filter_prefixed(issues, prefix)
    logger.info("Filtered issues with prefixed labels", count=len(filtered), prefix=prefix)

    dev_issues, test_issues = split_halves(filtered)
    _write_issues(dev_issues, dev_path)
    _write_issues(test_issues, test_path)

    labels = sorted({label for _, record in filtered for label in record.ground_truth_labels})

    result = SegregationResult(
        total_files=len(issues),
        filtered_count=len(filtered),
        dev_count=len(dev_issues),
        test_count=len(test_issues),
        labels=labels,
    )

    logger.info(
        "Segregation complete",
        devset=result.dev_count,
        testset=result.test_count,
        labels=", ".join(labels),
    )
    return result
