"""Loading directories of persisted issue records."""

from pathlib import Path
from typing import List, Tuple, Union

import structlog

from issue_router.common.errors import MissingInputError
from issue_router.common.models import IssueRecord

logger = structlog.get_logger()


def list_issue_files(directory: Union[str, Path]) -> List[Path]:
    """List the ``*.json`` files of a directory in filename order.

    Raises:
        MissingInputError: If the directory does not exist.
    """
    path = Path(directory)
    if not path.is_dir():
        raise MissingInputError(
            f"Issue directory not found at: {path.resolve()}. "
            "Please ensure the directory exists and contains issue JSON files."
        )
    return sorted(p for p in path.iterdir() if p.is_file() and p.suffix == ".json")


def load_issue_files(directory: Union[str, Path]) -> List[Tuple[str, IssueRecord]]:
    """Load every issue record in a directory.

    Returns:
        ``(filename, record)`` pairs in filename order.

    Raises:
        MissingInputError: If the directory does not exist.
    """
    files = list_issue_files(directory)
    logger.info("Found issue files", directory=str(directory), count=len(files))
    return [(file.name, IssueRecord.from_file(file)) for file in files]
