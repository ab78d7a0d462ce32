"""Evaluation of a label predictor against a labeled issue dataset.

Results are dumped twice per run, as a JSON array and as a CSV file that
opens cleanly in a spreadsheet. Both share a UTC timestamp suffix so runs
never overwrite each other.
"""

import csv
import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple, Union

import structlog

from issue_router.common.dataset import load_issue_files
from issue_router.common.models import ExperimentResult, IssueRecord

logger = structlog.get_logger()

Predictor = Callable[[str, str], Awaitable[List[str]]]

CSV_HEADER = "issue_num,issue_title,issue_description,ground_truth_labels,predicted_labels"
LABEL_SEPARATOR = ";"

_LINE_BREAKS = re.compile(r"[ \t]*(?:(?:\\r\\n|\\n|\\r|\r|\n|\\)[ \t]*)+")


def load_dataset(directory: Union[str, Path]) -> List[IssueRecord]:
    """Load the issue records of a dataset directory in filename order.

    Raises:
        MissingInputError: If the directory does not exist.
    """
    return [record for _, record in load_issue_files(directory)]


async def run_experiment(predictor: Predictor, dataset: Sequence[IssueRecord]) -> List[ExperimentResult]:
    """Predict labels for every record, one at a time.

    Args:
        predictor: Coroutine function taking ``(title, description)`` and
            returning label names.
        dataset: Records to evaluate.

    Returns:
        One result per record, in dataset order.
    """
    logger.info("Running experiment", issues=len(dataset))

    results = []
    for index, record in enumerate(dataset, start=1):
        predicted = await predictor(record.issue_title, record.issue_description)
        results.append(ExperimentResult(
            issue_num=record.issue_num,
            issue_title=record.issue_title,
            issue_description=record.issue_description,
            ground_truth_labels=list(record.ground_truth_labels),
            predicted_labels=list(predicted),
        ))
        logger.info(f"Processed {index}/{len(dataset)}")

    return results


def normalize_text(text: str) -> str:
    """Collapse line breaks, escaped line breaks and backslashes into single spaces."""
    return _LINE_BREAKS.sub(" ", text)


def make_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp safe for use in file names."""
    now = now or datetime.now(timezone.utc)
    iso = now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return iso.replace(":", "-").replace(".", "-")


def write_results(
    results: Sequence[ExperimentResult],
    results_dir: Union[str, Path],
    timestamp: Optional[str] = None,
) -> Tuple[Path, Path]:
    """Write the JSON and CSV dumps of an experiment run.

    Returns:
        Paths of the JSON file and the CSV file.
    """
    results_dir = Path(results_dir)
    results_dir.mkdir(parents=True, exist_ok=True)
    timestamp = timestamp or make_timestamp()

    json_path = results_dir / f"experiment_results_{timestamp}.json"
    json_path.write_text(
        json.dumps([result.model_dump() for result in results], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )

    csv_path = results_dir / f"experiment_results_{timestamp}.csv"
    with open(csv_path, "w", encoding="utf-8", newline="") as f:
        f.write(CSV_HEADER + "\n")
        writer = csv.writer(f, quoting=csv.QUOTE_ALL, lineterminator="\n")
        for result in results:
            writer.writerow([
                result.issue_num,
                normalize_text(result.issue_title),
                normalize_text(result.issue_description),
                LABEL_SEPARATOR.join(result.ground_truth_labels),
                LABEL_SEPARATOR.join(result.predicted_labels),
            ])

    logger.info("Experiment results written", json_path=str(json_path), csv_path=str(csv_path))
    return json_path, csv_path


def count_mismatches(results: Sequence[ExperimentResult]) -> int:
    """Count results whose predicted label set differs from the ground truth."""
    return sum(1 for result in results if result.is_mismatch)
