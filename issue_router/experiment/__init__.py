"""Offline evaluation of label predictors against a labeled dataset."""

from issue_router.experiment.runner import (
    count_mismatches,
    load_dataset,
    make_timestamp,
    normalize_text,
    run_experiment,
    write_results,
)

__all__ = [
    "count_mismatches",
    "load_dataset",
    "make_timestamp",
    "normalize_text",
    "run_experiment",
    "write_results",
]
