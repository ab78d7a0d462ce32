"""Dev/test segregation of issues labeled in a reserved namespace."""

from issue_router.segregate.segregator import (
    SegregationResult,
    filter_prefixed,
    segregate,
    split_halves,
    strip_prefixed_labels,
)

__all__ = [
    "SegregationResult",
    "filter_prefixed",
    "segregate",
    "split_halves",
    "strip_prefixed_labels",
]
