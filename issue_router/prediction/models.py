"""Structured output schemas for label prediction.

The schemas are handed to the chat model as the required output format.
The direct predictor's schema restricts every label to the closed
vocabulary, so a response naming any other label fails validation.
"""

from typing import Literal, get_args

from pydantic import BaseModel, Field


AllowedLabel = Literal[
    "bug",
    "documentation",
    "enhancement",
    "improvement",
    "nit",
    "question",
    "refactor",
]

ALLOWED_LABELS: tuple[str, ...] = get_args(AllowedLabel)


class RetrievedLabels(BaseModel):
    """Labels chosen from the ground truth of retrieved similar issues."""

    labels: list[str] = Field(
        description="Array of labels selected from the similar issues",
    )


class DirectLabels(BaseModel):
    """Labels chosen from the closed label vocabulary."""

    labels: list[AllowedLabel] = Field(
        description="Array of predicted labels from the allowed list",
    )
