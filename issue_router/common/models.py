"""Shared data models for issues, chunks, search results and experiments.

The models use Pydantic for validation and JSON serialization. Field order
matters for the persisted issue files and the experiment dumps: it is the
order the fields are written in.
"""

import json
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field


class IssueRecord(BaseModel):
    """A GitHub issue as persisted to local disk.

    Unknown keys in an issue file are kept and written back after the
    known fields.

    Attributes:
        issue_num: Issue number as a string.
        issue_title: Issue title.
        issue_description: Issue body, empty when the issue has none.
        ground_truth_labels: Label names in upstream order.
    """

    model_config = ConfigDict(extra="allow")

    issue_num: str
    issue_title: str
    issue_description: str = ""
    ground_truth_labels: list[str] = Field(default_factory=list)

    def to_json(self) -> str:
        """Serialize as pretty-printed JSON with 2-space indent."""
        return json.dumps(self.model_dump(), indent=2, ensure_ascii=False)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "IssueRecord":
        """Load an issue record from a JSON file.

        Raises:
            OSError: If the file cannot be read.
            pydantic.ValidationError: If the content is not an issue record.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if data.get("ground_truth_labels") is None:
            data["ground_truth_labels"] = []
        if data.get("issue_description") is None:
            data["issue_description"] = ""
        return cls.model_validate(data)


class ChunkMetadata(BaseModel):
    """Metadata stored alongside every indexed chunk."""

    issue_num: str
    issue_title: str
    issue_ref: str
    document_source: str
    source: str
    chunk_index: int = 0
    chunk_size: int = 0
    original_doc_length: int = 0
    ground_truth_labels: list[str] = Field(default_factory=list)


class DocumentChunk(BaseModel):
    """A bounded-length piece of an issue document, the unit of embedding."""

    content: str
    metadata: ChunkMetadata


class SimilarIssue(ChunkMetadata):
    """A stored chunk returned by similarity search.

    Carries every metadata field stored at index time plus the chunk
    content and its similarity to the query (higher is more similar).
    """

    content: str
    similarity_score: float


class LabelingMatch(BaseModel):
    """Similarity search result narrowed to the fields used for labeling."""

    issue_num: str
    issue_title: str
    similarity_score: float
    ground_truth_labels: list[str] = Field(default_factory=list)
    content: str

    @classmethod
    def from_similar_issue(cls, issue: SimilarIssue) -> "LabelingMatch":
        return cls(
            issue_num=issue.issue_num,
            issue_title=issue.issue_title,
            similarity_score=issue.similarity_score,
            ground_truth_labels=issue.ground_truth_labels,
            content=issue.content,
        )


class LabelPrediction(BaseModel):
    """Result of the retrieval-based label predictor."""

    predicted_labels: list[str] = Field(default_factory=list)
    similar_issues: list[LabelingMatch] = Field(default_factory=list)


class ExperimentResult(BaseModel):
    """One evaluated issue from an experiment run."""

    issue_num: str
    issue_title: str
    issue_description: str
    ground_truth_labels: list[str] = Field(default_factory=list)
    predicted_labels: list[str] = Field(default_factory=list)

    @property
    def is_mismatch(self) -> bool:
        """True when the sorted predicted labels differ from the sorted ground truth."""
        return sorted(self.predicted_labels) != sorted(self.ground_truth_labels)
