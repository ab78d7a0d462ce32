"""Label prediction with and without retrieved examples."""

from issue_router.prediction.direct import DirectLabelPredictor
from issue_router.prediction.models import ALLOWED_LABELS, DirectLabels, RetrievedLabels
from issue_router.prediction.retrieval import LabelPredictorAgent, format_similar_issues_with_labels
from issue_router.prediction.structured import create_chat_model, invoke_structured

__all__ = [
    "ALLOWED_LABELS",
    "DirectLabelPredictor",
    "DirectLabels",
    "LabelPredictorAgent",
    "RetrievedLabels",
    "create_chat_model",
    "format_similar_issues_with_labels",
    "invoke_structured",
]
