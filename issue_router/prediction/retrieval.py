"""Label prediction grounded on similar, already-labeled issues."""

from typing import List

import structlog
from langchain_core.language_models import BaseChatModel

from issue_router.common.models import LabelingMatch, LabelPrediction
from issue_router.prediction.models import RetrievedLabels
from issue_router.prediction.prompts import RETRIEVAL_PREDICTION_TEMPLATE
from issue_router.prediction.structured import build_prediction_chain, invoke_structured
from issue_router.search.similarity import SimilaritySearch

logger = structlog.get_logger()


def format_similar_issues_with_labels(matches: List[LabelingMatch]) -> str:
    """Render retrieved matches as the numbered examples section of the prompt."""
    formatted = ""
    for index, match in enumerate(matches, start=1):
        formatted += f"{index}. Issue #{match.issue_num} (Vector Similarity Score: {match.similarity_score:.3f})\n"
        formatted += f"   Title: \"{match.issue_title}\"\n"
        formatted += f"   Ground Truth Labels: [{', '.join(match.ground_truth_labels)}]\n"
        formatted += f"   Full Content: \"{match.content}\"\n\n"
    return formatted


class LabelPredictorAgent:
    """Predicts labels for a new issue from the labels of similar issues.

    The chat model is injected so tests can substitute a fake.
    """

    def __init__(
        self,
        similarity_search: SimilaritySearch,
        llm: BaseChatModel,
        top_k: int = 5,
    ):
        self.similarity_search = similarity_search
        self.llm = llm
        self.top_k = top_k
        self.chain = build_prediction_chain(RETRIEVAL_PREDICTION_TEMPLATE, llm, RetrievedLabels)

    async def initialize(self) -> None:
        logger.info("Initializing label predictor agent")
        await self.similarity_search.initialize()
        logger.info("Label predictor agent initialized")

    async def predict_labels(self, title: str, description: str) -> LabelPrediction:
        """Predict labels for an issue.

        Returns an empty prediction, without calling the model, when no
        similar issues are indexed.

        Raises:
            VectorStoreError: If retrieval fails.
            LabelParseError: If the model response is malformed.
            LabelPredictionError: If the model call fails.
        """
        logger.info("Predicting labels for issue", title=title)

        similar_issues = await self.similarity_search.find_similar_issues_for_labeling(
            title, description, self.top_k
        )

        if not similar_issues:
            logger.warning("No similar issues found, returning empty prediction")
            return LabelPrediction(predicted_labels=[], similar_issues=[])

        logger.info("Found similar issues for context", count=len(similar_issues))

        response = await invoke_structured(
            self.chain,
            {
                "similar_issues_with_labels": format_similar_issues_with_labels(similar_issues),
                "title": title,
                "description": description,
            },
            RetrievedLabels,
        )

        logger.info("Predicted labels", labels=response.labels)
        return LabelPrediction(predicted_labels=list(response.labels), similar_issues=similar_issues)
