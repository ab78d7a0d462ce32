"""Label prediction from the issue text alone, over a closed vocabulary."""

from typing import List

import structlog
from langchain_core.language_models import BaseChatModel

from issue_router.prediction.models import DirectLabels
from issue_router.prediction.prompts import DIRECT_PREDICTION_TEMPLATE
from issue_router.prediction.structured import build_prediction_chain, invoke_structured

logger = structlog.get_logger()


class DirectLabelPredictor:
    """Asks the chat model for a label without any retrieval context."""

    def __init__(self, llm: BaseChatModel):
        self.llm = llm
        self.chain = build_prediction_chain(DIRECT_PREDICTION_TEMPLATE, llm, DirectLabels)

    async def predict_labels(self, title: str, description: str) -> List[str]:
        """Return labels drawn only from the allowed vocabulary.

        Raises:
            LabelParseError: If the response names a label outside the vocabulary
                or is otherwise malformed.
            LabelPredictionError: If the model call fails.
        """
        response = await invoke_structured(
            self.chain,
            {"title": title, "description": description},
            DirectLabels,
        )
        logger.debug("Direct prediction", title=title, labels=response.labels)
        return list(response.labels)
