"""Entry point: predict labels for a single issue."""

import argparse
import json
import sys

from issue_router.common.cli import execute
from issue_router.common.config import IssueRouterSettings
from issue_router.common.metrics import PipelineMetrics
from issue_router.prediction.direct import DirectLabelPredictor
from issue_router.prediction.retrieval import LabelPredictorAgent
from issue_router.prediction.structured import create_chat_model
from issue_router.search.similarity import SimilaritySearch
from issue_router.storage.embeddings import create_vector_store


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Predict labels for a GitHub issue.")
    parser.add_argument("title", help="Issue title")
    parser.add_argument("description", nargs="?", default="", help="Issue description")
    parser.add_argument(
        "--predictor",
        choices=["retrieval", "direct"],
        default="retrieval",
        help="Use similar indexed issues (retrieval) or the closed label list (direct)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)

    async def run(settings: IssueRouterSettings, metrics: PipelineMetrics) -> None:
        llm = create_chat_model(settings)

        if args.predictor == "direct":
            labels = await DirectLabelPredictor(llm).predict_labels(args.title, args.description)
            metrics.record_prediction("direct")
            print(json.dumps({"predicted_labels": labels}, indent=2))
            return

        vector_store = create_vector_store(settings)
        agent = LabelPredictorAgent(SimilaritySearch(vector_store), llm, top_k=settings.retrieval_k)
        try:
            await agent.initialize()
            prediction = await agent.predict_labels(args.title, args.description)
        finally:
            await vector_store.close()
        metrics.record_prediction("retrieval")
        print(prediction.model_dump_json(indent=2))

    sys.exit(execute("predict", run))


if __name__ == "__main__":
    main()
