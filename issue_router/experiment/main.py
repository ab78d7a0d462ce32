"""Entry point: evaluate a label predictor on the dev set."""

import argparse
import sys

import structlog

from issue_router.common.cli import execute
from issue_router.common.config import IssueRouterSettings
from issue_router.common.metrics import PipelineMetrics
from issue_router.experiment.runner import (
    count_mismatches,
    load_dataset,
    run_experiment,
    write_results,
)
from issue_router.prediction.direct import DirectLabelPredictor
from issue_router.prediction.retrieval import LabelPredictorAgent
from issue_router.prediction.structured import create_chat_model
from issue_router.search.similarity import SimilaritySearch
from issue_router.storage.embeddings import create_vector_store

logger = structlog.get_logger()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a label prediction experiment.")
    parser.add_argument(
        "--predictor",
        choices=["direct", "retrieval"],
        default="direct",
        help="Predictor to evaluate",
    )
    parser.add_argument(
        "--dataset-dir",
        default=None,
        help="Directory of issue files to evaluate (default: DEVSET_DIR)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)

    async def run(settings: IssueRouterSettings, metrics: PipelineMetrics) -> None:
        dataset = load_dataset(args.dataset_dir or settings.devset_dir)
        llm = create_chat_model(settings)
        vector_store = None

        if args.predictor == "retrieval":
            vector_store = create_vector_store(settings)
            agent = LabelPredictorAgent(SimilaritySearch(vector_store), llm, top_k=settings.retrieval_k)

            async def predict(title: str, description: str):
                prediction = await agent.predict_labels(title, description)
                metrics.record_prediction("retrieval")
                return prediction.predicted_labels
        else:
            direct = DirectLabelPredictor(llm)

            async def predict(title: str, description: str):
                labels = await direct.predict_labels(title, description)
                metrics.record_prediction("direct")
                return labels

        try:
            if vector_store is not None:
                await agent.initialize()
            results = await run_experiment(predict, dataset)
        finally:
            if vector_store is not None:
                await vector_store.close()

        write_results(results, settings.results_dir)

        mismatches = count_mismatches(results)
        metrics.record_mismatches(mismatches)
        logger.info(f"Mismatches: {mismatches}/{len(results)}")

    sys.exit(execute("experiment", run))


if __name__ == "__main__":
    main()
