"""Entry point: print the issues most similar to a query."""

import argparse
import json
import sys

from issue_router.common.cli import execute
from issue_router.common.config import IssueRouterSettings
from issue_router.common.metrics import PipelineMetrics
from issue_router.search.similarity import SimilaritySearch
from issue_router.storage.embeddings import create_vector_store


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search indexed issues by similarity.")
    parser.add_argument("query", help="Free-text query")
    parser.add_argument("-k", "--top-k", type=int, default=5, help="Number of results")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)

    async def run(settings: IssueRouterSettings, metrics: PipelineMetrics) -> None:
        vector_store = create_vector_store(settings)
        search = SimilaritySearch(vector_store)
        try:
            await search.initialize()
            results = await search.search_similar_issues(args.query, args.top_k)
        finally:
            await vector_store.close()
        print(json.dumps([result.model_dump() for result in results], indent=2))

    sys.exit(execute("search", run))


if __name__ == "__main__":
    main()
