"""Entry point: fetch every issue of the configured repository to disk."""

import sys

from issue_router.common.cli import execute
from issue_router.common.config import IssueRouterSettings
from issue_router.common.metrics import PipelineMetrics
from issue_router.fetch.workflow import IssueFetchWorkflow


async def run(settings: IssueRouterSettings, metrics: PipelineMetrics) -> None:
    workflow = IssueFetchWorkflow(settings)
    results = await workflow.execute()
    metrics.record_issues_fetched(results["files_written"])


def main() -> None:
    sys.exit(execute("fetch", run))


if __name__ == "__main__":
    main()
