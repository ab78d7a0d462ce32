"""Entry point: split fetched issues into dev and test sets."""

import sys

from issue_router.common.cli import execute
from issue_router.common.config import IssueRouterSettings
from issue_router.common.metrics import PipelineMetrics
from issue_router.segregate.segregator import segregate


def run(settings: IssueRouterSettings, metrics: PipelineMetrics) -> None:
    result = segregate(
        source_dir=settings.issues_dir,
        dev_dir=settings.devset_dir,
        test_dir=settings.testset_dir,
        prefix=settings.label_prefix,
    )
    # Operator reference: the label vocabulary observed in the data
    print(", ".join(result.labels))


def main() -> None:
    sys.exit(execute("segregate", run))


if __name__ == "__main__":
    main()
