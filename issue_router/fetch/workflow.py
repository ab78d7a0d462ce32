"""Issue fetch workflow: download every issue and persist one file per issue."""

from pathlib import Path
from typing import Any, Dict, Optional

import structlog

from issue_router.common.config import IssueRouterSettings
from issue_router.fetch.github_client import GitHubIssueFetcher
from issue_router.fetch.writer import is_pull_request, save_issue, to_issue_record

logger = structlog.get_logger()


class IssueFetchWorkflow:
    """Orchestrates fetching issues from GitHub and writing them to disk."""

    def __init__(
        self,
        settings: IssueRouterSettings,
        fetcher: Optional[GitHubIssueFetcher] = None,
    ):
        self.output_dir = Path(settings.issues_dir)
        self.fetcher = fetcher or GitHubIssueFetcher(
            owner=settings.repo_owner,
            repo=settings.repo_name,
            token=settings.github_token,
            base_url=settings.github_api_base,
            per_page=settings.fetch_per_page,
            page_delay=settings.fetch_page_delay,
            max_retries=settings.fetch_max_retries,
            retry_base_delay=settings.fetch_retry_base_delay,
            retry_max_delay=settings.fetch_retry_max_delay,
        )

    async def execute(self) -> Dict[str, Any]:
        """Fetch all issues and save the non-pull-request ones.

        Returns:
            Counts of issues fetched, pull requests skipped and files written.

        Raises:
            GitHubFetchError: If a page cannot be fetched.
            OSError: If an issue file cannot be written.
        """
        results = {
            "issues_fetched": 0,
            "pull_requests_skipped": 0,
            "files_written": 0,
        }

        async with self.fetcher:
            raw_issues = await self.fetcher.fetch_all_issues()

        results["issues_fetched"] = len(raw_issues)
        logger.info("Processing issues", count=len(raw_issues), output_dir=str(self.output_dir))

        for i, raw_issue in enumerate(raw_issues):
            if is_pull_request(raw_issue):
                results["pull_requests_skipped"] += 1
                continue

            if i % 50 == 0:
                logger.info("Processing issue", position=i + 1, total=len(raw_issues))

            save_issue(to_issue_record(raw_issue), self.output_dir)
            results["files_written"] += 1

        logger.info("All issues processed and saved", output_dir=str(self.output_dir), **results)
        return results
