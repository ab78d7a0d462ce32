"""GitHub REST client for paginating a repository's issues listing.

Pages are requested one at a time with a courtesy pause between pages. A
failing page is retried with capped exponential backoff; once the retry
budget is spent the fetch fails with GitHubFetchError instead of looping
forever.
"""

import asyncio
from typing import Any, Dict, List, Optional

import httpx
import structlog

from issue_router.common.errors import GitHubFetchError

logger = structlog.get_logger()


class GitHubIssueFetcher:
    """Async client for the ``/repos/{owner}/{repo}/issues`` listing.

    Attributes:
        owner: Repository owner.
        repo: Repository name.
        token: GitHub API token; anonymous access when empty.
        base_url: Base URL for GitHub API.
        per_page: Issues requested per page.
        page_delay: Seconds to wait after each successful page.
        max_retries: Retries allowed per page after the first attempt.
        retry_base_delay: Delay before the first retry, doubled on each
            further retry.
        retry_max_delay: Upper bound for any single retry delay.

    Example:
        >>> fetcher = GitHubIssueFetcher("langchain-ai", "langchainjs")
        >>> async with fetcher:
        ...     issues = await fetcher.fetch_all_issues()
    """

    # Statuses whose Retry-After header is honoured
    RATE_LIMIT_STATUS_CODES = {403, 429}

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str = "",
        base_url: str = "https://api.github.com",
        per_page: int = 100,
        page_delay: float = 5.0,
        max_retries: int = 5,
        retry_base_delay: float = 10.0,
        retry_max_delay: float = 120.0,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.owner = owner
        self.repo = repo
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.per_page = per_page
        self.page_delay = page_delay
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.retry_max_delay = retry_max_delay
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, creating it if necessary."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._default_headers(),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def _default_headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "Issue-Router-Fetcher",
        }
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GitHubIssueFetcher":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    @property
    def issues_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}/issues"

    def _calculate_backoff(self, attempt: int, retry_after: Optional[int] = None) -> float:
        """Delay before retry number ``attempt + 1``.

        Args:
            attempt: The failed attempt (0-indexed).
            retry_after: Seconds requested by the server, if any.

        Returns:
            Delay in seconds, never above retry_max_delay.
        """
        if retry_after is not None:
            return min(float(retry_after), self.retry_max_delay)
        return min(self.retry_base_delay * (2 ** attempt), self.retry_max_delay)

    @staticmethod
    def _parse_retry_after(response: httpx.Response) -> Optional[int]:
        value = response.headers.get("retry-after")
        if value is None:
            return None
        try:
            return max(0, int(value))
        except ValueError:
            return None

    async def fetch_page(self, page: int) -> List[Dict[str, Any]]:
        """Fetch one page of issues, retrying failures with backoff.

        Args:
            page: 1-based page number.

        Returns:
            The decoded array of issue objects; empty past the last page.

        Raises:
            GitHubFetchError: If the page still fails after max_retries retries.
        """
        params = {"state": "all", "page": page, "per_page": self.per_page}
        last_error: Optional[Exception] = None
        last_status: Optional[int] = None

        for attempt in range(self.max_retries + 1):
            retry_after = None
            try:
                response = await self.client.get(self.issues_path, params=params)
                last_status = response.status_code

                if response.status_code >= 400:
                    if response.status_code in self.RATE_LIMIT_STATUS_CODES:
                        retry_after = self._parse_retry_after(response)
                    raise GitHubFetchError(
                        f"GitHub API request failed: {response.status_code} {response.reason_phrase}",
                        page=page,
                        status_code=response.status_code,
                    )

                issues = response.json()
                if not isinstance(issues, list):
                    raise GitHubFetchError(
                        "GitHub API returned an unexpected payload",
                        page=page,
                        status_code=response.status_code,
                    )
                return issues

            except (httpx.RequestError, GitHubFetchError, ValueError) as e:
                last_error = e
                if attempt < self.max_retries:
                    delay = self._calculate_backoff(attempt, retry_after)
                    logger.warning(
                        "Issue page request failed, retrying",
                        page=page,
                        url=f"{self.base_url}{self.issues_path}",
                        error=str(e),
                        attempt=attempt + 1,
                        max_retries=self.max_retries,
                        delay=delay,
                    )
                    await asyncio.sleep(delay)

        logger.error(
            "Issue page request failed after all retries",
            page=page,
            max_retries=self.max_retries,
            error=str(last_error),
        )
        raise GitHubFetchError(
            f"Failed to fetch issues page {page} after {self.max_retries + 1} attempts: {last_error}",
            page=page,
            status_code=last_status,
            attempts=self.max_retries + 1,
            cause=last_error,
        )

    async def fetch_all_issues(self) -> List[Dict[str, Any]]:
        """Fetch every issue in the repository, page by page.

        Pagination stops at the first empty page.

        Returns:
            Raw issue objects in the order GitHub returned them, pull
            requests included.
        """
        all_issues: List[Dict[str, Any]] = []
        page = 1

        logger.info("Fetching issues from GitHub", owner=self.owner, repo=self.repo)

        while True:
            issues = await self.fetch_page(page)
            if not issues:
                break

            all_issues.extend(issues)
            if page % 5 == 0:
                logger.info("Fetched issues", count=len(all_issues), page=page)
            page += 1

            await asyncio.sleep(self.page_delay)

        logger.info("Total issues fetched", count=len(all_issues))
        return all_issues
