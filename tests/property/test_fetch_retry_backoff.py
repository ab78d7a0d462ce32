"""
Property-based tests for the fetcher's retry behaviour.

For any retry budget, a page that keeps failing is requested exactly
``max_retries + 1`` times before GitHubFetchError is raised, and every
computed delay stays within the configured cap.
"""

import asyncio

import httpx
import pytest
from hypothesis import given, settings, strategies as st

from issue_router.common.errors import GitHubFetchError
from issue_router.fetch.github_client import GitHubIssueFetcher


@given(st.integers(min_value=0, max_value=6), st.sampled_from([403, 404, 500, 502, 503]))
@settings(max_examples=30, deadline=None)
def test_retries_are_bounded(max_retries, status_code):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(status_code)

    fetcher = GitHubIssueFetcher(
        "o",
        "r",
        max_retries=max_retries,
        retry_base_delay=0,
        retry_max_delay=0,
        page_delay=0,
        transport=httpx.MockTransport(handler),
    )

    async def fetch():
        async with fetcher:
            return await fetcher.fetch_page(1)

    with pytest.raises(GitHubFetchError) as exc_info:
        asyncio.run(fetch())

    assert len(calls) == max_retries + 1
    assert exc_info.value.attempts == max_retries + 1


@given(
    st.integers(min_value=0, max_value=30),
    st.floats(min_value=0.1, max_value=60.0),
    st.floats(min_value=0.0, max_value=300.0),
    st.one_of(st.none(), st.integers(min_value=0, max_value=10_000)),
)
@settings(max_examples=100)
def test_backoff_never_exceeds_cap(attempt, base_delay, max_delay, retry_after):
    fetcher = GitHubIssueFetcher("o", "r", retry_base_delay=base_delay, retry_max_delay=max_delay)

    delay = fetcher._calculate_backoff(attempt, retry_after)

    assert 0 <= delay <= max_delay
