"""Stylesheet retrieval over HTTP."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Sequence

import httpx

from csspruner.errors import FetchError
from csspruner.model import FetchResult

__all__ = ["HttpFetcher", "fetch_all"]

logger = logging.getLogger(__name__)

Fetch = Callable[[str], FetchResult]


class HttpFetcher:
    """Thin wrapper around :mod:`httpx` that never lets transport errors escape ``fetch``."""

    def __init__(
        self,
        timeout: float = 10.0,
        headers: dict[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            headers=headers or {"user-agent": "csspruner"},
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            transport=transport,
        )

    def get(self, url: str) -> str:
        """Return the body of *url*.

        Raises FetchError on timeout, transport failure or a non-2xx status.
        """
        try:
            resp = self._client.get(url)
        except httpx.TimeoutException as exc:
            raise FetchError(f"Timed out fetching {url}: {exc}", url=url, cause=exc) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(f"Failed to fetch {url}: {exc}", url=url, cause=exc) from exc

        if not resp.is_success:
            raise FetchError(
                f"Failed to fetch {url}: HTTP {resp.status_code}",
                url=url,
                status_code=resp.status_code,
            )
        return resp.text

    def fetch(self, url: str) -> FetchResult:
        """Fetch *url*, reporting failure in the result instead of raising."""
        try:
            content = self.get(url)
        except FetchError as exc:
            return FetchResult(url=url, ok=False, error=str(exc))
        return FetchResult(url=url, content=content, ok=True)

    def __call__(self, url: str) -> FetchResult:
        return self.fetch(url)

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def __enter__(self) -> HttpFetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def fetch_all(fetch: Fetch, urls: Sequence[str], max_workers: int = 4) -> list[FetchResult]:
    """Fetch every URL, concurrently when *max_workers* > 1.

    Results come back in the order of *urls* regardless of completion order.
    An exception raised by *fetch* becomes a failed result for that URL.
    """
    if not urls:
        return []

    def _safe_fetch(url: str) -> FetchResult:
        try:
            return fetch(url)
        except Exception as exc:
            logger.debug("Fetcher raised for %s", url, exc_info=True)
            return FetchResult(url=url, ok=False, error=str(exc))

    if max_workers <= 1 or len(urls) == 1:
        return [_safe_fetch(url) for url in urls]

    results: list[FetchResult | None] = [None] * len(urls)
    with ThreadPoolExecutor(max_workers=min(max_workers, len(urls))) as pool:
        futures = {pool.submit(_safe_fetch, url): idx for idx, url in enumerate(urls)}
        for future in as_completed(futures):
            results[futures[future]] = future.result()
    return [r for r in results if r is not None]
