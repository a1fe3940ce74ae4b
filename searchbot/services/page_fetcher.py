"""Fetch arbitrary pages and reduce them to plain text."""

import time

import httpx
import logfire

from searchbot.config import get_settings
from searchbot.constants import PAGE_FETCH_HEADERS
from searchbot.services.html_sanitizer import sanitize_html


class PageFetchError(Exception):
    """Raised when a page cannot be fetched."""

    pass


async def fetch_page_html(url: str, timeout_seconds: float | None = None) -> str:
    """
    GET ``url`` and return the response body.

    Redirects are followed. Any status other than 200 is a failure.

    Raises:
        PageFetchError: On transport errors or a non-200 status
    """
    if timeout_seconds is None:
        timeout_seconds = get_settings().page_fetch_timeout_seconds

    start_time = time.time()
    logfire.info("Fetching page", url=url)
    try:
        async with httpx.AsyncClient(
            timeout=timeout_seconds,
            follow_redirects=True,
            headers=PAGE_FETCH_HEADERS,
        ) as client:
            response = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logfire.error(
            "Page fetch request error",
            url=url,
            error=str(e),
            error_type=type(e).__name__,
            response_time_ms=(time.time() - start_time) * 1000,
        )
        raise PageFetchError(f"Failed to fetch {url}: {e}") from e

    if response.status_code != 200:
        logfire.error(
            "Page fetch failed",
            url=url,
            status_code=response.status_code,
            response_time_ms=(time.time() - start_time) * 1000,
        )
        raise PageFetchError(f"Failed to fetch {url}: status {response.status_code}")

    logfire.info(
        "Page fetched",
        url=url,
        status_code=response.status_code,
        content_length=len(response.text),
        response_time_ms=(time.time() - start_time) * 1000,
    )
    return response.text


async def fetch_page_text(url: str, timeout_seconds: float | None = None) -> str:
    """Fetch ``url`` and return its sanitized plain text."""
    html = await fetch_page_html(url, timeout_seconds)
    return sanitize_html(html)
