"""Web search client and search reply formatting."""

import time
from typing import Any, Iterable, List

import httpx
import logfire
from pydantic import ValidationError

from searchbot.config import get_settings
from searchbot.constants import MAX_QUICK_REPLIES
from searchbot.models.messenger import QuickReply
from searchbot.models.search_models import SearchReply, SearchResultItem


class SearchError(Exception):
    """Raised when the search API cannot be reached or returns garbage."""

    pass


def build_search_url(base_url: str, query: str) -> str:
    """Append the raw query text to the search endpoint base.

    The query is not escaped; the base is expected to end with ``q=``.
    """
    return base_url + query


def parse_search_items(data: Any) -> List[SearchResultItem]:
    """Extract result items from a decoded search response.

    An absent, null or empty ``items`` list yields an empty list.

    Raises:
        SearchError: If the body is not an object or an item is malformed.
    """
    if not isinstance(data, dict):
        raise SearchError("Search response is not a JSON object")
    items = data.get("items") or []
    try:
        return [SearchResultItem.model_validate(item) for item in items]
    except (ValidationError, TypeError) as e:
        raise SearchError(f"Malformed search item: {e}") from e


def format_search_results(items: Iterable[SearchResultItem]) -> SearchReply:
    """
    Format result items into one reply text with a parallel list of links.

    Each item renders as ``"{n}. {title}\\n\\n{snippet}"`` with a 1-based
    index; items are separated by a blank line.
    """
    blocks: List[str] = []
    links: List[str] = []
    for index, item in enumerate(items, start=1):
        blocks.append(f"{index}. {item.title}\n\n{item.snippet}")
        links.append(item.link)
    return SearchReply(text="\n\n".join(blocks), links=links)


def build_quick_replies(links: List[str]) -> List[QuickReply]:
    """One numbered button per link, capped at the platform maximum.

    Button titles match the result numbers in the reply text, so an item
    without a link leaves a gap in the numbering rather than shifting it.
    """
    return [
        QuickReply(title=str(number), payload=link)
        for number, link in enumerate(links[:MAX_QUICK_REPLIES], start=1)
        if link
    ]


class SearchClient:
    """Query the configured search endpoint.

    Example:
        >>> client = SearchClient(base_url="https://search.example/?q=")
        >>> items = await client.search("python")
    """

    def __init__(self, base_url: str, timeout_seconds: float | None = None):
        """Initialize the client.

        Args:
            base_url: Search endpoint base; the query is appended verbatim
            timeout_seconds: HTTP timeout. Uses settings when not provided.
        """
        if not base_url:
            raise ValueError("base_url is required")
        self._base_url = base_url
        self._timeout = timeout_seconds

    async def search(self, query: str) -> List[SearchResultItem]:
        """Run ``query`` and return the first page of results.

        Raises:
            SearchError: On transport errors or a body that is not a JSON object
        """
        start_time = time.time()
        url = build_search_url(self._base_url, query)
        timeout = self._timeout
        if timeout is None:
            timeout = get_settings().search_timeout_seconds

        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logfire.error(
                "Search API request error",
                query=query,
                error=str(e),
                error_type=type(e).__name__,
                response_time_ms=(time.time() - start_time) * 1000,
            )
            raise SearchError(f"Search request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            logfire.error(
                "Search API returned invalid JSON",
                query=query,
                status_code=response.status_code,
                error=str(e),
            )
            raise SearchError("Search response is not valid JSON") from e

        # Error bodies such as quota exhaustion carry no items and read as zero results
        if response.status_code != 200:
            logfire.warning(
                "Search API HTTP error",
                query=query,
                status_code=response.status_code,
                response_body=response.text[:500],
                response_time_ms=(time.time() - start_time) * 1000,
            )

        items = parse_search_items(data)
        logfire.info(
            "Search completed",
            query=query,
            result_count=len(items),
            response_time_ms=(time.time() - start_time) * 1000,
        )
        return items


def get_search_client() -> SearchClient:
    """Factory function to build a SearchClient from settings."""
    settings = get_settings()
    return SearchClient(
        base_url=settings.search_url,
        timeout_seconds=settings.search_timeout_seconds,
    )
