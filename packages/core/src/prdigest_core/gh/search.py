"""Paginated pull request search over the GitHub issue search endpoint.

The search endpoint is called directly with requests rather than through
PyGithub's PaginatedList because the run needs the raw page loop: a hard page
ceiling, the Link header as the only "next page" signal, and the
X-RateLimit-Remaining header on failed pages.
"""

from __future__ import annotations

import logging

import requests
from rich.console import Console

from prdigest_core.config import ReportConfig
from prdigest_core.gh.errors import RateLimitError, SearchError, reset_time_from_headers
from prdigest_core.models import SearchItem

console = Console(stderr=True)
logger = logging.getLogger(__name__)

USER_AGENT = "prdigest"


def build_search_query(config: ReportConfig) -> str:
    """Search expression for PRs by the configured author in the org, created within the date range."""
    return f"is:pr author:{config.author} org:{config.org} created:{config.start_date}..{config.end_date}"


def build_session(token: str) -> requests.Session:
    session = requests.Session()
    session.headers.update(
        {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "User-Agent": USER_AGENT,
            "X-GitHub-Api-Version": "2022-11-28",
        }
    )
    return session


def _raise_for_search_failure(response: requests.Response, page: int) -> None:
    if response.headers.get("X-RateLimit-Remaining") == "0":
        reset_at = reset_time_from_headers(response.headers)
        when = reset_at.strftime("%Y-%m-%d %H:%M:%S UTC") if reset_at else "an unknown time"
        console.print(
            f"[red]GitHub API rate limit exhausted while fetching search page {page}. "
            f"The limit resets at {when}.[/red]"
        )
        raise RateLimitError(
            f"Rate limit exceeded on search page {page} (HTTP {response.status_code}).",
            status=response.status_code,
            reset_at=reset_at,
        )

    raise SearchError(
        f"GitHub search failed on page {page}: HTTP {response.status_code} {response.reason}\n"
        f"Response: {response.text}",
        status=response.status_code,
    )


def search_pull_requests(
    query: str,
    config: ReportConfig,
    session: requests.Session | None = None,
) -> list[SearchItem]:
    """Fetch every page of search results for ``query`` in API order.

    Stops at the first page that is empty or has no ``rel="next"`` link, or
    at ``config.max_pages`` (results past the ceiling are dropped with a
    warning). Any non-success page raises and aborts the run.
    """
    session = session if session is not None else build_session(config.token)
    url = f"{config.api_url}/search/issues"

    console.print("Starting GitHub PR search...")
    console.print(f"  Query: {query}")

    items: list[SearchItem] = []
    page = 1
    while True:
        console.print(f"  Fetching page {page}...")
        try:
            response = session.get(url, params={"q": query, "per_page": config.per_page, "page": page})
        except requests.RequestException as e:
            raise SearchError(f"Network error fetching search page {page}: {e}") from e

        if not response.ok:
            _raise_for_search_failure(response, page)

        try:
            page_items = response.json().get("items") or []
            items.extend(SearchItem.from_api(raw) for raw in page_items)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise SearchError(f"Malformed search response on page {page}: {e}") from e
        if not page_items:
            break

        if "next" not in response.links:
            break

        if page >= config.max_pages:
            logger.warning("Reached the page limit (%d); remaining search results are dropped.", config.max_pages)
            console.print(f"[yellow]Warning: reached page limit ({config.max_pages}). Stopping pagination early.[/yellow]")
            break

        page += 1

    console.print(f"Finished searching. Found {len(items)} matching pull request(s).")
    return items
