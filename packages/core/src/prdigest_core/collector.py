"""Search-then-detail collection pipeline."""

from __future__ import annotations

import logging
import time
from typing import Callable

import requests
from github import Github
from rich.console import Console

from prdigest_core.config import ReportConfig
from prdigest_core.gh.pull_request import fetch_pull_detail, get_client
from prdigest_core.gh.search import build_search_query, search_pull_requests
from prdigest_core.models import CollectionResult, DetailResult, NotFound, PullRequestRecord, TransientFailure

console = Console(stderr=True)
logger = logging.getLogger(__name__)


def collect_pull_requests(
    config: ReportConfig,
    session: requests.Session | None = None,
    client: Github | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> CollectionResult:
    """Run the search, then fetch each result's detail one at a time.

    A fixed ``config.detail_delay`` pause separates successive detail calls.
    Detail failures other than rate limiting leave the record without a
    description; search failures and rate limiting propagate.
    """
    query = build_search_query(config)
    items = search_pull_requests(query, config, session=session)
    result = CollectionResult(query=query)
    if not items:
        return result

    client = client if client is not None else get_client(config.token, config.api_url)
    total = len(items)
    console.print(f"\nFetching details for {total} pull request(s)...")

    fetched = 0
    for i, item in enumerate(items, 1):
        if item.owner is None or item.repository is None:
            logger.warning(
                "Cannot parse repository from %r for PR #%d; skipping detail fetch.", item.repository_url, item.number
            )
            detail: DetailResult = TransientFailure("unparseable repository reference")
        else:
            if fetched and config.detail_delay:
                sleep(config.detail_delay)
            console.print(f"  [[{i}/{total}]] {item.owner}/{item.repository}#{item.number}")
            detail = fetch_pull_detail(client, item.owner, item.repository, item.number)
            fetched += 1

        if isinstance(detail, NotFound):
            result.not_found += 1
        elif isinstance(detail, TransientFailure):
            result.failed += 1
        result.records.append(PullRequestRecord.from_search_item(item, detail))

    console.print(
        f"Fetched {total - result.not_found - result.failed}/{total} description(s)"
        f" ({result.not_found} not found, {result.failed} failed)."
    )
    return result
