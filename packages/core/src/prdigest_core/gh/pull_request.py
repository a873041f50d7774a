from __future__ import annotations

import logging

import requests
from github import Auth, Github, GithubException, RateLimitExceededException, UnknownObjectException
from rich.console import Console

from prdigest_core.gh.errors import RateLimitError, reset_time_from_headers
from prdigest_core.gh.search import USER_AGENT
from prdigest_core.models import DetailResult, Found, NotFound, PullRequestDetail, TransientFailure

console = Console(stderr=True)
logger = logging.getLogger(__name__)


def get_client(token: str, api_url: str = "https://api.github.com") -> Github:
    # retry=None: PyGithub retries 403/5xx by default, which would hide failures.
    return Github(auth=Auth.Token(token), base_url=api_url, user_agent=USER_AGENT, retry=None)


def get_pull(client: Github, owner: str, repo: str, number: int):
    # lazy=True skips the repository lookup so each detail costs one request.
    return client.get_repo(f"{owner}/{repo}", lazy=True).get_pull(number)


def fetch_pull_detail(client: Github, owner: str, repo: str, number: int) -> DetailResult:
    """Fetch body and merge time for one PR.

    404 is an expected outcome (deleted repo, lost access) and comes back as
    NotFound. Rate limiting raises RateLimitError: every later call would fail
    the same way. Anything else degrades to TransientFailure.
    """
    slug = f"{owner}/{repo}#{number}"
    try:
        pull = get_pull(client, owner, repo, number)
    except UnknownObjectException:
        logger.warning("PR %s not found (404); continuing without its description.", slug)
        return NotFound()
    except RateLimitExceededException as e:
        reset_at = reset_time_from_headers(e.headers)
        when = reset_at.strftime("%Y-%m-%d %H:%M:%S UTC") if reset_at else "an unknown time"
        console.print(f"[red]GitHub API rate limit hit while fetching {slug}. The limit resets at {when}.[/red]")
        raise RateLimitError(f"Rate limit exceeded fetching {slug}.", status=e.status, reset_at=reset_at) from e
    except GithubException as e:
        logger.error("Failed to fetch PR %s: HTTP %s %s", slug, e.status, e.data)
        return TransientFailure(f"HTTP {e.status}")
    except requests.RequestException as e:
        logger.error("Network error fetching PR %s: %s", slug, e)
        return TransientFailure(f"{type(e).__name__}: {e}")

    return Found(PullRequestDetail(body=pull.body, merged_at=pull.merged_at, html_url=pull.html_url))
