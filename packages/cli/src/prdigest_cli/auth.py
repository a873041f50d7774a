"""GitHub token resolution.

prdigest never runs an auth flow of its own. It reuses a token that already
exists, checked in this order (first hit wins):
  1. GITHUB_TOKEN, then GH_TOKEN environment variables
  2. `gh auth token` (an existing GitHub CLI login)
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)

_TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


def _token_from_gh_cli() -> str | None:
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        logger.debug("gh CLI unavailable; no token from a CLI session.")
        return None
    if result.returncode != 0:
        logger.debug("gh auth token exited %d: %s", result.returncode, result.stderr.strip())
        return None
    return result.stdout.strip() or None


def resolve_github_token() -> str | None:
    """Return the first available token, or None. Never raises."""
    for env_var in _TOKEN_ENV_VARS:
        token = os.environ.get(env_var)
        if token:
            logger.debug("Using GitHub token from %s.", env_var)
            return token

    token = _token_from_gh_cli()
    if token:
        logger.debug("Using GitHub token from the gh CLI session.")
    return token
