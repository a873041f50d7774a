import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "author": None,
    "org": None,
    "start_date": "2024-04-01",
    "end_date": "2025-04-01",
    "group_by_repo": True,
    "output_dir": "pr_reports",
    "output_file": "pull_requests.txt",
    "per_page": 100,  # GitHub search maximum
    "max_pages": 30,  # 3000 results; the search API refuses to go further anyway
    "detail_delay": 0.05,  # seconds between detail calls
    "wrap_width": 80,
    "api_url": "https://api.github.com",
}

# config key -> environment variable
ENV_VARS: dict[str, str] = {
    "author": "GITHUB_USERNAME",
    "org": "GITHUB_ORG",
    "github_token": "GITHUB_TOKEN",
    "start_date": "PRDIGEST_START_DATE",
    "end_date": "PRDIGEST_END_DATE",
    "output_dir": "PRDIGEST_OUTPUT_DIR",
}

_REQUIRED = ("author", "org", "github_token")


class ConfigError(ValueError):
    """Raised when the run configuration is incomplete or malformed."""


@dataclass(frozen=True)
class ReportConfig:
    """Validated settings for one report run.

    Built once at startup by build_report_config() and passed explicitly to
    the search, detail, report and writer layers.
    """

    author: str
    org: str
    token: str = field(repr=False)
    start_date: str
    end_date: str
    group_by_repo: bool = True
    output_dir: str = "pr_reports"
    output_file: str = "pull_requests.txt"
    per_page: int = 100
    max_pages: int = 30
    detail_delay: float = 0.05
    wrap_width: int = 80
    api_url: str = "https://api.github.com"


def load_config(config_path: str = ".prdigest.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prdigest.yml in the current directory
      3. Environment variables
      4. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)
    config["github_token"] = None

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a mapping, got {type(file_config).__name__}.")
        config.update(file_config)

    for key, env_var in ENV_VARS.items():
        value = os.environ.get(env_var)
        if value:
            config[key] = value

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config


def _parse_date(key: str, value) -> date:
    # PyYAML turns unquoted 2024-04-01 into a date already.
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ConfigError(f"{key} must be a YYYY-MM-DD date, got {value!r}.")


def build_report_config(config: dict) -> ReportConfig:
    """Validate a merged config dict and freeze it into a ReportConfig.

    Every missing required setting is reported at once so the user can fix
    them in a single pass.
    """
    missing = [key for key in _REQUIRED if not config.get(key)]
    if missing:
        names = ", ".join(f"{ENV_VARS[key]} ({key})" for key in missing)
        raise ConfigError(f"Missing required configuration: {names}.")

    start = _parse_date("start_date", config["start_date"])
    end = _parse_date("end_date", config["end_date"])
    if start > end:
        raise ConfigError(f"start_date {start} is after end_date {end}.")

    try:
        per_page = int(config["per_page"])
        max_pages = int(config["max_pages"])
        wrap_width = int(config["wrap_width"])
        detail_delay = float(config["detail_delay"])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid numeric setting: {e}")

    if per_page < 1 or max_pages < 1 or wrap_width < 1:
        raise ConfigError("per_page, max_pages and wrap_width must be positive.")
    if detail_delay < 0:
        raise ConfigError("detail_delay must not be negative.")

    return ReportConfig(
        author=str(config["author"]),
        org=str(config["org"]),
        token=str(config["github_token"]),
        start_date=start.isoformat(),
        end_date=end.isoformat(),
        group_by_repo=bool(config["group_by_repo"]),
        output_dir=str(config["output_dir"]),
        output_file=str(config["output_file"]),
        per_page=per_page,
        max_pages=max_pages,
        detail_delay=detail_delay,
        wrap_width=wrap_width,
        api_url=str(config["api_url"]).rstrip("/"),
    )
