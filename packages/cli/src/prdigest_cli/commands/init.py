"""init command — interactive wizard that writes .prdigest.yml.

The token is deliberately never written to the file; it stays in the
environment or the gh CLI session.
"""

from __future__ import annotations

import subprocess
from datetime import date
from pathlib import Path

import click
import yaml
from rich.console import Console

console = Console()


def _validate_date(value: str) -> str:
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError:
        raise click.BadParameter(f"{value!r} is not a YYYY-MM-DD date.")


@click.command("init")
@click.option("--org", default=None, help="GitHub organization. Auto-detected from the git remote.")
@click.pass_context
def init_cmd(ctx, org: str | None):
    """Create or update .prdigest.yml for this directory."""
    from prdigest_core.config import DEFAULT_CONFIG

    config_path = Path((ctx.obj or {}).get("config_path", ".prdigest.yml"))
    console.print(f"\n[bold cyan]prdigest init[/bold cyan] — writes {config_path}\n")

    author = click.prompt("GitHub username (PR author)")

    if org is None:
        detected = _detect_org_from_git()
        if detected:
            console.print(f"[dim]Detected organization: {detected}[/dim]")
        org = click.prompt("GitHub organization", default=detected)

    start = click.prompt("Start date (YYYY-MM-DD)", default=DEFAULT_CONFIG["start_date"], value_proc=_validate_date)
    end = click.prompt("End date (YYYY-MM-DD)", default=DEFAULT_CONFIG["end_date"], value_proc=_validate_date)
    if start > end:
        raise click.UsageError(f"Start date {start} is after end date {end}.")

    group_by_repo = click.confirm("Write one report file per repository?", default=True)
    config: dict = {
        "author": author,
        "org": org,
        "start_date": start,
        "end_date": end,
        "group_by_repo": group_by_repo,
    }
    if group_by_repo:
        config["output_dir"] = click.prompt("Output directory", default=DEFAULT_CONFIG["output_dir"])
    else:
        config["output_file"] = click.prompt("Output file", default=DEFAULT_CONFIG["output_file"])

    _write_config(config_path, config)
    console.print(f"[green]Wrote {config_path}[/green]")
    console.print("Make sure GITHUB_TOKEN is set (or run `gh auth login`), then run: [bold]prdigest report[/bold]")


def _detect_org_from_git() -> str | None:
    """Return the owner part of the origin remote if it points at github.com."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    url = result.stdout.strip()
    # https://github.com/owner/repo.git  or  git@github.com:owner/repo.git
    if "github.com" not in url:
        return None
    owner = url.split("github.com")[-1].lstrip("/:").split("/")[0]
    return owner or None


def _write_config(path: Path, config: dict) -> None:
    """Write the config file, keeping keys this wizard does not ask about."""
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))
