"""report command — fetch a user's pull requests and write text reports."""

from __future__ import annotations

from datetime import datetime, timezone

import click
from rich.console import Console

from prdigest_core.collector import collect_pull_requests
from prdigest_core.gh.errors import GitHubAPIError
from prdigest_core.gh.search import build_search_query, search_pull_requests
from prdigest_core.report import format_report, render_reports, sort_records
from prdigest_store.base import OutputError
from prdigest_store.models import ReportDocument

console = Console(stderr=True)


def _to_documents(records, report_config, grouped: bool) -> list[ReportDocument]:
    """Map core records onto writer documents.

    The CLI owns this mapping: prdigest_core does not know about writers and
    prdigest_store does not know about pull requests.
    """
    generated_at = datetime.now(timezone.utc)
    if grouped:
        return [
            ReportDocument(content=text, repository=name)
            for name, text in render_reports(records, report_config, generated_at).items()
        ]
    return [ReportDocument(content=format_report(sort_records(records), report_config, generated_at))]


def _print_dry_run(report_config) -> None:
    query = build_search_query(report_config)
    items = search_pull_requests(query, report_config)
    console.print(f"\n[bold]Dry run: {len(items)} pull request(s) matched, no details fetched, nothing written[/bold]")
    for item in items:
        repo = f"{item.owner}/{item.repository}" if item.repository else "?"
        console.print(f"  {repo}#{item.number}  {item.title} (@{item.author})", markup=False, highlight=False)


@click.command("report")
@click.option("--author", default=None, help="GitHub username whose PRs to report. Overrides GITHUB_USERNAME.")
@click.option("--org", default=None, help="GitHub organization to search. Overrides GITHUB_ORG.")
@click.option("--since", "start_date", default=None, help="First creation date, YYYY-MM-DD (inclusive).")
@click.option("--until", "end_date", default=None, help="Last creation date, YYYY-MM-DD (inclusive).")
@click.option(
    "--group-by-repo/--single-file",
    "group_by_repo",
    default=None,
    help="One file per repository (default) or a single combined file.",
)
@click.option("--output-dir", default=None, help="Directory for per-repository files.")
@click.option("--output-file", default=None, help="Path of the combined file in --single-file mode.")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the report instead of writing files.")
@click.option("--dry-run", is_flag=True, help="Run the search only and list matches; no detail calls, no files.")
@click.pass_context
def report_cmd(
    ctx,
    author: str | None,
    org: str | None,
    start_date: str | None,
    end_date: str | None,
    group_by_repo: bool | None,
    output_dir: str | None,
    output_file: str | None,
    to_stdout: bool,
    dry_run: bool,
):
    """Write reports of PRs created by a user in an organization.

    Searches GitHub for pull requests by AUTHOR in ORG created within the
    date range, fetches each description, sorts by merge date (unmerged
    last) and writes plain-text reports.

    \b
    Settings (flags override .prdigest.yml, which overrides defaults):
      GITHUB_USERNAME      PR author
      GITHUB_ORG           organization
      GITHUB_TOKEN         access token (or GH_TOKEN, or `gh auth login`)
    """
    from prdigest_core.config import ConfigError, build_report_config, load_config
    from prdigest_cli.auth import resolve_github_token
    from prdigest_cli.cli import _build_writer

    config_path = (ctx.obj or {}).get("config_path", ".prdigest.yml")
    try:
        config = load_config(
            config_path,
            cli_overrides={
                "author": author,
                "org": org,
                "start_date": start_date,
                "end_date": end_date,
                "group_by_repo": group_by_repo,
                "output_dir": output_dir,
                "output_file": output_file,
            },
        )
        if not config.get("github_token"):
            config["github_token"] = resolve_github_token()
        report_config = build_report_config(config)
    except ConfigError as e:
        raise click.UsageError(str(e))

    try:
        if dry_run:
            _print_dry_run(report_config)
            return

        result = collect_pull_requests(report_config)
        documents = _to_documents(result.records, report_config, report_config.group_by_repo)
        writer = _build_writer(report_config, stdout=to_stdout)
        written = writer.write(documents)
    except (GitHubAPIError, OutputError) as e:
        raise click.ClickException(str(e))

    if not result.records:
        console.print("[yellow]No matching pull requests found.[/yellow]")
    if to_stdout:
        return
    if report_config.group_by_repo and not documents:
        console.print("No repository reports to write.")
    for path in written:
        console.print(f"[green]Wrote {path}[/green]")
    if len(written) < len(documents):
        console.print(f"[yellow]{len(documents) - len(written)} report file(s) could not be written.[/yellow]")
