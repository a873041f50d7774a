"""CLI entry point for prdigest.

Commands:
  report  — search an org for a user's pull requests and write text reports
  init    — interactive setup wizard that writes .prdigest.yml
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from prdigest_cli.commands.init import init_cmd
from prdigest_cli.commands.report import report_cmd


def _build_writer(report_config, stdout: bool = False):
    """Instantiate the report destination for this run.

    Writer selection:
      --stdout          → ConsoleWriter      (print, no files)
      group_by_repo     → GroupedFileWriter  (one file per repository)
      (otherwise)       → SingleFileWriter   (one fixed-name file)
    """
    if stdout:
        from prdigest_store.console import ConsoleWriter

        return ConsoleWriter()

    if report_config.group_by_repo:
        from prdigest_store.grouped import GroupedFileWriter

        return GroupedFileWriter(
            output_dir=report_config.output_dir,
            start_date=report_config.start_date,
            end_date=report_config.end_date,
        )

    from prdigest_store.single import SingleFileWriter

    return SingleFileWriter(report_config.output_file)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose, rich_tracebacks=verbose)],
        force=True,
    )
    # urllib3 debug output drowns the run log.
    logging.getLogger("urllib3").setLevel(logging.WARNING)


@click.group()
@click.version_option(
    version=importlib.metadata.version("prdigest"),
    prog_name="prdigest",
)
@click.option(
    "--config",
    "config_path",
    default=".prdigest.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRDIGEST_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Plain-text reports of a user's pull requests across a GitHub organization."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(report_cmd)
main.add_command(init_cmd)
