"""apexlog summary command - headline figures for one log."""

import json
from pathlib import Path

import click

from apexlog.cli.utils import load_log
from apexlog.report import build_summary, build_text_summary


@click.command()
@click.pass_context
@click.argument("logfile", type=click.Path(path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def summary_command(ctx: click.Context, logfile: Path, as_json: bool) -> None:
    """Summarise an Apex debug log.

    LOGFILE is the debug log to parse.
    """
    apex_log, config = load_log(logfile, verbose=ctx.obj.get("verbose", False))

    if as_json:
        click.echo(json.dumps(build_summary(apex_log), indent=2))
        return

    click.echo(
        build_text_summary(
            apex_log,
            max_issues=config.report.max_issues,
            max_parse_errors=config.report.max_parse_errors,
        )
    )
