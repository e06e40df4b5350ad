"""apexlog issues command - list the issues found in one log."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from apexlog.cli.utils import load_log
from apexlog.core.formatting import pluralize, truncate_at_word

_KIND_STYLES = {"error": "red", "unexpected": "yellow", "skip": "dim"}


@click.command()
@click.pass_context
@click.argument("logfile", type=click.Path(path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def issues_command(ctx: click.Context, logfile: Path, as_json: bool) -> None:
    """List issues and parse errors in an Apex debug log.

    LOGFILE is the debug log to parse.
    """
    apex_log, _ = load_log(logfile, verbose=ctx.obj.get("verbose", False))

    if as_json:
        click.echo(
            json.dumps(
                {
                    "issues": [
                        {
                            "start_time": issue.start_time,
                            "summary": issue.summary,
                            "description": issue.description,
                            "kind": issue.kind,
                        }
                        for issue in apex_log.issues
                    ],
                    "parse_errors": apex_log.parse_errors,
                }
            )
        )
        return

    if not apex_log.issues and not apex_log.parse_errors:
        click.echo("No issues found.")
        return

    console = Console()
    if apex_log.issues:
        table = Table(title=pluralize(len(apex_log.issues), "issue"), pad_edge=False)
        table.add_column("time", justify="right")
        table.add_column("kind")
        table.add_column("summary", style="bold")
        table.add_column("description")
        for issue in apex_log.issues:
            style = _KIND_STYLES.get(issue.kind, "")
            table.add_row(
                str(issue.start_time),
                f"[{style}]{issue.kind}[/{style}]" if style else issue.kind,
                escape(issue.summary),
                escape(truncate_at_word(issue.description, max_len=60)),
            )
        console.print(table)

    for error in apex_log.parse_errors:
        console.print(f"[yellow]![/yellow] {escape(error)}", highlight=False)
