"""apexlog CLI - apexlog command."""

import click

from apexlog.cli.issues import issues_command
from apexlog.cli.summary import summary_command
from apexlog.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="apexlog")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """apexlog - Call trees, timings and issues from Apex debug logs."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(summary_command, name="summary")
cli.add_command(issues_command, name="issues")


if __name__ == "__main__":
    cli()
