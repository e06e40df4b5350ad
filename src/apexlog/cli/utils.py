"""CLI utilities."""

from pathlib import Path

import click

from apexlog.config import ApexLogConfig, load_config
from apexlog.core.errors import ApexLogError
from apexlog.core.logging import configure_logging
from apexlog.events.models import ApexLog
from apexlog.parsing import parse_file


def load_log(path: Path, *, verbose: bool = False) -> tuple[ApexLog, ApexLogConfig]:
    """Load configuration for the working directory and parse the log at *path*.

    The configured logging section takes effect before parsing, unless
    --verbose already forced debug output.

    Raises:
        click.ClickException: If the configuration is invalid or the log cannot be read
    """
    try:
        config = load_config(Path.cwd())
        if not verbose:
            configure_logging(config=config.logging)
        return parse_file(path, config), config
    except ApexLogError as e:
        raise click.ClickException(str(e)) from e
