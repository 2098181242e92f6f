"""Console script for logdock."""
from __future__ import annotations

from os import getenv
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ._scaffold import (DEFAULT_FILENAME,
                        REQUIRED_ENV_VARS,
                        ScaffoldResult,
                        write_scaffold)

app = typer.Typer(help='LogDock client tooling.')
console = Console()


@app.command()
def init(
    path: Path = typer.Option(Path('.'), '--path', '-p',
                              help='Directory to write the logger module to.'),
    filename: str = typer.Option(DEFAULT_FILENAME, '--filename',
                                 help='Name of the generated module.'),
    app_name: Optional[str] = typer.Option(None, '--app',
                                           help='Application name to hard-code.'),
    force: bool = typer.Option(False, '--force', '-f',
                               help='Overwrite an existing module '
                                    '(same as LOGDOCK_FORCE_INIT=true).'),
):
    """Generate a LogDock logger module for this project."""
    target, result = write_scaffold(path, filename, app=app_name,
                                    force=force or None)

    if result is ScaffoldResult.SKIPPED:
        console.print(f'[yellow]{target} already exists, skipping.[/yellow] '
                      'Use --force to regenerate it.')
        return

    console.print(f'[green]{result.value.capitalize()}[/green] {target}')

    missing = [v for v in REQUIRED_ENV_VARS if not getenv(v)]
    if missing:
        console.print('Set these environment variables before logging: '
                      + ', '.join(missing))


@app.command()
def version():
    """Print the installed logdock version."""
    from . import version as _version
    console.print(_version())


if __name__ == '__main__':
    app()
