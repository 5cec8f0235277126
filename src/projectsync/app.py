"""Root Typer app — global options and command group registration."""

from __future__ import annotations

from typing import Optional

import typer

from projectsync import __version__
from projectsync.commands import config_cmd, project, sync_cmd
from projectsync.logging_setup import configure_logging

app = typer.Typer(
    name="projectsync",
    help="Offline-first project list that syncs with a remote store.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    if value:
        print(f"projectsync {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging to stderr."),
) -> None:
    """projectsync — keep working offline, reconcile when back online."""
    configure_logging(verbose)


# Register command groups
app.add_typer(project.app, name="project")
app.add_typer(sync_cmd.app, name="sync")
app.add_typer(config_cmd.app, name="config")


def main() -> None:
    app()
