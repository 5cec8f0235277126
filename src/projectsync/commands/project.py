"""Project commands.

list, show, create, update.
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from projectsync.client.errors import error_handler
from projectsync.commands._common import (
    DataDirOpt,
    FormatOpt,
    OfflineOpt,
    RemoteOpt,
    StatusOpt,
    TokenOpt,
    UrlOpt,
    find_project,
    open_engine,
    parse_status,
    resolve_format,
    run,
)
from projectsync.models import Project, ProjectInput
from projectsync.output.formatter import PROJECT_COLUMNS, output, project_rows, status_line

app = typer.Typer(name="project", help="Manage projects (works offline).")
console = Console()


@app.command("list")
@error_handler
def list_projects(
    status: StatusOpt = None,
    filter_text: Annotated[
        str | None,
        typer.Option("--filter", help="Filter by name"),
    ] = None,
    remote: RemoteOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    offline: OfflineOpt = False,
    data_dir: DataDirOpt = None,
    fmt: FormatOpt = None,
) -> None:
    """List projects from local storage."""
    fmt = resolve_format(fmt)
    wanted = parse_status(status)

    async def _list() -> None:
        async with open_engine(remote, url, token, offline, data_dir) as engine:
            items = engine.projects
            if wanted is not None:
                items = [p for p in items if p.status is wanted]
            if filter_text:
                items = [p for p in items if filter_text.lower() in p.name.lower()]
            rows = project_rows(items, styled=fmt == "table")
            output(items, fmt, columns=PROJECT_COLUMNS, rows=rows, title="Projects")
            if fmt == "table":
                pending = await engine.pending_count()
                console.print(status_line(engine.snapshot(), pending))

    run(_list())


@app.command()
@error_handler
def show(
    project_id: Annotated[str, typer.Argument(help="Project id (or unique prefix)")],
    remote: RemoteOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    offline: OfflineOpt = False,
    data_dir: DataDirOpt = None,
    fmt: FormatOpt = None,
) -> None:
    """Show project details."""
    fmt = resolve_format(fmt)

    async def _show() -> None:
        async with open_engine(remote, url, token, offline, data_dir) as engine:
            project = find_project(engine.projects, project_id)
            output(project.to_record(), fmt, kv=True, title=f"Project: {project.name}")

    run(_show())


@app.command()
@error_handler
def create(
    name: Annotated[str, typer.Argument(help="Project name")],
    status: StatusOpt = None,
    assignee: Annotated[
        str | None,
        typer.Option("--assignee", "-a", help="Person responsible"),
    ] = None,
    remote: RemoteOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    offline: OfflineOpt = False,
    data_dir: DataDirOpt = None,
) -> None:
    """Create a project; it is queued for sync when offline."""
    parsed = parse_status(status)
    if parsed is None:
        data = ProjectInput(name=name, assignee=assignee)
    else:
        data = ProjectInput(name=name, status=parsed, assignee=assignee)

    async def _create() -> Project:
        async with open_engine(remote, url, token, offline, data_dir) as engine:
            project = await engine.create_project(data)
            _report_pending(await engine.pending_count())
            return project

    project = run(_create())
    console.print(f"[green]Project '{project.name}' created[/] ({project.id}).")


@app.command()
@error_handler
def update(
    project_id: Annotated[str, typer.Argument(help="Project id (or unique prefix)")],
    name: Annotated[str | None, typer.Option("--name", "-n", help="New name")] = None,
    status: StatusOpt = None,
    assignee: Annotated[
        str | None,
        typer.Option("--assignee", "-a", help="New assignee"),
    ] = None,
    unassign: Annotated[
        bool, typer.Option("--unassign", help="Clear the assignee"),
    ] = False,
    remote: RemoteOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    offline: OfflineOpt = False,
    data_dir: DataDirOpt = None,
) -> None:
    """Change a project's name, status or assignee."""
    if assignee is not None and unassign:
        console.print("[red]Use either --assignee or --unassign, not both.[/]")
        raise typer.Exit(1)
    new_status = parse_status(status)

    async def _update() -> Project:
        async with open_engine(remote, url, token, offline, data_dir) as engine:
            current = find_project(engine.projects, project_id)
            changes: dict[str, object] = {}
            if name is not None:
                changes["name"] = name
            if new_status is not None:
                changes["status"] = new_status
            if assignee is not None:
                changes["assignee"] = assignee
            if unassign:
                changes["assignee"] = None
            # Re-validate so an empty name is rejected before the engine runs.
            edited = Project.model_validate({**current.model_dump(), **changes})
            project = await engine.update_project(edited)
            _report_pending(await engine.pending_count())
            return project

    project = run(_update())
    console.print(f"[green]Project '{project.name}' updated.[/]")


def _report_pending(pending: int) -> None:
    if pending:
        noun = "change" if pending == 1 else "changes"
        console.print(f"[yellow]{pending} {noun} waiting to sync.[/]")
