"""Sync commands — reconcile with the remote and inspect the pending queue."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.prompt import Confirm

from projectsync.client.errors import error_handler
from projectsync.commands._common import (
    DataDirOpt,
    FormatOpt,
    OfflineOpt,
    RemoteOpt,
    TokenOpt,
    UrlOpt,
    open_engine,
    open_store,
    resolve_format,
    run,
)
from projectsync.output.formatter import QUEUE_COLUMNS, output, queue_rows
from projectsync.sync import SyncReport

app = typer.Typer(name="sync", help="Synchronize with the remote store.")
console = Console()


@app.command("run")
@error_handler
def run_sync(
    remote: RemoteOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    offline: OfflineOpt = False,
    data_dir: DataDirOpt = None,
) -> None:
    """Push pending changes and pull the remote list (local refresh when offline)."""

    async def _sync() -> tuple[SyncReport, int]:
        async with open_engine(remote, url, token, offline, data_dir) as engine:
            report = await engine.force_sync()
            return report, len(engine.projects)

    report, count = run(_sync())
    if report.local_only:
        console.print(f"[yellow]Offline:[/] refreshed {count} projects from local storage.")
        return
    if report.error:
        console.print(f"[red]Sync failed:[/] {report.error}")
        console.print("Pending changes were kept and will be retried.")
        raise typer.Exit(1)
    console.print(
        f"[green]Synced.[/] Pushed {report.pushed}, fetched {report.fetched}"
        + (f", seeded remote with {report.seeded}" if report.seeded else "")
        + "."
    )


@app.command()
@error_handler
def status(
    remote: RemoteOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    offline: OfflineOpt = False,
    data_dir: DataDirOpt = None,
    fmt: FormatOpt = None,
) -> None:
    """Show connectivity, project count and pending changes."""
    fmt = resolve_format(fmt)

    async def _status() -> dict[str, object]:
        async with open_engine(remote, url, token, offline, data_dir) as engine:
            return {
                "online": engine.is_online,
                "projects": len(engine.projects),
                "pending": await engine.pending_count(),
            }

    output(run(_status()), fmt, kv=True, title="Sync Status")


@app.command()
@error_handler
def queue(
    data_dir: DataDirOpt = None,
    fmt: FormatOpt = None,
) -> None:
    """List pending operations waiting for delivery."""
    fmt = resolve_format(fmt)
    ops = run(open_store(data_dir).read_queue())
    if not ops and fmt == "table":
        console.print("[green]Nothing pending.[/]")
        return
    output(ops, fmt, columns=QUEUE_COLUMNS, rows=queue_rows(ops), title="Pending Operations")


@app.command("clear-queue")
@error_handler
def clear_queue(
    force: Annotated[bool, typer.Option("--force", help="Skip confirmation")] = False,
    data_dir: DataDirOpt = None,
) -> None:
    """Discard pending operations without delivering them."""
    if not force and not Confirm.ask("Discard all pending changes? They will not reach the remote"):
        console.print("Cancelled.")
        return

    run(open_store(data_dir).clear_queue())
    console.print("[green]Pending queue cleared.[/]")
