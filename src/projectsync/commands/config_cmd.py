"""Config commands — remote profiles and local sync settings."""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.prompt import Confirm

from projectsync.client.errors import ValidationError, error_handler
from projectsync.commands._common import FormatOpt, run
from projectsync.config.manager import ConfigManager
from projectsync.config.models import RemoteProfile
from projectsync.output.formatter import output

app = typer.Typer(name="config", help="Manage remote profiles and local sync settings.")
console = Console()

# `config set` keys and the CLIConfig field each one writes
SETTINGS = {"data-dir": "data_dir", "offline": "offline", "format": "default_format"}
_BOOL_WORDS = {"true": True, "on": True, "yes": True, "1": True,
               "false": False, "off": False, "no": False, "0": False}


def _get_manager() -> ConfigManager:
    return ConfigManager()


@app.command()
@error_handler
def add(
    name: Annotated[str, typer.Argument(help="Profile name")],
    url: Annotated[str, typer.Option("--url", "-u", help="Remote URL")],
    token: Annotated[Optional[str], typer.Option("--token", "-t", help="API token")] = None,
    timeout: Annotated[float, typer.Option("--timeout", help="Request timeout in seconds")] = 30.0,
    no_verify_ssl: Annotated[bool, typer.Option("--no-verify-ssl", help="Disable SSL verification")] = False,
    set_default: Annotated[bool, typer.Option("--default", help="Sync against this remote by default")] = False,
) -> None:
    """Register a remote that projects are synced with."""
    mgr = _get_manager()
    mgr.add_profile(
        RemoteProfile(name=name, url=url, token=token, timeout=timeout, verify_ssl=not no_verify_ssl)
    )
    if set_default:
        mgr.set_default(name)
    console.print(f"[green]Remote '{name}' added.[/]")


@app.command("list")
@error_handler
def list_profiles(fmt: FormatOpt = None) -> None:
    """List configured remotes."""
    mgr = _get_manager()
    fmt = mgr.resolve_format(fmt)
    profiles = mgr.config.profiles
    if not profiles:
        console.print("[yellow]No remotes configured; projects stay local. Add one with 'projectsync config add'.[/]")
        return

    default = mgr.config.default_profile
    rows = [
        [name, p.url, f"{p.timeout:g}s", "*" if name == default else ""]
        for name, p in profiles.items()
    ]
    output(
        [{"name": p.name, "url": p.url, "timeout": p.timeout} for p in profiles.values()],
        fmt,
        columns=["Name", "URL", "Timeout", "Default"],
        rows=rows,
        title="Remotes",
    )


@app.command()
@error_handler
def show(
    remote: Annotated[Optional[str], typer.Option("--remote", "-r", help="Remote profile")] = None,
    fmt: FormatOpt = None,
) -> None:
    """Show where projects are stored and which remote a sync would use."""
    mgr = _get_manager()
    fmt = mgr.resolve_format(fmt)
    resolved = mgr.resolve_remote(profile_name=remote)
    settings = {
        "config_file": str(mgr.config_path),
        "data_dir": str(mgr.resolve_data_dir()),
        "offline": mgr.resolve_offline(),
        "remote": resolved.name if resolved else None,
        "remote_url": resolved.url if resolved else None,
        "format": fmt,
    }
    output(settings, fmt, kv=True, title="Sync Settings")


@app.command("set")
@error_handler
def set_setting(
    key: Annotated[str, typer.Argument(help="data-dir, offline or format")],
    value: Annotated[str, typer.Argument(help="New value")],
) -> None:
    """Change a local sync setting."""
    if key not in SETTINGS:
        raise ValidationError(f"Unknown setting '{key}'. Choose one of: {', '.join(SETTINGS)}")
    parsed: object = value
    if key == "offline":
        if value.lower() not in _BOOL_WORDS:
            raise ValidationError(f"Expected true or false for offline, got '{value}'")
        parsed = _BOOL_WORDS[value.lower()]
    _get_manager().update_settings(**{SETTINGS[key]: parsed})
    console.print(f"[green]{key} set to {parsed}.[/]")


@app.command("set-default")
@error_handler
def set_default(
    name: Annotated[str, typer.Argument(help="Remote profile name")],
) -> None:
    """Choose the remote used when --remote is not given."""
    if not _get_manager().set_default(name):
        console.print(f"[red]Remote '{name}' not found.[/]")
        raise typer.Exit(1)
    console.print(f"[green]Default remote set to '{name}'.[/]")


@app.command()
@error_handler
def test(
    name: Annotated[Optional[str], typer.Argument(help="Remote profile (default if omitted)")] = None,
) -> None:
    """Check that a remote answers by fetching its project list."""
    from projectsync.client.remote import RemoteClient

    profile = _get_manager().require_remote(profile_name=name)
    console.print(f"Contacting [bold]{profile.url}[/]...")

    async def _count_remote() -> int:
        async with RemoteClient(profile) as client:
            return len(await client.fetch_all())

    count = run(_count_remote())
    console.print(f"[green]Connected![/] Remote holds {count} projects.")


@app.command()
@error_handler
def remove(
    name: Annotated[str, typer.Argument(help="Remote profile name")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation")] = False,
) -> None:
    """Forget a remote. Local projects and pending changes are kept."""
    mgr = _get_manager()
    if not mgr.get_profile(name):
        console.print(f"[red]Remote '{name}' not found.[/]")
        raise typer.Exit(1)
    if not force and not Confirm.ask(f"Remove remote '{name}'?"):
        console.print("Cancelled.")
        return
    mgr.remove_profile(name)
    console.print(f"[green]Remote '{name}' removed.[/]")
