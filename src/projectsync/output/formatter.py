"""Output dispatcher — renders data in table, JSON, YAML, or CSV format."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Sequence
from typing import Any

from rich.console import Console

from projectsync.config.constants import OUTPUT_FORMATS
from projectsync.models import EngineSnapshot, PendingOperation, Project
from projectsync.output.tables import kv_table, make_table, styled_status

console = Console()

FORMATS = OUTPUT_FORMATS
PROJECT_COLUMNS = ["ID", "Name", "Status", "Assignee", "Updated"]
QUEUE_COLUMNS = ["Project", "Operation", "Name", "Queued At"]


def _plain(data: Any) -> Any:
    if isinstance(data, (Project, PendingOperation)):
        return data.to_record()
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, list):
        return [_plain(item) for item in data]
    return data


def output_json(data: Any) -> None:
    """Print data as formatted JSON."""
    console.print_json(json.dumps(_plain(data), indent=2, default=str))


def output_yaml(data: Any) -> None:
    """Print data as YAML."""
    import yaml

    console.print(yaml.dump(_plain(data), default_flow_style=False, sort_keys=False), end="")


def output_csv(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
    """Print data as CSV."""
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(columns)
    writer.writerows(
        [[str(v) if v is not None else "" for v in row] for row in rows]
    )
    console.print(buf.getvalue(), end="")


def output_table(
    data: Any,
    *,
    columns: Sequence[str] | None = None,
    rows: Sequence[Sequence[Any]] | None = None,
    title: str | None = None,
    kv: bool = False,
) -> None:
    """Print data as a Rich table."""
    if kv and isinstance(data, dict):
        console.print(kv_table(data, title=title))
    elif columns and rows is not None:
        console.print(make_table(title, columns, rows))
    elif isinstance(data, dict):
        console.print(kv_table(data, title=title))
    else:
        console.print(data)


def output(
    data: Any,
    fmt: str = "table",
    *,
    columns: Sequence[str] | None = None,
    rows: Sequence[Sequence[Any]] | None = None,
    title: str | None = None,
    kv: bool = False,
) -> None:
    """Dispatch output to the appropriate formatter."""
    if fmt not in FORMATS:
        raise ValueError(f"Unknown format '{fmt}'. Choose one of: {', '.join(FORMATS)}")
    if fmt == "json":
        output_json(data)
    elif fmt == "yaml":
        output_yaml(data)
    elif fmt == "csv":
        if columns and rows is not None:
            output_csv(columns, rows)
        else:
            output_json(data)
    else:
        output_table(data, columns=columns, rows=rows, title=title, kv=kv)


def project_rows(
    projects: Sequence[Project], *, styled: bool = False,
) -> list[list[Any]]:
    return [
        [
            p.id,
            p.name,
            styled_status(p.status.value) if styled else p.status.value,
            p.assignee,
            p.updated_at,
        ]
        for p in projects
    ]


def queue_rows(queue: Sequence[PendingOperation]) -> list[list[Any]]:
    return [
        [op.id, op.operation.value, op.data.name, op.timestamp]
        for op in queue
    ]


def status_line(snapshot: EngineSnapshot, pending: int) -> str:
    """One-line connectivity summary shown under project listings."""
    state = "[green]online[/]" if snapshot.is_online else "[yellow]offline[/]"
    parts = [state, f"{len(snapshot.projects)} projects"]
    if pending:
        parts.append(f"{pending} pending change{'s' if pending != 1 else ''}")
    if snapshot.syncing:
        parts.append("syncing")
    return " · ".join(parts)
