"""Doctor command for configuration diagnostics."""

from __future__ import annotations

import os
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.cname_file import ReadReport, inspect_alias_file
from adapters.file_lock import lock_path_for
from core.config import write_user_env_vars
from core.domain.errors import ConfigReadError

app = typer.Typer(no_args_is_help=True, help="Configuration diagnostics and setup.")

_console = Console(soft_wrap=True)


def _check_read(path: Path) -> tuple[ReadReport | None, str]:
    try:
        return inspect_alias_file(path), "OK"
    except ConfigReadError as exc:
        return None, exc.reason


def _check_writable(path: Path) -> tuple[bool, str]:
    """Writable file, or a writable (possibly not yet created) parent."""

    if path.exists():
        return os.access(path, os.W_OK), str(path)
    parent = path.parent
    while not parent.exists() and parent != parent.parent:
        parent = parent.parent
    return os.access(parent, os.W_OK), f"{parent} (file will be created)"


@app.command()
def run(ctx: typer.Context) -> None:
    """Inspect the configured CNAME file and report problems."""

    state = ctx.obj
    settings = state.settings
    path: Path = state.path

    table = Table(title="cnamectl doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("CNAME file", "OK", str(path))

    report, detail = _check_read(path)
    if report is None:
        table.add_row("Readable", "FAIL", detail)
    elif not report.exists:
        table.add_row("Readable", "MISSING", "No records yet; add creates the file")
    else:
        table.add_row("Readable", "OK", f"{report.records} record(s), {len(report.store.entries)} host(s)")
        if report.skipped_lines:
            shown = ", ".join(str(n) for n in report.skipped_lines[:10])
            table.add_row("Ignored lines", "WARN", f"line(s) {shown}")

    ok_write, detail_write = _check_writable(path)
    table.add_row("Writable", "OK" if ok_write else "FAIL", detail_write)

    if settings.use_lock:
        table.add_row("Lock", "OK", str(lock_path_for(path)))
    else:
        table.add_row("Lock", "OFF", "Concurrent writers may lose updates")
    table.add_row("Atomic write", "OK" if settings.atomic_write else "OFF", "")
    table.add_row("Removal policy", "OK", settings.removal_policy.value)

    _console.print(table)

    if report is None or not ok_write:
        raise typer.Exit(code=1)


@app.command(name="set-file")
def set_file(
    path: Path = typer.Argument(..., help="CNAME file to use by default."),
) -> None:
    """Store the default CNAME file in the user config .env."""

    env_path = write_user_env_vars({"CNAMECTL_CNAME_FILE": str(path.expanduser())})
    _console.print(f"[green]Saved config to:[/green] {escape(str(env_path))}")
