"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar la tabla de registros y el resumen de cambios en varios
  comandos.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from core.domain.models import AliasStore
from core.services.cname_engine import EngineResult, OperationStatus


def build_records_table(store: AliasStore, *, title: str = "CNAME records") -> Table:
    table = Table(title=title)
    table.add_column("Host", style="cyan", no_wrap=True)
    table.add_column("Aliases", style="white")
    table.add_column("#", style="dim", justify="right")
    for entry in store.entries:
        if not entry.aliases:
            continue
        table.add_row(entry.host, ", ".join(entry.aliases), str(len(entry.aliases)))
    return table


def status_line(result: EngineResult) -> str:
    """Single human readable status for an engine call."""

    if result.status is OperationStatus.WRITTEN:
        return f"Wrote {result.path}"
    if result.status is OperationStatus.HOST_NOT_FOUND:
        return f"No CNAME for {result.host} found."
    return "No changes made."


def print_change(console: Console, result: EngineResult) -> None:
    """Per-alias detail followed by the status line."""

    change = result.change
    for alias in change.added:
        console.print(f"[green]Added[/green] {escape(alias)}")
    for alias in change.already_present:
        console.print(f"[yellow]{escape(alias)} already exists[/yellow]")
    for alias in change.removed:
        console.print(f"[green]Removed[/green] {escape(alias)}")
    for alias in change.missing:
        console.print(f"[yellow]{escape(alias or '(empty)')} is not an alias of {escape(result.host)}[/yellow]")
    if change.unprocessed:
        console.print(f"[dim]Skipped: {escape(', '.join(change.unprocessed))}[/dim]")

    style = "bold green" if result.written else "cyan"
    console.print(f"[{style}]{escape(status_line(result))}[/{style}]")
