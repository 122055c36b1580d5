"""CLI de cnamectl (Typer).

Uso:
- cnamectl add HOST alias1,alias2
- cnamectl remove HOST alias1,alias2
- cnamectl apply [add|remove] HOST alias1,alias2
- cnamectl show
- cnamectl doctor run

La CLI solo traduce: argumentos → `CnameEngine`, y resultado/errores →
mensajes y código de salida.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from adapters.cname_file import render_alias_store
from cli import doctor
from cli.log_setup import configure_logging, level_from_flags
from cli.ui_components import build_records_table, print_change
from core.config import AppSettings
from core.domain.errors import (
    ConfigReadError,
    ConfigWriteError,
    InvalidHostnameError,
    UsageError,
)
from core.domain.hostnames import is_valid_hostname, normalize_name
from core.domain.models import AliasStore, RemovalPolicy
from core.services.cname_engine import CnameEngine, EngineResult

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Manage dnsmasq CNAME records (cname=alias,...,host).",
)
app.add_typer(doctor.app, name="doctor")

_console = Console(soft_wrap=True)
_err_console = Console(stderr=True, soft_wrap=True)


@dataclass
class CliState:
    settings: AppSettings
    path: Path


def _fail(message: str) -> typer.Exit:
    _err_console.print(f"[red]{escape(message)}[/red]")
    return typer.Exit(code=1)


def _state(ctx: typer.Context) -> CliState:
    state = ctx.obj
    assert isinstance(state, CliState)
    return state


def _engine(ctx: typer.Context) -> CnameEngine:
    state = _state(ctx)
    return CnameEngine.from_settings(state.settings, path=state.path)


def _execute(call: Callable[[], EngineResult]) -> None:
    try:
        result = call()
    except UsageError as exc:
        raise _fail(f"Usage error: {exc.message}") from exc
    except InvalidHostnameError as exc:
        raise _fail(f"Invalid Hostname: {exc.hostname}") from exc
    except ConfigReadError as exc:
        raise _fail(str(exc)) from exc
    except ConfigWriteError as exc:
        message = f"Failed to save CNAMEs: {exc}"
        if exc.result is not None:
            message += " (changes were not persisted)"
        raise _fail(message) from exc
    print_change(_console, result)


def _require_host(host: str) -> str:
    """Validate HOST before anything is printed or read."""

    target = normalize_name(host)
    if not is_valid_hostname(target):
        raise _fail(f"Invalid Hostname: {host}")
    return target


@app.callback()
def main(
    ctx: typer.Context,
    file: Optional[Path] = typer.Option(
        None,
        "--file",
        "-f",
        help="CNAME file to operate on (default: CNAMECTL_CNAME_FILE).",
    ),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="-v info, -vv debug."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors."),
) -> None:
    try:
        settings = AppSettings()
    except ValidationError as exc:
        raise _fail(f"Invalid configuration: {exc}") from exc

    configure_logging(
        level_from_flags(settings.log_level, verbose=verbose, quiet=quiet),
        settings.log_file,
    )
    ctx.obj = CliState(settings=settings, path=file or settings.cname_file)


@app.command()
def add(
    ctx: typer.Context,
    host: str = typer.Argument(..., help="Canonical hostname."),
    aliases: str = typer.Argument(..., help="Comma separated aliases."),
) -> None:
    """Add aliases to HOST."""

    engine = _engine(ctx)
    target = _require_host(host)
    _console.print(f"Trying to add CNAMEs to {escape(target)}")
    _execute(lambda: engine.add(host, aliases))


@app.command()
def remove(
    ctx: typer.Context,
    host: str = typer.Argument(..., help="Canonical hostname."),
    aliases: str = typer.Argument(..., help="Comma separated aliases."),
    policy: Optional[RemovalPolicy] = typer.Option(
        None,
        "--policy",
        help="stop-on-miss stops at the first missing alias; independent tries all.",
    ),
) -> None:
    """Remove aliases from HOST."""

    engine = _engine(ctx)
    target = _require_host(host)
    _console.print(f"Removing {escape(normalize_name(aliases))} from {escape(target)}")
    _execute(lambda: engine.remove(host, aliases, policy=policy))


@app.command()
def apply(
    ctx: typer.Context,
    action: str = typer.Argument(..., help="add or remove."),
    host: str = typer.Argument(..., help="Canonical hostname."),
    aliases: str = typer.Argument(..., help="Comma separated aliases."),
    policy: Optional[RemovalPolicy] = typer.Option(None, "--policy", help="Removal policy."),
) -> None:
    """Run ACTION (add/remove) on HOST, like `cname.php [add/remove] host aliases`."""

    engine = _engine(ctx)
    if policy is not None:
        engine.removal_policy = policy
    _execute(lambda: engine.apply(action, host, aliases))


@app.command()
def show(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, "--host", help="Only show this host."),
    raw: bool = typer.Option(False, "--raw", help="Print the canonical file contents."),
) -> None:
    """Show current records in canonical order (read only)."""

    state = _state(ctx)
    try:
        store = _engine(ctx).snapshot()
    except ConfigReadError as exc:
        raise _fail(str(exc)) from exc

    if host is not None:
        entry = store.find(host)
        store = AliasStore(entries=[entry] if entry is not None else [])

    if raw:
        _console.out(render_alias_store(store), end="")
        return

    if not any(entry.aliases for entry in store.entries):
        _console.print(f"No CNAME records in {escape(str(state.path))}")
        return
    _console.print(build_records_table(store, title=str(state.path)))


def run() -> None:
    app()
