"""Lectura/escritura del fichero `cname=` de dnsmasq.

Formato (una línea por host):
- cname=alias,hostname
- cname=alias1,alias2,alias3,hostname

Por qué un único parser de línea:
- La gramática vive en `parse_cname_line`; lector y `doctor` la comparten.
- Las líneas que no son registros (comentarios, vacías, rotas) se ignoran.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass, field
from pathlib import Path

from adapters.file_lock import exclusive_lock
from core.domain.errors import ConfigReadError, ConfigWriteError
from core.domain.hostnames import is_valid_hostname, normalize_name
from core.domain.models import AliasStore

logger = logging.getLogger("cnamectl.file")

_CNAME_LINE_RE = re.compile(r"^cname\s*=\s*(?P<aliases>.+),(?P<host>[^,]+)$")

_DEFAULT_FILE_MODE = 0o644


@dataclass(frozen=True)
class CnameRecord:
    """One parsed `cname=` line."""

    host: str
    aliases: tuple[str, ...]

    @property
    def aliases_csv(self) -> str:
        return ",".join(self.aliases)


@dataclass
class ReadReport:
    """Store built from a file plus what the parser skipped."""

    store: AliasStore
    exists: bool = True
    records: int = 0
    skipped_lines: list[int] = field(default_factory=list)


def parse_cname_line(line: str) -> CnameRecord | None:
    """Parse a single line; `None` when it is not a valid record line."""

    text = normalize_name(line)
    if not text:
        return None
    match = _CNAME_LINE_RE.match(text)
    if match is None:
        return None

    host = normalize_name(match.group("host"))
    if not is_valid_hostname(host):
        return None
    aliases = tuple(normalize_name(a) for a in match.group("aliases").split(","))
    return CnameRecord(host=host, aliases=aliases)


def format_cname_line(host: str, aliases: list[str]) -> str:
    return f"cname={','.join(aliases)},{host}\n"


def inspect_alias_file(path: Path) -> ReadReport:
    """Read `path` into a store, keeping track of skipped lines."""

    if not path.exists():
        logger.debug("%s does not exist, starting empty", path)
        return ReadReport(store=AliasStore(), exists=False)

    report = ReadReport(store=AliasStore())
    try:
        with path.open("r", encoding="utf-8") as handle:
            for lineno, line in enumerate(handle, start=1):
                record = parse_cname_line(line)
                if record is None:
                    if line.strip():
                        report.skipped_lines.append(lineno)
                    continue
                report.records += 1
                report.store.merge(record.host, record.aliases_csv)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigReadError(path, str(exc)) from exc

    logger.debug(
        "Loaded %d record(s) for %d host(s) from %s",
        report.records,
        len(report.store.entries),
        path,
    )
    return report


def read_alias_store(path: Path) -> AliasStore:
    return inspect_alias_file(path).store


def render_alias_store(store: AliasStore) -> str:
    """Serialize in store order, dropping hosts without aliases."""

    return "".join(
        format_cname_line(entry.host, entry.aliases)
        for entry in store.entries
        if entry.aliases
    )


def _existing_owner(path: Path) -> tuple[int, int | None, int | None]:
    """Mode, uid and gid to carry over to the replacement file."""

    try:
        st = path.stat()
    except FileNotFoundError:
        return _DEFAULT_FILE_MODE, None, None
    return st.st_mode & 0o777, st.st_uid, st.st_gid


def _copy_owner(tmp_path: str, uid: int | None, gid: int | None) -> None:
    if uid is None or gid is None or not hasattr(os, "chown"):
        return
    try:
        os.chown(tmp_path, uid, gid)
    except PermissionError:
        # Sin privilegios solo se puede conservar el propietario actual.
        logger.debug("Could not keep owner %d:%d of %s", uid, gid, tmp_path)


def _write_atomic(path: Path, content: str) -> None:
    mode, uid, gid = _existing_owner(path)
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_path, mode)
        _copy_owner(tmp_path, uid, gid)
        try:
            os.replace(tmp_path, path)
        except OSError as exc:
            raise ConfigWriteError(path, str(exc), operation="replace") from exc
    finally:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)


def _write_in_place(path: Path, content: str) -> None:
    with path.open("w", encoding="utf-8") as handle:
        handle.write(content)
        handle.flush()


def write_alias_store(path: Path, store: AliasStore, *, atomic: bool = True) -> None:
    """Write `store` to `path`; the caller canonicalizes beforehand."""

    content = render_alias_store(store)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if atomic:
            _write_atomic(path, content)
        else:
            _write_in_place(path, content)
    except ConfigWriteError:
        raise
    except OSError as exc:
        raise ConfigWriteError(path, str(exc)) from exc
    logger.info("Wrote %s", path)


class FileCnameRepository:
    """`AliasRepository` sobre el fichero de configuración de dnsmasq."""

    def __init__(self, path: Path, *, use_lock: bool = True, atomic_write: bool = True) -> None:
        self.path = path
        self.use_lock = use_lock
        self.atomic_write = atomic_write

    def load(self) -> AliasStore:
        return read_alias_store(self.path)

    def save(self, store: AliasStore) -> None:
        write_alias_store(self.path, store, atomic=self.atomic_write)

    def locked(self) -> AbstractContextManager[None]:
        if not self.use_lock:
            return nullcontext()
        return exclusive_lock(self.path)
