"""Shared fixtures: an isolated environment and a CNAME file path."""

import logging
import os
from pathlib import Path
from typing import Callable, Iterator

import pytest


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep settings from reading the developer's .env or CNAMECTL_* vars."""
    for key in [k for k in os.environ if k.startswith("CNAMECTL_")]:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo CLI logging setup so caplog sees `cnamectl.*` records."""
    yield
    logger = logging.getLogger("cnamectl")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def cname_file(tmp_path: Path) -> Path:
    """Path to a CNAME file that does not exist yet."""
    return tmp_path / "dnsmasq.d" / "05-pihole-cname.conf"


@pytest.fixture
def write_lines() -> Callable[..., Path]:
    """Write the given lines (newline terminated) to a path."""

    def _write(path: Path, *lines: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path

    return _write
