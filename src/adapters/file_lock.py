"""Lock exclusivo entre procesos para el fichero de CNAMEs.

Se bloquea un fichero hermano oculto `.<nombre>.lock` (dnsmasq ignora los
ficheros con punto en `conf-dir`) y no el propio fichero de
configuración, porque la escritura atómica lo reemplaza (nuevo inode).
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from core.domain.errors import ConfigWriteError

logger = logging.getLogger("cnamectl.lock")


def lock_path_for(path: Path) -> Path:
    return path.with_name(f".{path.name}.lock")


def _acquire(fd: int) -> None:
    if sys.platform == "win32":
        import msvcrt  # noqa: PLC0415

        msvcrt.locking(fd, msvcrt.LK_LOCK, 1)
    else:
        import fcntl  # noqa: PLC0415

        fcntl.flock(fd, fcntl.LOCK_EX)


def _release(fd: int) -> None:
    if sys.platform == "win32":
        import msvcrt  # noqa: PLC0415

        os.lseek(fd, 0, os.SEEK_SET)
        msvcrt.locking(fd, msvcrt.LK_UNLCK, 1)
    else:
        import fcntl  # noqa: PLC0415

        fcntl.flock(fd, fcntl.LOCK_UN)


@contextmanager
def exclusive_lock(path: Path) -> Iterator[None]:
    """Hold an exclusive lock for `path` for the duration of the block.

    Blocks until any other holder releases it. The lock is released on every
    exit path, including exceptions raised inside the block.
    """

    lock_file = lock_path_for(path)
    try:
        lock_file.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(lock_file, os.O_RDWR | os.O_CREAT, 0o644)
    except OSError as exc:
        raise ConfigWriteError(path, str(exc), operation="lock") from exc

    try:
        try:
            _acquire(fd)
        except OSError as exc:
            raise ConfigWriteError(path, str(exc), operation="lock") from exc
        logger.debug("Acquired lock %s", lock_file)
        try:
            yield
        finally:
            _release(fd)
            logger.debug("Released lock %s", lock_file)
    finally:
        os.close(fd)
