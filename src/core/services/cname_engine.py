"""CNAME engine orchestration.

The engine is the only entry point that mutates the alias file. One call is
one read → mutate → canonicalize → write cycle, done while holding the
repository lock. The CLI delegates here and only formats the outcome, which
keeps printing and exit codes out of the core logic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from adapters.cname_file import FileCnameRepository
from core.config import AppSettings
from core.domain.errors import ConfigWriteError, InvalidHostnameError, UsageError
from core.domain.hostnames import is_valid_hostname, normalize_name
from core.domain.models import AliasChange, AliasStore, RemovalPolicy
from core.domain.ordering import canonicalize
from core.interfaces.repository import AliasRepository

logger = logging.getLogger("cnamectl.engine")

SUPPORTED_ACTIONS: tuple[str, ...] = ("add", "remove")


class OperationStatus(str, Enum):
    """Outcome of a mutating call that did not raise."""

    WRITTEN = "written"
    NO_CHANGE = "no-change"
    HOST_NOT_FOUND = "host-not-found"


@dataclass
class EngineResult:
    """What happened to the file for one add/remove call."""

    action: str
    host: str
    status: OperationStatus
    change: AliasChange
    path: Path

    @property
    def written(self) -> bool:
        return self.status is OperationStatus.WRITTEN


Mutation = Callable[[AliasStore, str], AliasChange]


class CnameEngine:
    """Add/remove aliases against an `AliasRepository`."""

    def __init__(
        self,
        repository: AliasRepository,
        *,
        removal_policy: RemovalPolicy = RemovalPolicy.STOP_ON_MISS,
    ) -> None:
        self.repository = repository
        self.removal_policy = removal_policy

    @classmethod
    def from_settings(cls, settings: AppSettings, *, path: Path | None = None) -> "CnameEngine":
        repository = FileCnameRepository(
            path or settings.cname_file,
            use_lock=settings.use_lock,
            atomic_write=settings.atomic_write,
        )
        return cls(repository, removal_policy=settings.removal_policy)

    def add(self, host: str, aliases: str) -> EngineResult:
        return self._run("add", host, aliases, lambda store, h: store.merge(h, aliases))

    def remove(
        self,
        host: str,
        aliases: str,
        *,
        policy: RemovalPolicy | None = None,
    ) -> EngineResult:
        effective = policy or self.removal_policy
        return self._run(
            "remove",
            host,
            aliases,
            lambda store, h: store.remove(h, aliases, effective),
        )

    def apply(self, action: str, host: str, aliases: str) -> EngineResult:
        """Dispatch on a textual action (`add` / `remove`)."""

        normalized = (action or "").strip().lower()
        if normalized not in SUPPORTED_ACTIONS:
            raise UsageError(f"Unsupported action: {action!r} (expected add or remove)")
        if normalized == "add":
            return self.add(host, aliases)
        return self.remove(host, aliases)

    def snapshot(self) -> AliasStore:
        """Current records in canonical order, without modifying the file."""

        store = self.repository.load()
        canonicalize(store)
        return store

    def _run(self, action: str, host: str, aliases: str, mutate: Mutation) -> EngineResult:
        if aliases is None:
            raise UsageError("An alias list is required")
        target = normalize_name(host or "")
        if not is_valid_hostname(target):
            raise InvalidHostnameError(host)

        path = self.repository.path
        with self.repository.locked():
            store = self.repository.load()
            change = mutate(store, target)

            if not change.changed:
                status = OperationStatus.NO_CHANGE
                if action == "remove" and not change.host_found:
                    status = OperationStatus.HOST_NOT_FOUND
                logger.info("No changes made to %s", path)
                return EngineResult(action=action, host=target, status=status, change=change, path=path)

            canonicalize(store)
            result = EngineResult(
                action=action,
                host=target,
                status=OperationStatus.WRITTEN,
                change=change,
                path=path,
            )
            logger.info("Writing %s", path)
            try:
                self.repository.save(store)
            except ConfigWriteError as exc:
                exc.result = result
                raise
        return result
