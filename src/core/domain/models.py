"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Las entradas del store son datos puros con validación en el borde.
- `AliasChange` documenta qué pasó en una mutación (añadidos, rechazados,
  no encontrados) sin que el dominio imprima nada.

Nota:
- El store se construye en cada invocación y se pasa explícitamente por las
  etapas leer → mutar → ordenar → escribir.
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel, Field

from core.domain.errors import InvalidHostnameError
from core.domain.hostnames import (
    is_valid_hostname,
    normalize_name,
    partition_valid,
    split_alias_csv,
)

logger = logging.getLogger("cnamectl.store")


class RemovalPolicy(str, Enum):
    """How `AliasStore.remove` treats an alias that is not present."""

    STOP_ON_MISS = "stop-on-miss"
    INDEPENDENT = "independent"


class HostAliasEntry(BaseModel):
    """Un host canónico y sus alias (registros CNAME)."""

    host: str = Field(
        ...,
        min_length=1,
        max_length=253,
        description="Hostname canónico, en minúsculas y sin espacios.",
    )
    aliases: list[str] = Field(
        default_factory=list,
        description="Alias distintos del host, en orden de inserción hasta canonicalizar.",
    )

    def has_alias(self, alias: str) -> bool:
        return normalize_name(alias) in self.aliases


class AliasChange(BaseModel):
    """Resultado de una mutación sobre el store."""

    host: str
    changed: bool = False
    host_found: bool = True
    added: list[str] = Field(default_factory=list)
    already_present: list[str] = Field(default_factory=list)
    rejected: list[str] = Field(
        default_factory=list,
        description="Alias descartados por no ser hostnames válidos.",
    )
    removed: list[str] = Field(default_factory=list)
    missing: list[str] = Field(
        default_factory=list,
        description="Alias pedidos para borrar que no estaban en la entrada.",
    )
    unprocessed: list[str] = Field(
        default_factory=list,
        description="Alias no evaluados tras el primer fallo (política stop-on-miss).",
    )


class AliasStore(BaseModel):
    """Colección ordenada de entradas host → alias.

    Invariantes:
    - no hay dos entradas con el mismo host;
    - una entrada no repite alias ni se contiene a sí misma.
    """

    entries: list[HostAliasEntry] = Field(default_factory=list)

    def find(self, host: str) -> HostAliasEntry | None:
        wanted = normalize_name(host)
        for entry in self.entries:
            if entry.host == wanted:
                return entry
        return None

    def hosts(self) -> list[str]:
        return [entry.host for entry in self.entries]

    def merge(self, host: str, raw_aliases: str) -> AliasChange:
        """Add the comma separated `raw_aliases` to `host`.

        Tokens equal to the host are dropped silently; invalid tokens are
        dropped with a warning. A new entry is only created when at least one
        alias survives.
        """

        host = _require_valid_host(host)
        change = AliasChange(host=host)

        requested = [token for token in split_alias_csv(raw_aliases) if token != host]
        candidates, rejected = partition_valid(requested)
        for token in rejected:
            logger.warning("Invalid alias: %s", token)
        change.rejected = rejected

        entry = self.find(host)
        if entry is None:
            if not candidates:
                change.host_found = False
                return change
            entry = HostAliasEntry(host=host)
            self.entries.append(entry)
            change.host_found = False

        for alias in candidates:
            if entry.has_alias(alias):
                logger.info("%s already exists for %s", alias, host)
                change.already_present.append(alias)
                continue
            entry.aliases.append(alias)
            change.added.append(alias)
            logger.debug("Added %s to %s", alias, host)

        change.changed = bool(change.added)
        return change

    def remove(
        self,
        host: str,
        raw_aliases: str,
        policy: RemovalPolicy = RemovalPolicy.STOP_ON_MISS,
    ) -> AliasChange:
        """Remove the comma separated `raw_aliases` from `host`.

        With `STOP_ON_MISS` the first alias that is not present ends the
        operation and the rest are reported as unprocessed. Empty tokens
        count as aliases that are not present. With
        `INDEPENDENT` every alias is tried.
        """

        host = _require_valid_host(host)
        change = AliasChange(host=host)

        entry = self.find(host)
        if entry is None:
            logger.info("No CNAME for %s found", host)
            change.host_found = False
            return change

        if policy is RemovalPolicy.STOP_ON_MISS:
            # Un token vacío también cuenta como fallo y corta la operación.
            tokens = [normalize_name(token) for token in raw_aliases.split(",")]
        else:
            tokens = split_alias_csv(raw_aliases)
        for index, alias in enumerate(tokens):
            if not entry.has_alias(alias):
                logger.info("%s is not an alias of %s", alias, host)
                change.missing.append(alias)
                if policy is RemovalPolicy.STOP_ON_MISS:
                    change.unprocessed = tokens[index + 1 :]
                    break
                continue
            entry.aliases.remove(alias)
            change.removed.append(alias)
            logger.debug("Removed %s from %s", alias, host)

        change.changed = bool(change.removed)
        return change


def _require_valid_host(host: str) -> str:
    normalized = normalize_name(host)
    if not is_valid_hostname(normalized):
        raise InvalidHostnameError(host)
    return normalized
