"""Contrato de persistencia del store.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que el motor use el fichero real o un doble en memoria en tests.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from pathlib import Path
from typing import Protocol, runtime_checkable

from core.domain.models import AliasStore


@runtime_checkable
class AliasRepository(Protocol):
    """Contrato mínimo para cargar y guardar un `AliasStore`.

    Reglas de diseño:
    - `load` devuelve un store vacío si aún no hay registros.
    - `save` recibe el store ya canonicalizado.
    - `locked` envuelve la secuencia leer-mutar-escribir completa.
    """

    path: Path

    def load(self) -> AliasStore:
        ...

    def save(self, store: AliasStore) -> None:
        ...

    def locked(self) -> AbstractContextManager[None]:
        ...
