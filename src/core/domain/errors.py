"""Errores del dominio.

Por qué una jerarquía propia:
- La CLI traduce cada tipo a un mensaje y a un código de salida sin
  inspeccionar texto.
- Lectura y escritura se distinguen: si falla la escritura, la mutación en
  memoria ya se hizo y el llamador debe saberlo.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.services.cname_engine import EngineResult


class CnameError(Exception):
    """Base de todos los errores de cnamectl."""


class UsageError(CnameError):
    """Acción no soportada o argumentos ausentes."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidHostnameError(CnameError):
    """El host objetivo no es un hostname sintácticamente válido."""

    def __init__(self, hostname: str) -> None:
        super().__init__(f"Invalid hostname: {hostname!r}")
        self.hostname = hostname


class ConfigReadError(CnameError):
    """El fichero existe pero no se pudo abrir o leer."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to read {path}: {reason}")
        self.path = path
        self.reason = reason


class ConfigWriteError(CnameError):
    """No se pudo persistir el store.

    `result` lleva el resultado en memoria cuando la mutación ya se aplicó.
    """

    def __init__(
        self,
        path: Path,
        reason: str,
        *,
        operation: str = "write",
        result: EngineResult | None = None,
    ) -> None:
        super().__init__(f"Failed to {operation} {path}: {reason}")
        self.path = path
        self.reason = reason
        self.operation = operation
        self.result = result
