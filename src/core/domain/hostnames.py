"""Validación sintáctica de hostnames.

Solo forma, nunca resolución: un alias válido puede no existir en DNS.
"""

from __future__ import annotations

import re
from typing import Iterable

MAX_HOSTNAME_LENGTH = 253
MAX_LABEL_LENGTH = 63

_HOSTNAME_RE = re.compile(
    r"^[a-z\d](-*[a-z\d])*(\.[a-z\d](-*[a-z\d])*)*$",
    re.IGNORECASE,
)


def normalize_name(value: str) -> str:
    """Lowercase + trim, the canonical form of hosts and aliases."""

    return value.strip().lower()


def is_valid_hostname(name: str) -> bool:
    """Return True when `name` is a syntactically valid hostname.

    Rules:
    - labels joined by dots, each starting and ending with an alphanumeric
      (hyphens only in between);
    - total length 1..253;
    - every label 1..63.
    """

    if not name or len(name) > MAX_HOSTNAME_LENGTH:
        return False
    if not _HOSTNAME_RE.match(name):
        return False
    return all(1 <= len(label) <= MAX_LABEL_LENGTH for label in name.split("."))


def split_alias_csv(raw: str) -> list[str]:
    """Split a comma separated alias list into normalized, non-empty tokens."""

    tokens = (normalize_name(part) for part in raw.split(","))
    return [token for token in tokens if token]


def partition_valid(names: Iterable[str]) -> tuple[list[str], list[str]]:
    valid: list[str] = []
    invalid: list[str] = []
    for name in names:
        (valid if is_valid_hostname(name) else invalid).append(name)
    return valid, invalid
