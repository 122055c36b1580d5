"""Orden canónico (natural sort) del store.

Por qué natural sort:
- `host2` debe ir antes que `host10`; el orden lexicográfico los invierte.
- El fichero resultante es determinista, así los diffs entre ejecuciones son
  estables.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.domain.models import AliasStore

_DIGIT_RUNS = re.compile(r"(\d+)")


def natural_key(value: str) -> tuple[tuple[object, ...], str]:
    """Sort key comparing digit runs numerically and text runs as text.

    `re.split` with a capture group always alternates text/digits starting
    with text, so ints and strs never meet at the same position. The raw
    value breaks ties such as `01` vs `1`.
    """

    parts = _DIGIT_RUNS.split(value)
    return tuple(int(p) if i % 2 else p for i, p in enumerate(parts)), value


def canonicalize(store: AliasStore) -> None:
    """Sort entries by host and each alias list, in place."""

    store.entries.sort(key=lambda entry: natural_key(entry.host))
    for entry in store.entries:
        entry.aliases.sort(key=natural_key)
