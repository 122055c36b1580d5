"""`python -m main` desde `src/`: mismo comando que el script `cnamectl`."""

from __future__ import annotations

import sys

# Hostnames y rutas se imprimen con rich; en consolas Windows cp1252 forzamos utf-8.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run

if __name__ == "__main__":
    run()
