"""Checkout shim so ``python -m lexikon.cli.index_corpus`` runs uninstalled.

The modules live in ``src/lexikon``; from a source checkout this package
only adds that directory to its search path. Installed distributions ship
``src/lexikon`` directly and never see this file.
"""

from __future__ import annotations

from pathlib import Path

SOURCE_PACKAGE_DIR = Path(__file__).resolve().parents[1] / "src" / "lexikon"

if SOURCE_PACKAGE_DIR.is_dir() and str(SOURCE_PACKAGE_DIR) not in __path__:
    __path__.append(str(SOURCE_PACKAGE_DIR))
