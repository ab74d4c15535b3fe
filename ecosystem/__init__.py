"""Checkout shim: lets ``python -m ecosystem.app.cli`` run from the repo root without installing."""
from __future__ import annotations

from pathlib import Path
from pkgutil import extend_path

__path__ = extend_path(__path__, __name__)

_SRC_PACKAGE = Path(__file__).resolve().parent.parent / "src" / "ecosystem"
if _SRC_PACKAGE.is_dir() and str(_SRC_PACKAGE) not in __path__:
    __path__.append(str(_SRC_PACKAGE))

__version__ = "0.1.0"
