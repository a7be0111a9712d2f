"""Checkout shim: lets `python -m rstxref.cli.check_links` run without installing."""

from __future__ import annotations

from pathlib import Path

_SRC_PACKAGE = Path(__file__).resolve().parent.parent / "src" / "rstxref"

if _SRC_PACKAGE.is_dir():
    __path__.append(str(_SRC_PACKAGE))
