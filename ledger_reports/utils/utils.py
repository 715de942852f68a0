"""Filesystem helpers."""

import os
from pathlib import Path


def get_project_root() -> Path:
    """Return the project root directory.

    The ``LEDGER_REPORTS_HOME`` environment variable overrides the location
    derived from the package path.

    Returns:
        Path: Directory holding the ``ledger_reports`` package.
    """
    override = os.getenv("LEDGER_REPORTS_HOME")
    if override:
        return Path(override).expanduser().resolve()
    return Path(__file__).resolve().parents[2]


__all__ = ["get_project_root"]
