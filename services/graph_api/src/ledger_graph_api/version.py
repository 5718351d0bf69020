"""Version info for the ledger graph API service."""

from __future__ import annotations

import importlib.metadata


def _get_version() -> str:
    try:
        return importlib.metadata.version("ledger-graph-explorer")
    except importlib.metadata.PackageNotFoundError:
        return "0.1.0-dev"


__version__ = _get_version()
