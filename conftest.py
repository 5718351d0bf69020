"""Pytest bootstrap: adds the local src packages to `sys.path`.

Lets the test suite run without installing the packages, by pointing at
`services/*/src` and `packages/*/src` so that `ledger_graph`, `graph_scene`
and `ledger_graph_api` resolve.
"""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Iterable


def _extend_sys_path(paths: Iterable[Path]) -> None:
    """Prepend directories to `sys.path` once.

    Args:
        paths: directories to put in front of `sys.path`.
    """

    for p in paths:
        str_path = str(p)
        if str_path not in sys.path:
            sys.path.insert(0, str_path)


def _collect_src_paths(root: Path) -> list[Path]:
    """Collect local src directories.

    Args:
        root: repository root.

    Returns:
        Existing src directories.
    """

    candidates: list[Path] = [
        root / "services" / "graph_api" / "src",
        root / "packages" / "ledger-graph" / "src",
        root / "packages" / "graph_scene" / "src",
    ]
    return [p for p in candidates if p.exists()]


_extend_sys_path(_collect_src_paths(Path(__file__).parent.resolve()))
