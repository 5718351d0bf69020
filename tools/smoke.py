"""Lightweight smoke checks for a running ledger graph API.

Usage:
    python tools/smoke.py --api http://localhost:8000

Performs non-destructive checks:
- GET /config and /health
- GET /graph-data, validating the snapshot and its endpoint invariants

Exits with code 0 on success, non-zero on first failure.
"""

from __future__ import annotations

import argparse
import logging
from typing import Any

import httpx


logger = logging.getLogger("smoke")


def _build_client(timeout: float = 30.0) -> httpx.Client:
    return httpx.Client(timeout=timeout)


def _get_json(client: httpx.Client, url: str) -> dict[str, Any]:
    resp = client.get(url)
    resp.raise_for_status()
    payload = resp.json()
    assert isinstance(payload, dict)
    return payload


def check_api(client: httpx.Client, base: str) -> None:
    cfg = _get_json(client, f"{base}/config")
    logger.info("/config ok: %s", {k: cfg.get(k) for k in ("apiVersion", "graph", "rootLimit")})
    health = _get_json(client, f"{base}/health")
    assert health.get("status") == "ok"
    logger.info("/health ok: %s", health)

    if cfg.get("graph") != "enabled":
        logger.warning("graph backend disabled, skipping /graph-data")
        return

    data = _get_json(client, f"{base}/graph-data")
    nodes = data.get("nodes")
    relationships = data.get("relationships")
    assert isinstance(nodes, list) and isinstance(relationships, list), "snapshot shape"
    ids = [node["id"] for node in nodes]
    assert len(ids) == len(set(ids)), "duplicate node ids"
    known = set(ids)
    for rel in relationships:
        assert rel["startNode"] in known and rel["endNode"] in known, f"dangling relationship {rel}"
    logger.info("/graph-data ok: %d nodes, %d relationships", len(nodes), len(relationships))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run smoke checks for the ledger graph API")
    parser.add_argument("--api", default="http://localhost:8000", help="Graph API base URL")
    parser.add_argument("--timeout", type=float, default=30.0, help="HTTP timeout seconds")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s - %(message)s")
    try:
        with _build_client(timeout=args.timeout) as client:
            check_api(client, args.api.rstrip("/"))
    except (httpx.HTTPError, AssertionError, KeyError) as exc:
        logger.error("smoke failed: %s", exc)
        return 1
    logger.info("smoke passed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
