"""CLI for pulling ledger subgraph snapshots straight from Neo4j."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .client import GraphConfig, LedgerGraphClient
from .exceptions import QueryFailure
from .queries import DEFAULT_ROOT_LIMIT, SubgraphFetcher

logger = logging.getLogger(__name__)

app = typer.Typer(help="Ledger graph tools.")


@app.callback()
def main_callback() -> None:
    """Root callback, a command is required."""


def build_client(uri: str, user: str, password: str, database: str) -> LedgerGraphClient:
    return LedgerGraphClient(GraphConfig(uri=uri, user=user, password=password, database=database)).open()


@app.command(name="snapshot")
def snapshot(
    uri: str = typer.Option(..., "--uri", envvar="NEO4J_URI", help="Neo4j bolt URI."),
    user: str = typer.Option(..., "--user", envvar="NEO4J_USER", help="Neo4j user."),
    password: str = typer.Option(..., "--password", envvar="NEO4J_PASSWORD", help="Neo4j password."),
    database: str = typer.Option("neo4j", "--database", envvar="NEO4J_DATABASE", help="Neo4j database name."),
    root_limit: int = typer.Option(
        DEFAULT_ROOT_LIMIT,
        "--root-limit",
        min=1,
        max=DEFAULT_ROOT_LIMIT,
        help="Max number of Transaction roots to sample.",
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write JSON here instead of stdout."),
) -> None:
    """Run the bounded traversal and print the normalized snapshot as JSON."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s - %(message)s")
    client = build_client(uri, user, password, database)
    try:
        result = SubgraphFetcher(client, root_limit=root_limit).fetch()
    except QueryFailure as exc:
        logger.error("Snapshot failed: %s", exc)
        raise typer.Exit(code=1) from exc
    finally:
        client.close()

    payload = result.model_dump_json(by_alias=True, indent=2)
    if output is None:
        typer.echo(payload)
    else:
        output.write_text(payload, encoding="utf-8")
        typer.echo(f"Wrote {len(result.nodes)} nodes, {len(result.relationships)} relationships to {output}")


def main() -> None:
    """Entry point for python -m ledger_graph.cli."""

    app()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
