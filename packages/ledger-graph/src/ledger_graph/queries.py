from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from neo4j.exceptions import DriverError, Neo4jError

from .client import LedgerGraphClient
from .exceptions import QueryFailure
from .normalizer import normalize_subgraph
from .schema import REL_TYPES, TRANSACTION, GraphSnapshot, category_property, projection_keys

logger = logging.getLogger(__name__)

DEFAULT_ROOT_LIMIT = 1000


@dataclass
class RawSubgraph:
    nodes: list[dict[str, Any]] = field(default_factory=list)
    relationships: list[dict[str, Any]] = field(default_factory=list)


def build_subgraph_cypher() -> str:
    """Traversal from a capped, unordered sample of Transaction roots."""

    root_keys = f".{category_property(TRANSACTION)}"
    adjacent_keys = ", ".join(f".{key}" for key in projection_keys())
    return f"""
    MATCH (t:{TRANSACTION})
    WITH t LIMIT $root_limit
    MATCH (t)-[r]->(m)
    WHERE type(r) IN $rel_types
    RETURN
      collect(DISTINCT {{id: id(t), labels: labels(t), properties: t {{{root_keys}}}}}) AS roots,
      collect(DISTINCT {{id: id(m), labels: labels(m), properties: m {{{adjacent_keys}}}}}) AS adjacent,
      collect(DISTINCT {{
        startNode: id(startNode(r)),
        endNode: id(endNode(r)),
        type: type(r)
      }}) AS relationships
    """


class SubgraphFetcher:
    """Runs the bounded ledger traversal and normalizes its result."""

    def __init__(self, graph_client: LedgerGraphClient, *, root_limit: int = DEFAULT_ROOT_LIMIT) -> None:
        if root_limit < 1:
            raise ValueError("root_limit must be positive")
        self._graph_client = graph_client
        self._root_limit = root_limit
        self._cypher = build_subgraph_cypher()

    @property
    def root_limit(self) -> int:
        return self._root_limit

    def fetch_raw(self) -> RawSubgraph:
        params = {"root_limit": self._root_limit, "rel_types": list(REL_TYPES)}
        try:
            with self._graph_client.read_session() as session:
                records = session.run(self._cypher, params)
        except (Neo4jError, DriverError) as exc:
            raise QueryFailure(f"Graph traversal failed: {exc}", cause=exc) from exc

        if not records:
            return RawSubgraph()
        data = records[0]
        nodes = list(data.get("roots") or []) + list(data.get("adjacent") or [])
        return RawSubgraph(nodes=nodes, relationships=list(data.get("relationships") or []))

    def fetch(self) -> GraphSnapshot:
        raw = self.fetch_raw()
        snapshot = normalize_subgraph(raw.nodes, raw.relationships)
        logger.info(
            "Fetched ledger subgraph: %d nodes, %d relationships",
            len(snapshot.nodes),
            len(snapshot.relationships),
        )
        return snapshot
