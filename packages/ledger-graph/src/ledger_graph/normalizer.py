"""Turns raw traversal aggregates into a deduplicated `GraphSnapshot`."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from .schema import (
    UNKNOWN,
    GraphNode,
    GraphRelationship,
    GraphSnapshot,
    category_property,
    primary_category,
)

logger = logging.getLogger(__name__)


def normalize_subgraph(
    raw_nodes: Iterable[Mapping[str, Any]],
    raw_relationships: Iterable[Mapping[str, Any]],
) -> GraphSnapshot:
    """Build the wire snapshot from traversal rows.

    Nodes are deduplicated by id (first occurrence wins). Relationships are
    kept only when both endpoints are present in the node set, and
    collapse on `(start, end, type)`.
    """

    nodes: dict[int, GraphNode] = {}
    for raw in raw_nodes:
        node_id = _as_int(raw.get("id"))
        if node_id is None or node_id in nodes:
            continue
        nodes[node_id] = _normalize_node(node_id, raw)

    relationships: list[GraphRelationship] = []
    seen: set[tuple[int, int, str]] = set()
    dropped = 0
    for raw in raw_relationships:
        start = _as_int(raw.get("startNode"))
        end = _as_int(raw.get("endNode"))
        rel_type = str(raw.get("type") or "")
        if start is None or end is None or start not in nodes or end not in nodes:
            dropped += 1
            continue
        key = (start, end, rel_type)
        if key in seen:
            continue
        seen.add(key)
        relationships.append(GraphRelationship(start_node=start, end_node=end, type=rel_type))

    if dropped:
        logger.debug("Dropped %d relationships with missing endpoints", dropped)
    return GraphSnapshot(nodes=list(nodes.values()), relationships=relationships)


def _normalize_node(node_id: int, raw: Mapping[str, Any]) -> GraphNode:
    labels = [str(label) for label in raw.get("labels") or []] or [UNKNOWN]
    key = category_property(primary_category(labels))
    source = raw.get("properties") or {}
    properties = {key: _as_scalar(source.get(key))} if key else {}
    return GraphNode(id=node_id, labels=labels, properties=properties)


def _as_scalar(value: Any) -> Any:
    # temporals, points and lists travel as their string form
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None
