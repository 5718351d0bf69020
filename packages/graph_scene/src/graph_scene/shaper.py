"""Maps wire nodes/relationships onto the visual model used by the scene."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from ledger_graph.schema import (
    ADDRESS,
    OUTPUT,
    TRANSACTION,
    GraphNode,
    GraphRelationship,
    GraphSnapshot,
    category_property,
)

DEFAULT_COLOR = "#cccccc"
LABEL_PREFIX_LENGTH = 8


@dataclass(frozen=True)
class CategoryStyle:
    color: str
    size: float
    label_template: str
    truncate: int | None = None


NODE_STYLES: dict[str, CategoryStyle] = {
    TRANSACTION: CategoryStyle("#ff6b6b", 1.2, "Tx: {}...", truncate=LABEL_PREFIX_LENGTH),
    ADDRESS: CategoryStyle("#4ecdc4", 1.5, "Addr: {}...", truncate=LABEL_PREFIX_LENGTH),
    OUTPUT: CategoryStyle("#45b7d1", 1.0, "Out: {} BTC"),
}
OTHER_STYLE = CategoryStyle(DEFAULT_COLOR, 1.0, "Unknown")

LINK_COLORS: dict[str, str] = {
    "SPENDS": "#ff9f1c",
    "CREATES": "#2ec4b6",
    "CONTROLS": "#e71d36",
}


@dataclass
class VisualNode:
    id: int
    label: str
    type: str
    color: str
    size: float
    properties: dict[str, Any] = field(default_factory=dict)
    # written by the rendering engine only
    x: float | None = None
    y: float | None = None
    z: float | None = None


@dataclass(frozen=True)
class VisualLink:
    source: int
    target: int
    type: str
    color: str


@dataclass
class VisualGraph:
    nodes: list[VisualNode] = field(default_factory=list)
    links: list[VisualLink] = field(default_factory=list)


def node_style(category: str) -> CategoryStyle:
    return NODE_STYLES.get(category, OTHER_STYLE)


def link_color(rel_type: str) -> str:
    return LINK_COLORS.get(rel_type, DEFAULT_COLOR)


def node_label(node: GraphNode) -> str:
    style = node_style(node.category)
    if style is OTHER_STYLE:
        return style.label_template
    key = category_property(node.category)
    text = _format_value(node.properties.get(key) if key else None)
    if style.truncate is not None:
        text = text[: style.truncate]
    return style.label_template.format(text)


def shape_node(node: GraphNode) -> VisualNode:
    style = node_style(node.category)
    return VisualNode(
        id=node.id,
        label=node_label(node),
        type=node.category,
        color=style.color,
        size=style.size,
        properties=dict(node.properties),
    )


def shape_link(rel: GraphRelationship) -> VisualLink:
    return VisualLink(source=rel.start_node, target=rel.end_node, type=rel.type, color=link_color(rel.type))


def shape_graph(snapshot: GraphSnapshot) -> VisualGraph:
    return VisualGraph(
        nodes=[shape_node(node) for node in snapshot.nodes],
        links=[shape_link(rel) for rel in snapshot.relationships],
    )


def count_by_type(items: Iterable[VisualNode | VisualLink]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for item in items:
        counts[item.type] = counts.get(item.type, 0) + 1
    return counts


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
