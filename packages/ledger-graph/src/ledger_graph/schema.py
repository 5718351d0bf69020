"""
Declarative description of the ledger graph: labels, relationship types and
the wire models shared by the API service and scene clients.

`CATEGORY_PROPERTIES` is the only place that knows which property a category
carries over the wire; adding a category is a one-line change.
"""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict, Field


TRANSACTION = "Transaction"
ADDRESS = "Address"
OUTPUT = "Output"
UNKNOWN = "Unknown"

LABELS = [
    TRANSACTION,
    ADDRESS,
    OUTPUT,
]

REL_TYPES = [
    "SPENDS",
    "CREATES",
    "CONTROLS",
]

CATEGORY_PROPERTIES: dict[str, str] = {
    TRANSACTION: "txid",
    ADDRESS: "address",
    OUTPUT: "value",
}

Scalar = Union[str, int, float, bool, None]


class GraphNode(BaseModel):
    """Node as transmitted by `GET /graph-data`."""

    id: int
    labels: list[str] = Field(..., min_length=1)
    properties: dict[str, Scalar] = Field(default_factory=dict)

    @property
    def category(self) -> str:
        return self.labels[0]


class GraphRelationship(BaseModel):
    """Directed relationship between two nodes of the same snapshot."""

    model_config = ConfigDict(populate_by_name=True)

    start_node: int = Field(..., alias="startNode")
    end_node: int = Field(..., alias="endNode")
    type: str


class GraphSnapshot(BaseModel):
    """Complete, non-incremental graph payload."""

    nodes: list[GraphNode] = Field(default_factory=list)
    relationships: list[GraphRelationship] = Field(default_factory=list)


class GraphErrorPayload(BaseModel):
    """Body returned with status 500 when the backend query fails."""

    error: str


def primary_category(labels: list[str] | tuple[str, ...] | None) -> str:
    if not labels:
        return UNKNOWN
    return str(labels[0])


def category_property(category: str) -> str | None:
    """Property key carried by `category`, `None` for unknown categories."""

    return CATEGORY_PROPERTIES.get(category)


def projection_keys() -> list[str]:
    """Distinct property keys the traversal has to project."""

    return sorted(set(CATEGORY_PROPERTIES.values()))
