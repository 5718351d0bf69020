"""
Read-only access to the ledger graph stored in Neo4j.

Exposes the bounded Transaction-rooted traversal and the normalizer that
turns its aggregates into the `GraphSnapshot` wire form.
"""

from .client import GraphConfig, GraphSession, LedgerGraphClient
from .exceptions import GraphBackendUnavailable, QueryFailure
from .normalizer import normalize_subgraph
from .queries import DEFAULT_ROOT_LIMIT, RawSubgraph, SubgraphFetcher
from .schema import (
    CATEGORY_PROPERTIES,
    LABELS,
    REL_TYPES,
    GraphErrorPayload,
    GraphNode,
    GraphRelationship,
    GraphSnapshot,
)

__all__ = [
    "CATEGORY_PROPERTIES",
    "DEFAULT_ROOT_LIMIT",
    "LABELS",
    "REL_TYPES",
    "GraphBackendUnavailable",
    "GraphConfig",
    "GraphErrorPayload",
    "GraphNode",
    "GraphRelationship",
    "GraphSession",
    "GraphSnapshot",
    "LedgerGraphClient",
    "QueryFailure",
    "RawSubgraph",
    "SubgraphFetcher",
    "normalize_subgraph",
]
