"""Client side of the ledger graph explorer: shaping and scene control."""

from .controller import SceneConfig, SceneController, SceneState, SliderRange
from .data_source import GraphDataSource, HttpGraphDataSource, parse_snapshot
from .engine import EngineOptions, HeadlessEngine, SceneEngine, StaticViewport, Viewport
from .exceptions import (
    GraphFetchError,
    InvalidResponseShape,
    SceneError,
    SceneNotMountedError,
    SceneNotReadyError,
)
from .shaper import LINK_COLORS, NODE_STYLES, VisualGraph, VisualLink, VisualNode, shape_graph, shape_link, shape_node

__all__ = [
    "EngineOptions",
    "GraphDataSource",
    "GraphFetchError",
    "HeadlessEngine",
    "HttpGraphDataSource",
    "InvalidResponseShape",
    "LINK_COLORS",
    "NODE_STYLES",
    "SceneConfig",
    "SceneController",
    "SceneEngine",
    "SceneError",
    "SceneNotMountedError",
    "SceneNotReadyError",
    "SceneState",
    "SliderRange",
    "StaticViewport",
    "Viewport",
    "VisualGraph",
    "VisualLink",
    "VisualNode",
    "parse_snapshot",
    "shape_graph",
    "shape_link",
    "shape_node",
]
