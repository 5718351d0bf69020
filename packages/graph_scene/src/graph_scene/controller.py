"""
Interactive scene controller.

Owns the UI state of the graph view (category filters, selection, hover,
viewport size) and translates it into calls on a `SceneEngine`.

Lifecycle::

    uninitialized --load()--> loading --> ready | errored

`mount()` must happen before `load()`. Filters, selection, hover, zoom,
camera reset and force tuning are only available in `ready`; none of them
refetches data or changes the top-level state. A failed load is final for
this controller instance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Literal

from ledger_graph.schema import LABELS

from .data_source import GraphDataSource, parse_snapshot
from .engine import ORIGIN, EngineOptions, SceneEngine, Vector3, Viewport
from .exceptions import GraphFetchError, InvalidResponseShape, SceneError, SceneNotMountedError, SceneNotReadyError
from .shaper import VisualGraph, VisualLink, VisualNode, shape_graph

logger = logging.getLogger(__name__)


class SceneState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    ERRORED = "errored"


@dataclass(frozen=True)
class SliderRange:
    minimum: float
    maximum: float
    step: float
    default: float

    def clamp(self, value: float) -> float:
        return min(self.maximum, max(self.minimum, value))


@dataclass(frozen=True)
class SceneConfig:
    initial_camera: Vector3 = (200.0, 200.0, 300.0)
    reset_duration_ms: int = 2000
    focus_offset: float = 100.0
    focus_duration_ms: int = 1000
    zoom_in_factor: float = 0.7
    zoom_out_factor: float = 1.3
    zoom_duration_ms: int = 1000
    chrome_allowance: float = 200.0
    link_distance: SliderRange = SliderRange(30, 200, 10, 80)
    repulsion: SliderRange = SliderRange(100, 1000, 50, 500)
    engine: EngineOptions = field(default_factory=EngineOptions)


class SceneController:
    def __init__(self, config: SceneConfig | None = None) -> None:
        self._config = config or SceneConfig()
        self._state = SceneState.UNINITIALIZED
        self._error: str | None = None
        self._engine: SceneEngine | None = None
        self._viewport: Viewport | None = None
        self._unsubscribe_resize: Callable[[], None] | None = None
        self._nodes: dict[int, VisualNode] = {}
        self._links: list[VisualLink] = []
        self.node_filters: dict[str, bool] = {category: True for category in LABELS}
        self._selected_id: int | None = None
        self._hovered_id: int | None = None
        self.dimensions: tuple[int, int] = (800, 600)
        self.link_distance = self._config.link_distance.default
        self.repulsion = self._config.repulsion.default

    @property
    def state(self) -> SceneState:
        return self._state

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def mounted(self) -> bool:
        return self._engine is not None

    # lifecycle

    def mount(self, engine: SceneEngine, viewport: Viewport) -> None:
        """Attach the rendering surface and start observing viewport size.

        Args:
            engine: force-graph engine receiving data, camera and force calls.
            viewport: source of container width, window height and resize events.

        Raises:
            SceneError: a surface is already mounted.
        """

        if self._engine is not None:
            raise SceneError("Scene is already mounted")
        self._engine = engine
        self._viewport = viewport
        engine.configure(self._config.engine)
        self._unsubscribe_resize = viewport.on_resize(self._update_dimensions)
        self._update_dimensions()

    def unmount(self) -> None:
        """Detach the surface and deregister the resize listener."""

        if self._unsubscribe_resize is not None:
            self._unsubscribe_resize()
            self._unsubscribe_resize = None
        self._engine = None
        self._viewport = None

    async def load(self, source: GraphDataSource) -> SceneState:
        """Fetch the snapshot once and bring the scene to `ready` or `errored`.

        Any failure of the fetch or of the payload check ends in `errored`
        with a readable message in `error`.

        Args:
            source: snapshot provider, called exactly once.

        Returns:
            The resulting state; stays `loading` when unmounted mid-fetch.

        Raises:
            SceneNotMountedError: `mount()` was not called.
            SceneError: data was already requested by this controller.
        """

        self._require_mounted()
        if self._state is not SceneState.UNINITIALIZED:
            raise SceneError(f"Graph data already requested (state={self._state.value}); reload to retry")
        self._state = SceneState.LOADING
        try:
            snapshot = parse_snapshot(await source.fetch())
        except (GraphFetchError, InvalidResponseShape) as exc:
            logger.error("Fetch error: %s", exc)
            return self._fail(exc)
        except Exception as exc:
            logger.exception("Unexpected error while fetching graph data")
            return self._fail(exc)

        if self._engine is None:
            logger.debug("Scene unmounted while loading, dropping snapshot")
            return self._state

        graph = shape_graph(snapshot)
        self._nodes = {node.id: node for node in graph.nodes}
        self._links = graph.links
        self._engine.bind_graph(graph.nodes, graph.links)
        self._engine.set_visibility(self.is_node_visible, self.is_link_visible)
        self._engine.set_force("link", "distance", self.link_distance)
        self._engine.set_force("charge", "strength", -self.repulsion)
        self._state = SceneState.READY
        logger.info("Scene ready with %d nodes and %d links", len(self._nodes), len(self._links))
        self.reset_camera()
        return self._state

    # queries

    @property
    def selected_node(self) -> VisualNode | None:
        if self._selected_id is None:
            return None
        return self._nodes.get(self._selected_id)

    @property
    def hovered_node(self) -> VisualNode | None:
        if self._hovered_id is None:
            return None
        return self._nodes.get(self._hovered_id)

    def node(self, node_id: int) -> VisualNode:
        try:
            return self._nodes[node_id]
        except KeyError as exc:
            raise KeyError(f"Node {node_id} is not part of the scene") from exc

    def is_node_visible(self, node: VisualNode) -> bool:
        return self.node_filters.get(node.type, True)

    def is_link_visible(self, link: VisualLink) -> bool:
        source = self._nodes.get(link.source)
        target = self._nodes.get(link.target)
        if source is None or target is None:
            return False
        return self.is_node_visible(source) and self.is_node_visible(target)

    def visible_graph(self) -> VisualGraph:
        return VisualGraph(
            nodes=[node for node in self._nodes.values() if self.is_node_visible(node)],
            links=[link for link in self._links if self.is_link_visible(link)],
        )

    def inspect_selected(self) -> dict[str, str]:
        """Properties of the selected node as display strings, `{}` without a selection."""

        node = self.selected_node
        if node is None:
            return {}
        return {key: "" if value is None else str(value) for key, value in node.properties.items()}

    # interactions

    def toggle_filter(self, category: str, enabled: bool | None = None) -> bool:
        """Show or hide a node category without refetching.

        Args:
            category: primary label, one of the filter keys.
            enabled: explicit value; flips the current one when omitted.

        Returns:
            The new visibility of the category.

        Raises:
            KeyError: unknown category.
        """

        engine = self._require_ready()
        if category not in self.node_filters:
            raise KeyError(f"Unknown category '{category}'")
        value = (not self.node_filters[category]) if enabled is None else enabled
        self.node_filters[category] = value
        engine.set_visibility(self.is_node_visible, self.is_link_visible)
        if self.selected_node is not None and not self.is_node_visible(self.selected_node):
            self._selected_id = None
        if self.hovered_node is not None and not self.is_node_visible(self.hovered_node):
            self._hovered_id = None
        return value

    def select_node(self, node_id: int | None) -> VisualNode | None:
        """Select a visible node and fly the camera towards its live position.

        Args:
            node_id: node to select, `None` clears the selection.

        Returns:
            The selected node, or `None` when cleared or hidden.
        """

        engine = self._require_ready()
        if node_id is None:
            self._selected_id = None
            return None
        node = self.node(node_id)
        if not self.is_node_visible(node):
            logger.debug("Ignoring selection of hidden node %s", node_id)
            return None
        self._selected_id = node.id
        target = engine.node_position(node.id) or (node.x or 0.0, node.y or 0.0, node.z or 0.0)
        offset = self._config.focus_offset
        position = (target[0] + offset, target[1] + offset, target[2] + offset)
        engine.move_camera(position, target, self._config.focus_duration_ms)
        return node

    def hover(self, node_id: int | None) -> VisualNode | None:
        self._require_ready()
        if node_id is None or node_id not in self._nodes or not self.is_node_visible(self._nodes[node_id]):
            self._hovered_id = None
            return None
        self._hovered_id = node_id
        return self._nodes[node_id]

    def zoom(self, direction: Literal["in", "out"]) -> Vector3:
        """Scale the camera position towards or away from the origin.

        Args:
            direction: `"in"` or `"out"`.

        Returns:
            The new camera position.
        """

        engine = self._require_ready()
        if direction == "in":
            factor = self._config.zoom_in_factor
        elif direction == "out":
            factor = self._config.zoom_out_factor
        else:
            raise ValueError(f"Unknown zoom direction '{direction}'")
        x, y, z = engine.camera_position()
        position = (x * factor, y * factor, z * factor)
        engine.move_camera(position, ORIGIN, self._config.zoom_duration_ms)
        return position

    def reset_camera(self) -> None:
        """Fly back to the initial camera position."""

        engine = self._require_ready()
        engine.move_camera(self._config.initial_camera, ORIGIN, self._config.reset_duration_ms)

    def set_link_distance(self, value: float) -> float:
        """Apply a link distance and reheat the simulation.

        Args:
            value: requested distance, clamped to the slider range.

        Returns:
            The distance actually applied.
        """

        engine = self._require_ready()
        self.link_distance = self._config.link_distance.clamp(value)
        engine.set_force("link", "distance", self.link_distance)
        engine.reheat()
        return self.link_distance

    def set_repulsion(self, value: float) -> float:
        """Apply node repulsion as a negative charge strength and reheat.

        Args:
            value: requested repulsion, clamped to the slider range.

        Returns:
            The repulsion actually applied.
        """

        engine = self._require_ready()
        self.repulsion = self._config.repulsion.clamp(value)
        engine.set_force("charge", "strength", -self.repulsion)
        engine.reheat()
        return self.repulsion

    # internals

    def _fail(self, exc: Exception) -> SceneState:
        self._error = f"Error loading graph data: {exc}"
        self._state = SceneState.ERRORED
        return self._state

    def _update_dimensions(self) -> None:
        if self._engine is None or self._viewport is None:
            return
        width = int(self._viewport.container_width())
        height = int(max(0.0, self._viewport.window_height() - self._config.chrome_allowance))
        self.dimensions = (width, height)
        self._engine.set_size(width, height)

    def _require_mounted(self) -> SceneEngine:
        if self._engine is None:
            raise SceneNotMountedError("Rendering surface is not mounted")
        return self._engine

    def _require_ready(self) -> SceneEngine:
        engine = self._require_mounted()
        if self._state is not SceneState.READY:
            raise SceneNotReadyError(f"Scene is {self._state.value}")
        return engine
