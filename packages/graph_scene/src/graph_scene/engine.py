"""
Boundary with the 3-D force-directed rendering engine and its viewport.

`SceneEngine` mirrors the accessor/method surface of a force-graph style
engine (data binding, accessor hooks, camera control, named d3 forces,
reheat). `HeadlessEngine` implements it without drawing anything: camera
moves land immediately and nodes are laid out on a deterministic spiral. It
backs the CLI preview and the test suite.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Protocol, Sequence

from .shaper import VisualLink, VisualNode

Vector3 = tuple[float, float, float]
ORIGIN: Vector3 = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class EngineOptions:
    node_val: float = 6
    link_width: float = 1.5
    link_directional_particles: int = 2
    link_directional_particle_width: float = 2
    link_directional_particle_speed: float = 0.005
    velocity_decay: float = 0.3
    warmup_ticks: int = 100
    cooldown_time_ms: int = 1000
    enable_node_drag: bool = True
    enable_pointer_interaction: bool = True
    show_nav_info: bool = True


class SceneEngine(Protocol):
    def configure(self, options: EngineOptions) -> None: ...

    def set_size(self, width: int, height: int) -> None: ...

    def bind_graph(self, nodes: Sequence[VisualNode], links: Sequence[VisualLink]) -> None: ...

    def set_visibility(
        self,
        node_visible: Callable[[VisualNode], bool],
        link_visible: Callable[[VisualLink], bool],
    ) -> None: ...

    def camera_position(self) -> Vector3: ...

    def move_camera(self, position: Vector3, look_at: Vector3, duration_ms: int) -> None: ...

    def node_position(self, node_id: int) -> Vector3 | None: ...

    def set_force(self, force: str, parameter: str, value: float) -> None: ...

    def reheat(self) -> None: ...


class Viewport(Protocol):
    def container_width(self) -> float: ...

    def window_height(self) -> float: ...

    def on_resize(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register `callback`; the returned callable deregisters it."""


@dataclass
class CameraMove:
    position: Vector3
    look_at: Vector3
    duration_ms: int


class HeadlessEngine:
    """In-process `SceneEngine` without rendering."""

    def __init__(self, camera: Vector3 = (0.0, 0.0, 1000.0), spacing: float = 10.0) -> None:
        self.options: EngineOptions | None = None
        self.size: tuple[int, int] | None = None
        self.nodes: list[VisualNode] = []
        self.links: list[VisualLink] = []
        self.forces: dict[tuple[str, str], float] = {}
        self.camera_moves: list[CameraMove] = []
        self.reheat_count = 0
        self.bind_count = 0
        self._camera = camera
        self._spacing = spacing
        self._node_visible: Callable[[VisualNode], bool] = lambda node: True
        self._link_visible: Callable[[VisualLink], bool] = lambda link: True

    def configure(self, options: EngineOptions) -> None:
        self.options = options

    def set_size(self, width: int, height: int) -> None:
        self.size = (width, height)

    def bind_graph(self, nodes: Sequence[VisualNode], links: Sequence[VisualLink]) -> None:
        """Replace the bound graph and place nodes that have no position yet.

        Args:
            nodes: visual nodes; positions are written back onto them.
            links: visual links between bound node ids.
        """

        self.nodes = list(nodes)
        self.links = list(links)
        self.bind_count += 1
        for index, node in enumerate(self.nodes):
            if node.x is None:
                node.x, node.y, node.z = self._spiral(index)

    def set_visibility(
        self,
        node_visible: Callable[[VisualNode], bool],
        link_visible: Callable[[VisualLink], bool],
    ) -> None:
        """Install visibility accessors, evaluated on every read.

        Args:
            node_visible: predicate over bound nodes.
            link_visible: predicate over bound links.
        """

        self._node_visible = node_visible
        self._link_visible = link_visible

    def visible_nodes(self) -> list[VisualNode]:
        return [node for node in self.nodes if self._node_visible(node)]

    def visible_links(self) -> list[VisualLink]:
        return [link for link in self.links if self._link_visible(link)]

    def camera_position(self) -> Vector3:
        return self._camera

    def move_camera(self, position: Vector3, look_at: Vector3, duration_ms: int) -> None:
        """Record a camera transition; it lands immediately."""

        self.camera_moves.append(CameraMove(position, look_at, duration_ms))
        self._camera = position

    def node_position(self, node_id: int) -> Vector3 | None:
        """Current simulated position of a node.

        Args:
            node_id: id of a bound node.

        Returns:
            `(x, y, z)`, or `None` for unknown or unplaced nodes.
        """

        for node in self.nodes:
            if node.id == node_id and node.x is not None:
                return (node.x, node.y or 0.0, node.z or 0.0)
        return None

    def set_force(self, force: str, parameter: str, value: float) -> None:
        self.forces[(force, parameter)] = value

    def reheat(self) -> None:
        self.reheat_count += 1

    def _spiral(self, index: int) -> Vector3:
        angle = index * math.pi * (3 - math.sqrt(5))
        radius = self._spacing * math.sqrt(index + 1)
        return (radius * math.cos(angle), radius * math.sin(angle), self._spacing * (index % 7 - 3))


class StaticViewport:
    """Viewport with fixed measurements that can be resized by hand."""

    def __init__(self, width: float = 800, window_height: float = 800) -> None:
        self._width = width
        self._window_height = window_height
        self._listeners: list[Callable[[], None]] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def container_width(self) -> float:
        return self._width

    def window_height(self) -> float:
        return self._window_height

    def on_resize(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a resize listener.

        Args:
            callback: called after every `resize()`.

        Returns:
            Function removing the listener again.
        """

        self._listeners.append(callback)

        def _unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _unsubscribe

    def resize(self, width: float | None = None, window_height: float | None = None) -> None:
        """Change the measurements and notify listeners.

        Args:
            width: new container width, unchanged when omitted.
            window_height: new window height, unchanged when omitted.
        """

        if width is not None:
            self._width = width
        if window_height is not None:
            self._window_height = window_height
        for callback in list(self._listeners):
            callback()
