"""Exceptions of the scene client."""

from __future__ import annotations


class SceneError(RuntimeError):
    """Base error of the scene controller."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class GraphFetchError(SceneError):
    """Graph data could not be retrieved, or the backend reported an error."""


class InvalidResponseShape(SceneError):
    """Payload lacks the node list or the relationship list."""


class SceneNotMountedError(SceneError):
    """Operation requires a mounted rendering surface."""


class SceneNotReadyError(SceneError):
    """Interactive operation attempted outside of the ready state."""
