"""Exceptions raised by the ledger graph layer."""

from __future__ import annotations


class QueryFailure(RuntimeError):
    """The graph backend could not answer the traversal."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class GraphBackendUnavailable(QueryFailure):
    """No Neo4j driver is configured for this process."""
