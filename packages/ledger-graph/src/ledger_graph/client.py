from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator

import neo4j

from .exceptions import GraphBackendUnavailable

logger = logging.getLogger(__name__)


@dataclass
class GraphConfig:
    uri: str
    user: str
    password: str
    database: str | None = "neo4j"
    max_connection_pool_size: int = 50


class GraphSession:
    """Read-only session scoped to a single traversal."""

    def __init__(self, run_fn: Callable[[str, dict[str, Any]], list[dict[str, Any]]]) -> None:
        self._run_fn = run_fn

    def run(self, cypher: str, parameters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Run a Cypher statement in this session.

        Args:
            cypher: statement text.
            parameters: query parameters, empty when omitted.

        Returns:
            Records as plain dicts, in result order.
        """

        return self._run_fn(cypher, parameters or {})


class LedgerGraphClient:
    """
    Explicitly constructed wrapper around the Neo4j driver.

    The driver (and its connection pool) lives from `open()` to `close()`;
    every call to `read_session()` borrows one session and always returns it
    to the pool, including when the query raises.
    """

    def __init__(self, config: GraphConfig | None, *, driver: Any | None = None) -> None:
        self._config = config
        self._driver = driver

    @property
    def database(self) -> str | None:
        return self._config.database if self._config else None

    def open(self) -> "LedgerGraphClient":  # pragma: no cover - external dependency
        """Create the driver and its connection pool.

        No-op when a driver was injected or no configuration is available.

        Returns:
            The client itself, for chaining.
        """

        if self._driver is not None or self._config is None:
            return self
        self._driver = neo4j.GraphDatabase.driver(
            self._config.uri,
            auth=(self._config.user, self._config.password),
            max_connection_pool_size=self._config.max_connection_pool_size,
        )
        logger.info("Neo4j driver opened for %s", self._config.uri)
        return self

    def close(self) -> None:
        """Close the driver and release pooled connections."""

        if self._driver is not None:
            self._driver.close()
            self._driver = None
            logger.info("Neo4j driver closed")

    def has_driver(self) -> bool:
        return self._driver is not None

    @contextlib.contextmanager
    def read_session(self) -> Iterator[GraphSession]:
        """Borrow a read-access session for one traversal.

        Yields:
            `GraphSession` bound to the configured database.

        Raises:
            GraphBackendUnavailable: the client has no driver.
        """

        if self._driver is None:
            raise GraphBackendUnavailable("Graph backend is not configured")
        session = self._driver.session(database=self.database, default_access_mode=neo4j.READ_ACCESS)
        try:
            def _run(cypher: str, params: dict[str, Any]) -> list[dict[str, Any]]:
                result = session.run(cypher, params)
                return [record.data() for record in result]

            yield GraphSession(_run)
        finally:
            session.close()
