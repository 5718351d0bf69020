"""Wiring of the Neo4j-backed graph service for the API process."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ledger_graph import GraphConfig, LedgerGraphClient, SubgraphFetcher

from .config import Settings

logger = logging.getLogger(__name__)


@dataclass
class GraphService:
    client: LedgerGraphClient
    fetcher: SubgraphFetcher

    def close(self) -> None:
        self.client.close()


def init_graph_service(settings: Settings, client: LedgerGraphClient | None = None) -> GraphService:
    """Build the process-wide graph service.

    Without NEO4J_* settings the client stays driverless and every snapshot
    request fails with `GraphBackendUnavailable`.
    """

    if client is None:
        config = None
        if settings.neo4j_configured:
            config = GraphConfig(
                uri=settings.neo4j_uri or "",
                user=settings.neo4j_user or "",
                password=settings.neo4j_password or "",
                database=settings.neo4j_database,
                max_connection_pool_size=settings.neo4j_max_pool_size,
            )
        else:
            logger.warning("NEO4J_* are not set, /graph-data will report a backend failure")
        client = LedgerGraphClient(config).open()
    fetcher = SubgraphFetcher(client, root_limit=settings.graph_root_limit)
    return GraphService(client=client, fetcher=fetcher)
