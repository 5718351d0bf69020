"""HTTP API of the ledger graph service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from ledger_graph import GraphErrorPayload, GraphSnapshot

from ..config import HealthPayload, Settings, get_settings
from ..graph import GraphService

router = APIRouter()


def get_graph_service(request: Request) -> GraphService:
    service = getattr(request.app.state, "graph_service", None)
    if service is None:
        raise RuntimeError("GraphService is not initialised")
    return service


@router.get("/health", response_model=HealthPayload, tags=["system"])
async def read_health(settings: Settings = Depends(get_settings)) -> HealthPayload:
    return HealthPayload(status="ok", api_version=settings.api_version)


@router.get(
    "/graph-data",
    response_model=GraphSnapshot,
    response_model_by_alias=True,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": GraphErrorPayload}},
    tags=["graph"],
)
def read_graph_data(service: GraphService = Depends(get_graph_service)) -> GraphSnapshot:
    """Complete snapshot of the sampled ledger subgraph.

    Runs in the threadpool; each call borrows exactly one Neo4j session.
    """

    return service.fetcher.fetch()
