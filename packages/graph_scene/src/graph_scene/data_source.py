"""Graph data retrieval for the scene client."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from ledger_graph.schema import GraphSnapshot

from .exceptions import GraphFetchError, InvalidResponseShape

logger = logging.getLogger(__name__)


class GraphDataSource(Protocol):
    async def fetch(self) -> Any: ...


class HttpGraphDataSource:
    """Fetches the `GET /graph-data` snapshot over HTTP."""

    def __init__(
        self,
        base_url: str,
        *,
        path: str = "/graph-data",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._path = path
        self._timeout = timeout
        self._transport = transport

    async def fetch(self) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url, timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(self._path)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise GraphFetchError(f"Request to {self._base_url}{self._path} failed: {exc}", cause=exc) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise GraphFetchError(f"Non-JSON response (HTTP {response.status_code})", cause=exc) from exc

        if response.is_error and not (isinstance(payload, dict) and payload.get("error")):
            raise GraphFetchError(f"HTTP {response.status_code}")
        return payload


def parse_snapshot(payload: Any) -> GraphSnapshot:
    """Validate a fetched payload.

    A payload-level `error` field is reported as `GraphFetchError`; a payload
    without both `nodes` and `relationships` lists as `InvalidResponseShape`.
    """

    if not isinstance(payload, dict):
        raise InvalidResponseShape("Invalid data structure received from API")
    if payload.get("error"):
        raise GraphFetchError(str(payload["error"]))
    if not isinstance(payload.get("nodes"), list) or not isinstance(payload.get("relationships"), list):
        raise InvalidResponseShape("Invalid data structure received from API")
    try:
        return GraphSnapshot.model_validate(payload)
    except ValidationError as exc:
        logger.debug("Snapshot validation failed: %s", exc)
        raise InvalidResponseShape("Invalid data structure received from API", cause=exc) from exc
