from __future__ import annotations

from typing import Any, Callable, Iterator

import pytest
from fastapi import FastAPI

from ledger_graph import GraphConfig, LedgerGraphClient
from ledger_graph_api.app import create_app
from ledger_graph_api.config import get_settings


class FakeRecord:
    def __init__(self, data: dict[str, Any]) -> None:
        self._data = data

    def data(self) -> dict[str, Any]:
        return dict(self._data)


class FakeSession:
    def __init__(self, driver: "FakeDriver") -> None:
        self._driver = driver
        self.closed = False

    def run(self, cypher: str, params: dict[str, Any]) -> list[FakeRecord]:
        self._driver.queries.append(params)
        if self._driver.error is not None:
            raise self._driver.error
        return [FakeRecord(item) for item in self._driver.records]

    def close(self) -> None:
        self.closed = True


class FakeDriver:
    """Stands in for `neo4j.Driver`, tracking sessions handed out."""

    def __init__(self, records: list[dict[str, Any]] | None = None, error: Exception | None = None) -> None:
        self.records = records or []
        self.error = error
        self.sessions: list[FakeSession] = []
        self.queries: list[dict[str, Any]] = []
        self.closed = False

    def session(self, **kwargs: Any) -> FakeSession:
        sess = FakeSession(self)
        self.sessions.append(sess)
        return sess

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("NEO4J_URI", "NEO4J_USER", "NEO4J_PASSWORD", "GRAPH_ROOT_LIMIT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def ledger_record() -> dict[str, Any]:
    return {
        "roots": [
            {"id": 10, "labels": ["Transaction"], "properties": {"txid": "f4184fc596403b9d638783cf57adfe4c75c605f6356fbc91338530e9831e9e16"}},
        ],
        "adjacent": [
            {"id": 11, "labels": ["Output"], "properties": {"txid": None, "address": None, "value": 10.0}},
            {"id": 12, "labels": ["Address"], "properties": {"txid": None, "address": "1Q2TWHE3GMdB6BZKafqwxXtWAWgFt5Jvm3", "value": None}},
        ],
        "relationships": [
            {"startNode": 10, "endNode": 11, "type": "CREATES"},
            {"startNode": 11, "endNode": 12, "type": "CONTROLS"},
            {"startNode": 10, "endNode": None, "type": "SPENDS"},
        ],
    }


@pytest.fixture
def make_app() -> Callable[..., tuple[FastAPI, FakeDriver]]:
    """Build the app around a fake driver serving `records` or raising `error`."""

    def _make(records: list[dict[str, Any]] | None = None, error: Exception | None = None) -> tuple[FastAPI, FakeDriver]:
        driver = FakeDriver(records, error)
        client = LedgerGraphClient(GraphConfig(uri="bolt://fake:7687", user="neo4j", password="pw"), driver=driver)
        return create_app(graph_client=client), driver

    return _make
