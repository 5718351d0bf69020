from __future__ import annotations

from typing import Any

import neo4j
import pytest
from neo4j.exceptions import ServiceUnavailable

from ledger_graph import (
    GraphBackendUnavailable,
    GraphConfig,
    LedgerGraphClient,
    QueryFailure,
    SubgraphFetcher,
)
from ledger_graph.queries import build_subgraph_cypher


class FakeRecord:
    def __init__(self, data: dict[str, Any]) -> None:
        self._data = data

    def data(self) -> dict[str, Any]:
        return dict(self._data)


class FakeSession:
    def __init__(self, records: list[dict[str, Any]], error: Exception | None) -> None:
        self._records = records
        self._error = error
        self.closed = False
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def run(self, cypher: str, params: dict[str, Any]) -> list[FakeRecord]:
        self.calls.append((cypher, params))
        if self._error is not None:
            raise self._error
        return [FakeRecord(item) for item in self._records]

    def close(self) -> None:
        self.closed = True


class FakeDriver:
    def __init__(self, records: list[dict[str, Any]] | None = None, error: Exception | None = None) -> None:
        self._records = records or []
        self._error = error
        self.sessions: list[FakeSession] = []
        self.session_kwargs: list[dict[str, Any]] = []
        self.closed = False

    def session(self, **kwargs: Any) -> FakeSession:
        self.session_kwargs.append(kwargs)
        sess = FakeSession(self._records, self._error)
        self.sessions.append(sess)
        return sess

    def close(self) -> None:
        self.closed = True


def _record() -> dict[str, Any]:
    return {
        "roots": [
            {"id": 1, "labels": ["Transaction"], "properties": {"txid": "aa11"}},
            {"id": 2, "labels": ["Transaction"], "properties": {"txid": "bb22"}},
        ],
        "adjacent": [
            {"id": 2, "labels": ["Transaction"], "properties": {"txid": "bb22", "address": None, "value": None}},
            {"id": 3, "labels": ["Output"], "properties": {"txid": None, "address": None, "value": 12.5}},
            {"id": 4, "labels": ["Address"], "properties": {"txid": None, "address": "1abc", "value": None}},
        ],
        "relationships": [
            {"startNode": 1, "endNode": 2, "type": "SPENDS"},
            {"startNode": 2, "endNode": 3, "type": "CREATES"},
            {"startNode": 3, "endNode": 4, "type": "CONTROLS"},
            {"startNode": 2, "endNode": None, "type": "CREATES"},
        ],
    }


def _client(driver: FakeDriver) -> LedgerGraphClient:
    config = GraphConfig(uri="bolt://localhost:7687", user="neo4j", password="secret")
    return LedgerGraphClient(config, driver=driver)


def test_fetch_merges_roots_and_neighbours() -> None:
    driver = FakeDriver([_record()])

    snapshot = SubgraphFetcher(_client(driver)).fetch()

    ids = [node.id for node in snapshot.nodes]
    assert sorted(ids) == [1, 2, 3, 4]
    assert len(ids) == len(set(ids))
    assert {(r.start_node, r.end_node, r.type) for r in snapshot.relationships} == {
        (1, 2, "SPENDS"),
        (2, 3, "CREATES"),
        (3, 4, "CONTROLS"),
    }
    by_id = {node.id: node for node in snapshot.nodes}
    assert by_id[3].properties == {"value": 12.5}
    assert by_id[4].properties == {"address": "1abc"}


def test_fetch_uses_read_session_and_closes_it() -> None:
    driver = FakeDriver([_record()])

    SubgraphFetcher(_client(driver), root_limit=25).fetch()

    assert driver.session_kwargs == [{"database": "neo4j", "default_access_mode": neo4j.READ_ACCESS}]
    session = driver.sessions[0]
    assert session.closed
    cypher, params = session.calls[0]
    assert params == {"root_limit": 25, "rel_types": ["SPENDS", "CREATES", "CONTROLS"]}
    assert cypher == build_subgraph_cypher()


def test_datastore_error_becomes_query_failure_and_session_is_closed() -> None:
    driver = FakeDriver(error=ServiceUnavailable("connection refused"))

    with pytest.raises(QueryFailure) as exc_info:
        SubgraphFetcher(_client(driver)).fetch()

    assert isinstance(exc_info.value.__cause__, ServiceUnavailable)
    assert driver.sessions[0].closed


def test_no_records_is_an_empty_snapshot() -> None:
    snapshot = SubgraphFetcher(_client(FakeDriver([]))).fetch()

    assert snapshot.nodes == []
    assert snapshot.relationships == []


def test_unconfigured_client_reports_backend_unavailable() -> None:
    client = LedgerGraphClient(config=None)

    with pytest.raises(QueryFailure) as exc_info:
        SubgraphFetcher(client).fetch()

    assert isinstance(exc_info.value, GraphBackendUnavailable)
    assert not client.has_driver()


def test_close_releases_driver() -> None:
    driver = FakeDriver()
    client = _client(driver)

    client.close()

    assert driver.closed
    assert not client.has_driver()


def test_cypher_bounds_roots_and_projects_category_properties() -> None:
    cypher = build_subgraph_cypher()

    assert "MATCH (t:Transaction)" in cypher
    assert "WITH t LIMIT $root_limit" in cypher
    assert "type(r) IN $rel_types" in cypher
    assert "t {.txid}" in cypher
    assert "m {.address, .txid, .value}" in cypher


def test_root_limit_must_be_positive() -> None:
    with pytest.raises(ValueError):
        SubgraphFetcher(LedgerGraphClient(config=None), root_limit=0)
