from __future__ import annotations

import httpx
import pytest

from graph_scene import GraphFetchError, HttpGraphDataSource, InvalidResponseShape, parse_snapshot


def _transport(status_code: int, **kwargs) -> httpx.MockTransport:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(status_code, **kwargs)

    transport = httpx.MockTransport(handler)
    transport.seen = seen  # type: ignore[attr-defined]
    return transport


@pytest.mark.asyncio
async def test_fetch_returns_json_payload() -> None:
    body = {"nodes": [], "relationships": []}
    transport = _transport(200, json=body)

    payload = await HttpGraphDataSource("http://graph.local/", transport=transport).fetch()

    assert payload == body
    assert transport.seen == ["/graph-data"]  # type: ignore[attr-defined]


@pytest.mark.asyncio
async def test_error_body_is_passed_through() -> None:
    transport = _transport(500, json={"error": "Graph backend query failed"})

    payload = await HttpGraphDataSource("http://graph.local", transport=transport).fetch()

    with pytest.raises(GraphFetchError, match="Graph backend query failed"):
        parse_snapshot(payload)


@pytest.mark.asyncio
async def test_http_error_without_error_field() -> None:
    transport = _transport(502, json={"detail": "bad gateway"})

    with pytest.raises(GraphFetchError, match="HTTP 502"):
        await HttpGraphDataSource("http://graph.local", transport=transport).fetch()


@pytest.mark.asyncio
async def test_non_json_body() -> None:
    transport = _transport(200, text="<html>oops</html>")

    with pytest.raises(GraphFetchError):
        await HttpGraphDataSource("http://graph.local", transport=transport).fetch()


@pytest.mark.asyncio
async def test_transport_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    source = HttpGraphDataSource("http://graph.local", transport=httpx.MockTransport(handler))

    with pytest.raises(GraphFetchError) as exc_info:
        await source.fetch()
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_invalid_base_url() -> None:
    source = HttpGraphDataSource("http://graph.local:notaport")

    with pytest.raises(GraphFetchError) as exc_info:
        await source.fetch()
    assert isinstance(exc_info.value.__cause__, httpx.InvalidURL)


def test_parse_snapshot_requires_both_lists() -> None:
    with pytest.raises(InvalidResponseShape):
        parse_snapshot({"nodes": []})
    with pytest.raises(InvalidResponseShape):
        parse_snapshot({"nodes": None, "relationships": []})

    snapshot = parse_snapshot(
        {
            "nodes": [{"id": 1, "labels": ["Output"], "properties": {"value": 2}}],
            "relationships": [],
        }
    )
    assert snapshot.nodes[0].category == "Output"
