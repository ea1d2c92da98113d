"""Tests for the external database client."""
import json

import httpx
import pytest

from salet.fetch.client import NotionAPIError, NotionClient
from salet.fetch.properties import build_page_properties


def client_with(config, handler):
    return NotionClient(config, httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.mark.asyncio
async def test_query_sales_sorts_by_order_date(config):
    """The query asks for newest orders first and sends auth headers."""
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        seen["headers"] = request.headers
        return httpx.Response(200, json={"results": [{"id": "p1"}, {"id": "p2"}]})

    async with client_with(config, handler) as client:
        rows = await client.query_sales()

    assert [r["id"] for r in rows] == ["p1", "p2"]
    assert seen["url"] == "https://notion.test/v1/databases/01234567-89ab-cdef-0123-456789abcdef/query"
    assert seen["body"] == {"sorts": [{"property": "Order Date", "direction": "descending"}]}
    assert seen["headers"]["authorization"] == "Bearer secret_test"
    assert seen["headers"]["notion-version"] == "2022-06-28"


@pytest.mark.asyncio
async def test_create_page_payload(config):
    """Created pages are parented to the configured database."""
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "new-page"})

    properties = build_page_properties(99.5, "Ana", "Widget", "2025-01-05", "Cash")
    async with client_with(config, handler) as client:
        page = await client.create_page(properties)

    assert page["id"] == "new-page"
    assert seen["url"] == "https://notion.test/v1/pages"
    assert seen["body"]["parent"] == {"database_id": "01234567-89ab-cdef-0123-456789abcdef"}
    assert seen["body"]["properties"] == {
        "Amount": {"number": 99.5},
        "Name": {"title": [{"text": {"content": "Ana"}}]},
        "Product Name": {"rich_text": [{"text": {"content": "Widget"}}]},
        "Order Date": {"date": {"start": "2025-01-05"}},
        "Select": {"select": {"name": "Cash"}},
    }


@pytest.mark.asyncio
async def test_error_response_raises_with_status_and_message(config):
    """Non-2xx responses become NotionAPIError."""
    body = {"object": "error", "status": 404, "code": "object_not_found", "message": "Could not find database"}

    def handler(request):
        return httpx.Response(404, json=body)

    async with client_with(config, handler) as client:
        with pytest.raises(NotionAPIError) as exc:
            await client.retrieve_database()

    assert exc.value.status_code == 404
    assert exc.value.message == "Could not find database"
    assert exc.value.details == body


@pytest.mark.asyncio
async def test_error_without_json_body(config):
    """Non-JSON error bodies still produce a message."""

    def handler(request):
        return httpx.Response(502, text="bad gateway")

    async with client_with(config, handler) as client:
        with pytest.raises(NotionAPIError) as exc:
            await client.query_sales()

    assert exc.value.status_code == 502
    assert exc.value.message == "HTTP 502"
    assert exc.value.details is None


@pytest.mark.asyncio
async def test_no_retry_on_network_error(config):
    """Transport errors propagate after a single attempt."""
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("boom", request=request)

    async with client_with(config, handler) as client:
        with pytest.raises(httpx.ConnectError):
            await client.query_sales()

    assert len(calls) == 1
