"""Async client for the external database HTTP API.

Each method makes exactly one request. Failures are not retried: non-2xx
responses raise NotionAPIError and transport errors propagate as httpx
exceptions.
"""
import logging
from typing import Any, Optional

import httpx

from salet.config import Config
from salet.fetch.endpoints import database_url, pages_url, query_url
from salet.fetch.properties import order_date_sort

logger = logging.getLogger(__name__)


class NotionAPIError(Exception):
    """Non-2xx response from the external database API."""

    def __init__(self, status_code: int, message: str, details: Optional[Any] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.details = details


def _error_from_response(response: httpx.Response) -> NotionAPIError:
    try:
        details = response.json()
    except ValueError:
        details = None
    message = None
    if isinstance(details, dict):
        message = details.get("message")
    return NotionAPIError(
        response.status_code,
        message or f"HTTP {response.status_code}",
        details,
    )


class NotionClient:
    """Thin wrapper around the page-create, page-query and schema-read calls."""

    def __init__(self, config: Config, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.client = http_client or httpx.AsyncClient()
        self.headers = {
            "Authorization": f"Bearer {config.notion_token}",
            "Notion-Version": config.notion_version,
            "Content-Type": "application/json",
        }

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(self, method: str, url: str, json: Optional[dict] = None) -> dict:
        response = await self.client.request(method, url, headers=self.headers, json=json)
        if response.is_error:
            error = _error_from_response(response)
            logger.warning(f"{method} {url} failed: {error}")
            raise error
        return response.json()

    async def create_page(self, properties: dict[str, Any]) -> dict:
        """Create a page in the configured database and return it."""
        body = {
            "parent": {"database_id": self.config.database_id},
            "properties": properties,
        }
        page = await self._request("POST", pages_url(self.config), json=body)
        logger.info(f"Created page {page.get('id')}")
        return page

    async def query_sales(self) -> list[dict]:
        """Return database rows sorted by order date, newest first."""
        data = await self._request("POST", query_url(self.config), json=order_date_sort())
        results = data.get("results") or []
        logger.debug(f"Query returned {len(results)} rows")
        return results

    async def retrieve_database(self) -> dict:
        """Return the database object, including its property schema."""
        return await self._request("GET", database_url(self.config))
