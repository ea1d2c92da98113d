"""HTTP client the dashboard uses to talk to the proxy gateway."""
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from salet.parse.models import DashboardData, SaleCreateRequest

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """The gateway answered with an error or could not be reached."""


class GatewayClient:
    """Fetches dashboard views and submits new sales."""

    def __init__(self, base_url: str, http_client: Optional[httpx.AsyncClient] = None):
        self.client = http_client or httpx.AsyncClient(base_url=base_url)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.client.aclose()

    async def fetch_dashboard(self) -> DashboardData:
        """GET the aggregated views."""
        try:
            response = await self.client.get("/proxy/notion")
        except httpx.HTTPError as e:
            raise GatewayError(f"Could not reach gateway: {e}") from e

        if response.is_error:
            raise GatewayError(
                f"Server returned {response.status_code}: {response.reason_phrase}"
            )
        try:
            data = response.json()
        except ValueError as e:
            raise GatewayError("Gateway returned invalid JSON") from e
        if not isinstance(data, dict):
            raise GatewayError("Gateway returned an unexpected response")
        if not data.get("success"):
            raise GatewayError(data.get("message") or "Failed to fetch data")

        # Null collections read as empty
        views_data = {key: data.get(key) or [] for key in ("monthly", "products", "orders")}
        try:
            views = DashboardData.model_validate(views_data)
        except ValidationError as e:
            raise GatewayError(f"Gateway returned malformed data: {e.error_count()} errors") from e
        logger.info(
            f"Data received: {len(views.monthly)} months, "
            f"{len(views.products)} products, {len(views.orders)} orders"
        )
        return views

    async def create_sale(self, sale: SaleCreateRequest) -> str:
        """POST a new sale and return the created page id."""
        try:
            response = await self.client.post(
                "/proxy/notion",
                json=sale.model_dump(mode="json", by_alias=True),
            )
        except httpx.HTTPError as e:
            raise GatewayError(f"Could not reach gateway: {e}") from e

        try:
            result = response.json()
        except ValueError:
            result = {}
        if not isinstance(result, dict):
            result = {}
        if response.is_error:
            raise GatewayError(result.get("message") or f"Server error: {response.status_code}")
        return result.get("pageId")
