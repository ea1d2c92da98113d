"""FastAPI proxy gateway in front of the external sales database."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from salet.config import Config
from salet.fetch.client import NotionAPIError, NotionClient
from salet.fetch.properties import build_page_properties
from salet.parse.aggregate import aggregate_pages, parse_amount
from salet.parse.models import SaleCreateRequest

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def get_config(request: Request) -> Config:
    return request.app.state.config


def get_client(request: Request) -> NotionClient:
    return request.app.state.notion_client


def _error_response(error: Exception, fallback_message: str) -> JSONResponse:
    """Relay an external API error with its status, or a 500 otherwise."""
    if isinstance(error, NotionAPIError):
        return JSONResponse(
            status_code=error.status_code,
            content={"status": "error", "message": error.message, "details": error.details},
        )
    return JSONResponse(
        status_code=500,
        content={"status": "error", "message": fallback_message, "details": None},
    )


def create_app(config: Config, client: Optional[NotionClient] = None) -> FastAPI:
    """Build the gateway app around an explicit configuration."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.notion_client.aclose()

    app = FastAPI(title="Salet Proxy Gateway", version="0.1.0", lifespan=lifespan)
    app.state.config = config
    app.state.notion_client = client or NotionClient(config)

    # Requests without an Origin header are not subject to CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.get("/proxy/health")
    async def health(config: Config = Depends(get_config)):
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": _now_iso(),
            "databaseId": config.database_id,
            "rawDatabaseId": config.raw_database_id,
        }

    @app.get("/proxy/debug")
    async def debug(config: Config = Depends(get_config)):
        """Show raw and formatted database ids."""
        return {
            "rawDatabaseId": config.raw_database_id,
            "formattedDatabaseId": config.database_id,
            "timestamp": _now_iso(),
        }

    @app.get("/proxy/test-database")
    async def test_database(client: NotionClient = Depends(get_client)):
        """Read the database schema to check connectivity and permissions."""
        try:
            database = await client.retrieve_database()
        except Exception as e:
            logger.error(f"Database access check failed: {e}")
            return _error_response(e, "Failed to access database")

        title = database.get("title") or []
        return {
            "status": "success",
            "message": "Database connection successful",
            "data": {
                "title": title[0].get("plain_text") if title else None,
                "id": database.get("id"),
                "properties": list((database.get("properties") or {}).keys()),
            },
        }

    @app.post("/proxy/notion")
    async def create_sale(
        sale: SaleCreateRequest,
        client: NotionClient = Depends(get_client),
    ):
        """Create a sale page in the external database."""
        missing = sale.missing_fields()
        if missing:
            return JSONResponse(
                status_code=400,
                content={
                    "status": "error",
                    "message": "Missing required fields",
                    "missing": missing,
                },
            )
        try:
            amount = parse_amount(sale.amount)
        except ValueError:
            return JSONResponse(
                status_code=400,
                content={"status": "error", "message": f"Invalid amount: {sale.amount!r}"},
            )

        properties = build_page_properties(
            amount=amount,
            customer_name=sale.customer_name,
            product_name=sale.product_name,
            order_date=sale.date,
            payment_method=sale.payment_method,
        )
        try:
            page = await client.create_page(properties)
        except NotionAPIError as e:
            return _error_response(e, "Failed to create page in Notion")
        except Exception as e:
            logger.error(f"Error creating sale page: {e}", exc_info=True)
            return _error_response(e, "Failed to create page in Notion")

        return {
            "status": "success",
            "message": "Data successfully saved to Notion",
            "pageId": page.get("id"),
        }

    @app.get("/proxy/notion")
    async def fetch_sales(client: NotionClient = Depends(get_client)):
        """Fetch all sales and return the aggregated dashboard views."""
        try:
            pages = await client.query_sales()
            data = aggregate_pages(pages)
        except NotionAPIError as e:
            logger.error(f"Failed to fetch sales: {e}")
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "message": "Failed to fetch data from Notion",
                    "error": e.details,
                },
            )
        except Exception as e:
            logger.error(f"Error fetching sales: {e}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "message": "Failed to fetch data from Notion",
                    "error": None,
                },
            )

        return {"success": True, **data.model_dump(mode="json", by_alias=True)}

    return app
