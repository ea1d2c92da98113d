"""Dashboard state: loading with cache fallback, metrics and optimistic sales."""
import logging
from typing import Optional

from salet.dashboard.client import GatewayClient, GatewayError
from salet.parse.aggregate import apply_sale, format_php, parse_amount
from salet.parse.models import DashboardData, NormalizedSale, SaleCreateRequest
from salet.store.cache import SnapshotCache, now_ms

logger = logging.getLogger(__name__)

PAYMENT_METHODS = ["Cash", "GCash", "SeaBank", "PayMaya"]


class SaleFormError(ValueError):
    """The sale form has invalid fields. errors maps field name to message."""

    def __init__(self, errors: dict[str, str]):
        super().__init__(", ".join(errors.values()))
        self.errors = errors


def validate_sale_form(form: SaleCreateRequest) -> dict[str, str]:
    """Return field errors for a sale form; empty when valid."""
    errors = {}
    try:
        amount = parse_amount(form.amount) if form.amount not in (None, "") else 0
    except ValueError:
        amount = 0
    if amount <= 0:
        errors["amount"] = "Amount is required and must be greater than 0"
    if not (form.customer_name or "").strip():
        errors["customerName"] = "Customer name is required"
    if not (form.product_name or "").strip():
        errors["productName"] = "Product name is required"
    if not form.date:
        errors["date"] = "Date is required"
    if form.payment_method not in PAYMENT_METHODS:
        errors["paymentMethod"] = "Payment method is required"
    return errors


class DashboardState:
    """In-memory dashboard views plus the last error, if any."""

    def __init__(self, gateway: GatewayClient, cache: SnapshotCache):
        self.gateway = gateway
        self.cache = cache
        self.data = DashboardData()
        self.error: Optional[str] = None
        self.from_cache = False

    async def load(self) -> None:
        """Initial load. Falls back to a fresh cached snapshot on failure."""
        self.error = None
        self.from_cache = False
        try:
            self.data = await self.gateway.fetch_dashboard()
        except GatewayError as e:
            logger.error(f"Error fetching data: {e}")
            cached = await self.cache.load()
            if cached is None:
                self.error = str(e)
                return
            logger.info("Using cached data")
            self.data = cached
            self.from_cache = True
            return
        await self.cache.save(self.data)

    async def refresh(self) -> None:
        """Manual refresh; keeps the current views when the gateway fails."""
        self.error = None
        try:
            data = await self.gateway.fetch_dashboard()
        except GatewayError as e:
            logger.error(f"Refresh failed: {e}")
            self.error = "Failed to refresh data"
            return
        self.data = data
        self.from_cache = False
        await self.cache.save(self.data)

    def metrics(self) -> list[dict[str, str]]:
        """Summary cards computed from the monthly buckets."""
        total_revenue = sum(m.revenue for m in self.data.monthly)
        total_orders = sum(m.orders for m in self.data.monthly)
        total_customers = sum(m.customers for m in self.data.monthly)
        avg_order_value = total_revenue / total_orders if total_orders > 0 else 0
        return [
            {"id": "revenue", "title": "Total Revenue", "value": format_php(total_revenue)},
            {"id": "orders", "title": "Total Orders", "value": str(total_orders)},
            {"id": "customers", "title": "New Customers", "value": str(total_customers)},
            {"id": "avg", "title": "Avg Order Value", "value": format_php(avg_order_value)},
        ]

    def apply_optimistic(self, form: SaleCreateRequest) -> None:
        """Fold a submitted sale into the local views ahead of the next fetch."""
        sale = NormalizedSale(
            amount=parse_amount(form.amount),
            customer_name=form.customer_name,
            product_name=form.product_name,
            date=form.date,
            payment_method=form.payment_method,
        )
        apply_sale(self.data, sale, f"new-{now_ms()}", prepend=True)

    async def submit_sale(self, form: SaleCreateRequest) -> Optional[str]:
        """Validate, send to the gateway and apply the optimistic update.

        The local update is applied even when the gateway call fails; the
        failure is only logged. Returns the created page id, or None when
        the gateway call failed.
        """
        errors = validate_sale_form(form)
        if errors:
            raise SaleFormError(errors)

        page_id = None
        try:
            page_id = await self.gateway.create_sale(form)
            logger.info(f"Successfully saved sale: {page_id}")
        except GatewayError as e:
            logger.warning(f"Error submitting sale, keeping local update: {e}")
        self.apply_optimistic(form)
        return page_id
