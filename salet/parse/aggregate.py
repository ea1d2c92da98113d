"""Roll normalized sales up into monthly, per-product and recent-order views.

apply_sale() is the single update rule. The gateway runs it over a whole
query result (batch mode, orders appended) and the dashboard runs it on one
freshly submitted sale (optimistic mode, order prepended).
"""
import logging
import math
import random
from datetime import date, datetime
from typing import Any, Callable, Iterable, Optional, Sequence

from salet.parse.models import (
    DashboardData,
    MonthlyBucket,
    NormalizedSale,
    Number,
    OrderEntry,
    ProductBucket,
)
from salet.parse.normalizer import normalize_record

logger = logging.getLogger(__name__)

MAX_RECENT_ORDERS = 10

MONTH_ABBR = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def parse_amount(value) -> Number:
    """Parse a submitted amount; whole numbers come back as int.

    Raises ValueError for text that is not a number and for NaN or infinity.
    """
    amount = float(value)
    if not math.isfinite(amount):
        raise ValueError(f"Amount is not finite: {value!r}")
    return int(amount) if amount.is_integer() else amount


def parse_order_date(value: Optional[str]) -> Optional[date]:
    """Parse an ISO date or datetime string. Returns None when unparseable."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        logger.debug(f"Unparseable order date: {value!r}")
        return None


def month_label(day: date) -> str:
    """Short month name and year, e.g. "Jan 2025"."""
    return f"{MONTH_ABBR[day.month - 1]} {day.year}"


def format_short_date(day: Optional[date]) -> str:
    """en-PH short date, e.g. "Jan 5, 2025"; "-" when there is no date."""
    if day is None:
        return "-"
    return f"{MONTH_ABBR[day.month - 1]} {day.day}, {day.year}"


def format_php(amount: float) -> str:
    """Format an amount as Philippine pesos, e.g. "₱1,234.50"."""
    sign = "-" if amount < 0 else ""
    return f"{sign}₱{abs(amount):,.2f}"


def random_color() -> str:
    """Random display color as a #rrggbb hex code."""
    return f"#{random.randint(0, 0xFFFFFE):06x}"


def build_order_entry(sale: NormalizedSale, order_id: str) -> OrderEntry:
    """Format one sale as a recent-orders row."""
    return OrderEntry(
        id=order_id,
        customer=sale.customer_name,
        product=sale.product_name,
        date=format_short_date(parse_order_date(sale.date)),
        payment_method=sale.payment_method,
        amount=format_php(sale.amount),
    )


def apply_sale(
    data: DashboardData,
    sale: NormalizedSale,
    order_id: str,
    prepend: bool = False,
    color_factory: Callable[[], str] = random_color,
) -> DashboardData:
    """Fold one sale into the dashboard views in place and return them.

    Monthly: sales without a usable date are skipped; otherwise the bucket
    for the sale's month gains the amount and one order and one customer
    (customers is a per-sale count, not distinct customers).

    Products: the bucket for the product gains the amount; a new bucket
    gets a color from color_factory.

    Orders: in batch mode the entry is appended while fewer than
    MAX_RECENT_ORDERS exist. With prepend=True it goes first and the list is
    trimmed back to MAX_RECENT_ORDERS.
    """
    day = parse_order_date(sale.date)
    if day is not None:
        month = month_label(day)
        bucket = next((m for m in data.monthly if m.name == month), None)
        if bucket:
            bucket.revenue += sale.amount
            bucket.orders += 1
            bucket.customers += 1
        else:
            data.monthly.append(
                MonthlyBucket(name=month, revenue=sale.amount, orders=1, customers=1)
            )

    product = next((p for p in data.products if p.name == sale.product_name), None)
    if product:
        product.value += sale.amount
    else:
        data.products.append(
            ProductBucket(name=sale.product_name, value=sale.amount, color=color_factory())
        )

    if prepend:
        data.orders.insert(0, build_order_entry(sale, order_id))
        del data.orders[MAX_RECENT_ORDERS:]
    elif len(data.orders) < MAX_RECENT_ORDERS:
        data.orders.append(build_order_entry(sale, order_id))

    return data


def fallback_order_id(position: int) -> str:
    """Sequence id for records without an identifier, e.g. "#0003"."""
    return f"#{position:04d}"


def aggregate(
    sales: Iterable[NormalizedSale],
    record_ids: Optional[Sequence[Optional[str]]] = None,
    color_factory: Callable[[], str] = random_color,
) -> DashboardData:
    """Run one aggregation pass over sales in their given order.

    record_ids[i] is the identifier of the i-th sale's source record;
    missing identifiers fall back to the 1-based position in the input.
    """
    data = DashboardData()
    for index, sale in enumerate(sales):
        record_id = record_ids[index] if record_ids and index < len(record_ids) else None
        apply_sale(
            data,
            sale,
            record_id or fallback_order_id(index + 1),
            color_factory=color_factory,
        )
    return data


def aggregate_pages(
    pages: Sequence[dict[str, Any]],
    color_factory: Callable[[], str] = random_color,
) -> DashboardData:
    """Normalize external pages and aggregate them."""
    sales = [normalize_record(page) for page in pages]
    record_ids = [page.get("id") for page in pages]
    data = aggregate(sales, record_ids, color_factory=color_factory)
    logger.info(
        f"Aggregated {len(pages)} records: {len(data.monthly)} months, "
        f"{len(data.products)} products, {len(data.orders)} orders"
    )
    return data
