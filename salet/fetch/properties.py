"""Map dashboard sale fields onto the external database's typed properties."""
from typing import Any

from salet.parse.models import Number
from salet.parse.normalizer import (
    AMOUNT_PROPERTY,
    CUSTOMER_PROPERTY,
    DATE_PROPERTY,
    PAYMENT_PROPERTY,
    PRODUCT_PROPERTY,
)


def build_page_properties(
    amount: Number,
    customer_name: str,
    product_name: str,
    order_date: str,
    payment_method: str,
) -> dict[str, Any]:
    """Build the property payload for a new sale page."""
    return {
        AMOUNT_PROPERTY: {"number": amount},
        CUSTOMER_PROPERTY: {"title": [{"text": {"content": customer_name}}]},
        PRODUCT_PROPERTY: {"rich_text": [{"text": {"content": product_name}}]},
        DATE_PROPERTY: {"date": {"start": order_date}},
        PAYMENT_PROPERTY: {"select": {"name": payment_method}},
    }


def order_date_sort(direction: str = "descending") -> dict[str, Any]:
    """Query body sorting rows by order date."""
    return {"sorts": [{"property": DATE_PROPERTY, "direction": direction}]}
