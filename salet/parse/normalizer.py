"""Extract NormalizedSale fields from external database pages.

Every field is optional in the source. Absent or empty values fall back to
the defaults in FIELD_DEFAULTS; extraction never raises.
"""
import logging
from typing import Any, Callable, Optional

from salet.parse.models import NormalizedSale

logger = logging.getLogger(__name__)

# Property names in the external database schema
AMOUNT_PROPERTY = "Amount"
CUSTOMER_PROPERTY = "Name"
PRODUCT_PROPERTY = "Product Name"
DATE_PROPERTY = "Order Date"
PAYMENT_PROPERTY = "Select"

FIELD_DEFAULTS: dict[str, Any] = {
    "amount": 0,
    "customer_name": "Unknown",
    "product_name": "Unknown",
    "date": None,
    "payment_method": "Unknown",
}


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _number(prop: dict) -> Any:
    value = prop.get("number")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _first_text(items: Any) -> Optional[str]:
    if not isinstance(items, list) or not items:
        return None
    return _str(_as_dict(_as_dict(items[0]).get("text")).get("content"))


def _title(prop: dict) -> Optional[str]:
    return _first_text(prop.get("title"))


def _rich_text(prop: dict) -> Optional[str]:
    return _first_text(prop.get("rich_text"))


def _date_start(prop: dict) -> Optional[str]:
    return _str(_as_dict(prop.get("date")).get("start"))


def _select_name(prop: dict) -> Optional[str]:
    return _str(_as_dict(prop.get("select")).get("name"))


# field -> (property name, extractor)
FIELD_EXTRACTORS: dict[str, tuple[str, Callable[[dict], Any]]] = {
    "amount": (AMOUNT_PROPERTY, _number),
    "customer_name": (CUSTOMER_PROPERTY, _title),
    "product_name": (PRODUCT_PROPERTY, _rich_text),
    "date": (DATE_PROPERTY, _date_start),
    "payment_method": (PAYMENT_PROPERTY, _select_name),
}


def normalize_record(page: dict[str, Any]) -> NormalizedSale:
    """Convert one external page into a NormalizedSale."""
    properties = _as_dict(page.get("properties"))
    values = {}
    for field, (property_name, extract) in FIELD_EXTRACTORS.items():
        value = extract(_as_dict(properties.get(property_name)))
        # Falsy values (0, "", None) take the default
        values[field] = value if value else FIELD_DEFAULTS[field]
    return NormalizedSale(**values)
