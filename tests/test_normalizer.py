"""Tests for record normalization."""
from conftest import make_page
from salet.parse.normalizer import FIELD_DEFAULTS, normalize_record


def test_normalize_full_record():
    """All five fields are extracted from their typed properties."""
    page = make_page(
        page_id="abc",
        amount=250.5,
        customer="Juan",
        product="Widget",
        order_date="2025-03-14",
        payment="GCash",
    )
    sale = normalize_record(page)

    assert sale.amount == 250.5
    assert sale.customer_name == "Juan"
    assert sale.product_name == "Widget"
    assert sale.date == "2025-03-14"
    assert sale.payment_method == "GCash"


def test_normalize_empty_record_uses_defaults():
    """Missing properties fall back to the default table."""
    sale = normalize_record({"id": "x", "properties": {}})

    assert sale.amount == 0
    assert sale.customer_name == "Unknown"
    assert sale.product_name == "Unknown"
    assert sale.date is None
    assert sale.payment_method == "Unknown"


def test_normalize_record_without_properties_key():
    """A page with no property bag still normalizes."""
    sale = normalize_record({})
    assert sale.model_dump() == FIELD_DEFAULTS


def test_normalize_empty_containers():
    """Empty text arrays and null selects degrade to defaults."""
    page = {
        "properties": {
            "Amount": {"number": None},
            "Name": {"title": []},
            "Product Name": {"rich_text": []},
            "Order Date": {"date": None},
            "Select": {"select": None},
        }
    }
    sale = normalize_record(page)

    assert sale.amount == 0
    assert sale.customer_name == "Unknown"
    assert sale.product_name == "Unknown"
    assert sale.date is None
    assert sale.payment_method == "Unknown"


def test_normalize_empty_string_is_unknown():
    """Empty strings are treated like absent values."""
    sale = normalize_record(make_page(customer="", product="", payment=""))
    assert sale.customer_name == "Unknown"
    assert sale.product_name == "Unknown"
    assert sale.payment_method == "Unknown"


def test_normalize_wrong_types_degrade():
    """Values of the wrong type are ignored instead of raising."""
    page = {
        "properties": {
            "Amount": {"number": "100"},
            "Name": {"title": [{"text": {"content": 42}}]},
            "Order Date": "2025-01-01",
        }
    }
    sale = normalize_record(page)
    assert sale.amount == 0
    assert sale.customer_name == "Unknown"
    assert sale.date is None
