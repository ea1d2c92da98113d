"""Shared fixtures for the test suite."""
import pytest

from salet.config import Config


def make_page(
    page_id=None,
    amount=None,
    customer=None,
    product=None,
    order_date=None,
    payment=None,
):
    """Build an external database page with only the given properties set."""
    properties = {}
    if amount is not None:
        properties["Amount"] = {"number": amount}
    if customer is not None:
        properties["Name"] = {"title": [{"text": {"content": customer}}]}
    if product is not None:
        properties["Product Name"] = {"rich_text": [{"text": {"content": product}}]}
    if order_date is not None:
        properties["Order Date"] = {"date": {"start": order_date}}
    if payment is not None:
        properties["Select"] = {"select": {"name": payment}}
    page = {"object": "page", "properties": properties}
    if page_id is not None:
        page["id"] = page_id
    return page


@pytest.fixture
def config(tmp_path):
    return Config(
        notion_token="secret_test",
        raw_database_id="0123456789abcdef0123456789abcdef",
        notion_api_url="https://notion.test/v1",
        allowed_origins=["http://localhost:5173"],
        cache_file=tmp_path / "cachedData.json",
    )
