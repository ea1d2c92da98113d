"""Data models for sales records and dashboard views."""
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Whole numbers stay ints so JSON output reads 150, not 150.0
Number = Union[int, float]


class NormalizedSale(BaseModel):
    """The five fields extracted from one external database record."""

    model_config = ConfigDict(populate_by_name=True)

    amount: Number = 0
    customer_name: str = Field(default="Unknown", alias="customerName")
    product_name: str = Field(default="Unknown", alias="productName")
    date: Optional[str] = None
    payment_method: str = Field(default="Unknown", alias="paymentMethod")


class MonthlyBucket(BaseModel):
    """Revenue rollup for one calendar month, keyed by label like "Jan 2025"."""

    name: str
    revenue: Number
    orders: int
    customers: int


class ProductBucket(BaseModel):
    """Revenue rollup for one product."""

    name: str
    value: Number
    color: str


class OrderEntry(BaseModel):
    """One row of the recent-orders table, already formatted for display."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    customer: str
    product: str
    date: str
    payment_method: str = Field(alias="paymentMethod")
    amount: str
    status: Literal["completed"] = "completed"


class DashboardData(BaseModel):
    """The three views produced by one aggregation run."""

    monthly: list[MonthlyBucket] = Field(default_factory=list)
    products: list[ProductBucket] = Field(default_factory=list)
    orders: list[OrderEntry] = Field(default_factory=list)


class CachedSnapshot(DashboardData):
    """Dashboard views plus the epoch-millisecond capture time."""

    timestamp: int


class SaleCreateRequest(BaseModel):
    """Body of a create-sale request. Fields are checked by missing_fields().

    Numbers sent for text fields are accepted as their string form.
    """

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    amount: Optional[Union[int, float, str]] = None
    customer_name: Optional[str] = Field(default=None, alias="customerName")
    product_name: Optional[str] = Field(default=None, alias="productName")
    date: Optional[str] = None
    payment_method: Optional[str] = Field(default=None, alias="paymentMethod")

    def missing_fields(self) -> list[str]:
        """Return the wire names of absent or empty fields."""
        missing = []
        for name, field in type(self).model_fields.items():
            if not getattr(self, name):
                missing.append(field.alias or name)
        return missing
