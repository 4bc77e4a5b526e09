"""Catalog service port (abstract interface).

The catalog is read-only from the checkout engine's point of view: it lists
products, looks one up, and accepts best-effort analytics notifications.
It is trusted for price and stock data.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from storefront.money import Money


class Product(BaseModel):
    """A catalog product as the checkout engine sees it."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    name: str
    price: Money
    unit: str = ""
    image: str | None = None
    category: str | None = None
    description: str | None = None
    stock: int | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _flatten_category(cls, value):
        # Populated category references arrive as documents
        if isinstance(value, dict):
            return value.get("name") or value.get("_id")
        return value


class CatalogService(ABC):
    """Abstract catalog interface."""

    @abstractmethod
    async def list_products(self, keyword: str | None = None, category: str | None = None) -> list[Product]:
        """List products, optionally filtered by a name keyword and category."""
        ...

    @abstractmethod
    async def get_product(self, product_id: str) -> Product:
        """Fetch one product. Raises ``ProductNotFound`` when it does not exist."""
        ...

    @abstractmethod
    async def record_add_to_cart(self, product_id: str) -> None:
        """Analytics: a shopper added the product to their cart."""
        ...

    @abstractmethod
    async def record_view(self, product_id: str) -> None:
        """Analytics: a shopper viewed the product."""
        ...
