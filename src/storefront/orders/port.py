"""Order service port (abstract interface) and the order contract.

An ``OrderRequest`` is a snapshot: item prices and totals are captured when
it is built and never re-read. The service owns order numbers and status,
and refuses edits to orders that are no longer pending.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from storefront.money import ZERO, Money


class DeliveryType(Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        use_enum_values=False,
    )


class OrderLine(_WireModel):
    product_id: str
    quantity: int = Field(ge=1)
    price: Money
    name: str | None = None
    unit: str | None = None
    image: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_product(cls, data):
        # Orders read back from the service carry the product document inline
        if isinstance(data, dict):
            product = data.get("productId", data.get("product_id"))
            if isinstance(product, dict):
                data = {
                    **data,
                    "productId": product.get("_id") or product.get("id"),
                    "name": data.get("name") or product.get("name"),
                    "unit": data.get("unit") or product.get("unit"),
                    "image": data.get("image") or product.get("image"),
                }
                data.pop("product_id", None)
        return data


class OrderRequest(_WireModel):
    items: list[OrderLine]
    total_amount: Money
    original_amount: Money
    discount_amount: Money = ZERO
    promo_code: str | None = None
    delivery_type: DeliveryType = DeliveryType.DELIVERY
    phone: str
    customer_name: str
    address: str = ""

    def to_payload(self) -> dict:
        """JSON body for the order service: camelCase, items reduced to id/quantity/price."""
        payload = self.model_dump(mode="json", by_alias=True, exclude={"items"})
        payload["items"] = [
            line.model_dump(mode="json", by_alias=True, include={"product_id", "quantity", "price"})
            for line in self.items
        ]
        return payload


class Order(OrderRequest):
    """An order as stored by the order service."""

    id: str = Field(alias="_id")
    order_number: str
    status: OrderStatus = OrderStatus.PENDING
    original_amount: Money | None = None
    phone: str = ""
    customer_name: str = ""

    @property
    def is_editable(self) -> bool:
        return self.status is OrderStatus.PENDING


@dataclass(frozen=True)
class OrderResult:
    """Identifiers of a freshly created order, for confirmation display."""

    order_id: str
    order_number: str


class OrderService(ABC):
    """Abstract order service interface."""

    @abstractmethod
    async def create(self, request: OrderRequest) -> OrderResult:
        """Create an order. Raises ``ServiceError`` with the service's message on refusal."""
        ...

    @abstractmethod
    async def get(self, order_id: str) -> Order:
        """Fetch an order by id. Raises ``OrderNotFound`` when it does not exist."""
        ...

    @abstractmethod
    async def get_by_number(self, order_number: str) -> Order:
        """Fetch an order by its public order number (order tracking)."""
        ...

    @abstractmethod
    async def update(self, order_id: str, request: OrderRequest) -> str:
        """Replace a pending order's items, totals and delivery fields; returns the order number."""
        ...
