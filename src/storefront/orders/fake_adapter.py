"""Configurable in-memory order service for development and testing.

Stores orders in a dict, hands out ``ORD-YYYYMMDD-XXXX`` order numbers and
enforces the service-side rules the checkout engine relies on: orders need
at least one item and only pending orders may be updated.
"""

import random
from datetime import UTC, datetime
from uuid import uuid4

from storefront.exceptions import OrderNotFound, ServiceError
from storefront.orders.port import DeliveryType, Order, OrderRequest, OrderResult, OrderService, OrderStatus


def generate_order_number(now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    return f"ORD-{now:%Y%m%d}-{random.randint(1000, 9999)}"


class FakeOrderService(OrderService):
    def __init__(self) -> None:
        self.orders: dict[str, Order] = {}
        self.should_succeed: bool = True
        self.failure_reason: str | None = None
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str | None = None) -> None:
        """Configure service behavior at runtime. A None reason simulates a bare failure."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def set_status(self, order_id: str, status: OrderStatus) -> None:
        """Move an order along its lifecycle, as the back office would."""
        self.orders[order_id] = self.orders[order_id].model_copy(update={"status": status})

    def _check(self, request: OrderRequest) -> None:
        if not self.should_succeed:
            raise ServiceError(self.failure_reason, status_code=500)
        if not request.items:
            raise ServiceError("Order must contain at least one item", status_code=400)
        if request.delivery_type is DeliveryType.DELIVERY and not request.address.strip():
            raise ServiceError("Address is required for delivery orders", status_code=400)

    def _unique_number(self) -> str:
        taken = {o.order_number for o in self.orders.values()}
        for _ in range(10):
            number = generate_order_number()
            if number not in taken:
                return number
        raise ServiceError("Failed to generate unique order number. Please try again.", status_code=500)

    async def create(self, request: OrderRequest) -> OrderResult:
        self.calls.append({"method": "create", "request": request})
        self._check(request)

        order = Order(
            **request.model_dump(),
            id=uuid4().hex,
            order_number=self._unique_number(),
            status=OrderStatus.PENDING,
        )
        self.orders[order.id] = order
        return OrderResult(order_id=order.id, order_number=order.order_number)

    async def get(self, order_id: str) -> Order:
        self.calls.append({"method": "get", "order_id": order_id})
        if not self.should_succeed:
            raise ServiceError(self.failure_reason, status_code=500)
        try:
            return self.orders[order_id]
        except KeyError:
            raise OrderNotFound(status_code=404) from None

    async def get_by_number(self, order_number: str) -> Order:
        self.calls.append({"method": "get_by_number", "order_number": order_number})
        if not self.should_succeed:
            raise ServiceError(self.failure_reason, status_code=500)
        order = next((o for o in self.orders.values() if o.order_number == order_number), None)
        if order is None:
            raise OrderNotFound("Order not found. Please check your order number.", status_code=404)
        return order

    async def update(self, order_id: str, request: OrderRequest) -> str:
        self.calls.append({"method": "update", "order_id": order_id, "request": request})
        order = self.orders.get(order_id)
        if order is None:
            raise OrderNotFound(status_code=404)
        if not order.is_editable:
            raise ServiceError(
                "Order can only be edited while it is pending. Please contact support if you need to make changes.",
                status_code=400,
            )
        self._check(request)

        self.orders[order_id] = Order(
            **request.model_dump(),
            id=order.id,
            order_number=order.order_number,
            status=order.status,
        )
        return order.order_number

    def calls_to(self, method: str) -> list[dict]:
        return [c for c in self.calls if c["method"] == method]

    def reset(self) -> None:
        """Clear orders and recorded calls (useful between tests)."""
        self.orders.clear()
        self.calls.clear()
        self.should_succeed = True
        self.failure_reason = None
