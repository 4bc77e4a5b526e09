"""Order service adapter for the storefront REST API."""

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from storefront.exceptions import OrderNotFound
from storefront.orders.port import Order, OrderRequest, OrderResult, OrderService
from storefront.utils.http import ApiClient, ApiError, parse_model


class _OrderRef(BaseModel):
    """The identifiers every create or update answer carries."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    order_number: str


class HttpOrderService(OrderService):
    def __init__(self, base_url: str, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        self.api = ApiClient(base_url, timeout=timeout, transport=transport)

    async def _fetch(self, path: str) -> Order:
        try:
            data = await self.api.request("GET", path)
        except ApiError as exc:
            if exc.status_code == 404:
                raise OrderNotFound(exc.message, status_code=404) from exc
            raise
        return parse_model(Order, data)

    async def create(self, request: OrderRequest) -> OrderResult:
        data = await self.api.request("POST", "/api/orders", json=request.to_payload())
        ref = parse_model(_OrderRef, data)
        return OrderResult(order_id=ref.id, order_number=ref.order_number)

    async def get(self, order_id: str) -> Order:
        return await self._fetch(f"/api/orders/{order_id}")

    async def get_by_number(self, order_number: str) -> Order:
        return await self._fetch(f"/api/orders/track/{order_number}")

    async def update(self, order_id: str, request: OrderRequest) -> str:
        try:
            data = await self.api.request("PUT", f"/api/orders/{order_id}", json=request.to_payload())
        except ApiError as exc:
            if exc.status_code == 404:
                raise OrderNotFound(exc.message, status_code=404) from exc
            raise
        return parse_model(_OrderRef, data).order_number

    async def aclose(self) -> None:
        await self.api.aclose()
