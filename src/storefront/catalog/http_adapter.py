"""Catalog adapter for the storefront REST API."""

import httpx
import structlog

from storefront.catalog.port import CatalogService, Product
from storefront.exceptions import ProductNotFound
from storefront.utils.http import ApiClient, ApiError, MalformedResponse, parse_model

logger = structlog.get_logger(__name__)


class HttpCatalog(CatalogService):
    def __init__(self, base_url: str, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        self.api = ApiClient(base_url, timeout=timeout, transport=transport)

    async def list_products(self, keyword: str | None = None, category: str | None = None) -> list[Product]:
        params = {k: v for k, v in {"keyword": keyword, "category": category}.items() if v}
        data = await self.api.request("GET", "/api/products", params=params)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("api_response_malformed", model="list[Product]", data_type=type(data).__name__)
            raise MalformedResponse()

        products = []
        for record in data:
            try:
                products.append(parse_model(Product, record))
            except MalformedResponse:
                # already logged; the rest of the listing is still usable
                continue
        return products

    async def get_product(self, product_id: str) -> Product:
        try:
            data = await self.api.request("GET", f"/api/products/{product_id}")
        except ApiError as exc:
            if exc.status_code == 404:
                raise ProductNotFound(exc.message, status_code=404) from exc
            raise
        return parse_model(Product, data)

    async def record_add_to_cart(self, product_id: str) -> None:
        await self.api.request("PUT", f"/api/products/{product_id}/add-to-cart")

    async def record_view(self, product_id: str) -> None:
        await self.api.request("PUT", f"/api/products/{product_id}/view")

    async def aclose(self) -> None:
        await self.api.aclose()
