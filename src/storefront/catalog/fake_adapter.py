"""In-memory catalog for development and testing.

Holds a product list and records every analytics notification it receives.
Can be configured to fail, so that callers' degradation paths can be
exercised without a running API.
"""

from storefront.catalog.port import CatalogService, Product
from storefront.exceptions import ProductNotFound, ServiceError


class FakeCatalog(CatalogService):
    def __init__(self, products: list[Product] | None = None) -> None:
        self.products: dict[str, Product] = {p.id: p for p in products or []}
        self.should_succeed: bool = True
        self.failure_reason: str = "Catalog unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Catalog unavailable") -> None:
        """Configure catalog behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def add_product(self, product: Product) -> Product:
        self.products[product.id] = product
        return product

    def _check(self) -> None:
        if not self.should_succeed:
            raise ServiceError(self.failure_reason)

    async def list_products(self, keyword: str | None = None, category: str | None = None) -> list[Product]:
        self.calls.append({"method": "list_products", "keyword": keyword, "category": category})
        self._check()
        products = list(self.products.values())
        if keyword:
            products = [p for p in products if keyword.lower() in p.name.lower()]
        if category:
            products = [p for p in products if p.category == category]
        return products

    async def get_product(self, product_id: str) -> Product:
        self.calls.append({"method": "get_product", "product_id": product_id})
        self._check()
        try:
            return self.products[product_id]
        except KeyError:
            raise ProductNotFound(status_code=404) from None

    async def record_add_to_cart(self, product_id: str) -> None:
        self.calls.append({"method": "record_add_to_cart", "product_id": product_id})
        self._check()

    async def record_view(self, product_id: str) -> None:
        self.calls.append({"method": "record_view", "product_id": product_id})
        self._check()

    def calls_to(self, method: str) -> list[dict]:
        return [c for c in self.calls if c["method"] == method]

    def reset(self) -> None:
        """Clear recorded calls and restore default behavior (useful between tests)."""
        self.calls.clear()
        self.should_succeed = True
        self.failure_reason = "Catalog unavailable"
