"""Storefront session — wires one shopper's cart and checkout together.

Initialization is load-on-construct: cart items, checkout form and applied
promo are restored from their persisted slots. No teardown is needed for
state (writes are write-through); ``close()`` only detaches listeners and
drops promo answers that are still in flight.
"""

from dataclasses import dataclass, field

import structlog

from storefront.cart.cart import CartStore
from storefront.catalog import get_catalog
from storefront.catalog.port import CatalogService
from storefront.checkout.orchestrator import CheckoutOrchestrator
from storefront.config import load_settings
from storefront.orders import get_order_service
from storefront.orders.modification import OrderEditor
from storefront.orders.port import OrderService
from storefront.persistence import get_store
from storefront.persistence.adapter import PersistenceAdapter
from storefront.promo import get_promo_service
from storefront.promo.port import PromoService
from storefront.promo.validator import PromoCodeValidator
from storefront.utils.logging import configure_logging


@dataclass
class StorefrontSession:
    persistence: PersistenceAdapter
    catalog: CatalogService
    promo_service: PromoService
    order_service: OrderService
    cart: CartStore = field(init=False)
    checkout: CheckoutOrchestrator = field(init=False)

    def __post_init__(self):
        self.validator = PromoCodeValidator(self.promo_service)
        self.cart = CartStore(self.persistence, catalog=self.catalog)
        self.checkout = CheckoutOrchestrator(self.cart, self.persistence, self.order_service, self.validator)

    @classmethod
    def from_settings(cls) -> "StorefrontSession":
        """Build a session on the configured store and services."""
        settings = load_settings()
        if not structlog.is_configured():
            configure_logging(env=settings.env)
        return cls(
            persistence=PersistenceAdapter(get_store(), key_prefix=settings.key_prefix),
            catalog=get_catalog(),
            promo_service=get_promo_service(),
            order_service=get_order_service(),
        )

    def edit_order(self) -> OrderEditor:
        """A fresh editor sharing this session's services."""
        return OrderEditor(self.order_service, self.catalog, self.validator)

    def close(self) -> None:
        self.checkout.close()
