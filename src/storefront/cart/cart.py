"""Shopping cart store — the shopper's line items, persisted write-through.

The store is created from whatever the persistence slot holds (or empty)
and mirrors every mutation back to it before returning. Totals are derived
from the items on every read and never cached. Subscribers are told the new
subtotal after each mutation that changed it; the checkout uses this to
revalidate an applied promo code.
"""

from collections.abc import Callable
from decimal import Decimal

import structlog
from pydantic import BaseModel, Field

from storefront.catalog.port import CatalogService, Product
from storefront.money import ZERO, Money, to_money
from storefront.persistence.adapter import PersistenceAdapter, Slot
from storefront.tasks import spawn

logger = structlog.get_logger(__name__)


class CartItem(BaseModel):
    product_id: str
    name: str
    price: Money
    unit: str = ""
    image: str | None = None
    quantity: int = Field(ge=1)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> "CartItem":
        return cls(
            product_id=product.id,
            name=product.name,
            price=product.price,
            unit=product.unit,
            image=product.image,
            quantity=quantity,
        )


CART_SLOT = Slot("cart", list[CartItem], list)

SubtotalListener = Callable[[Decimal], None]


def subtotal_of(items) -> Decimal:
    """Sum of price × quantity over ``items``, in cents."""
    return to_money(sum((item.price * item.quantity for item in items), ZERO))


class CartStore:
    def __init__(self, persistence: PersistenceAdapter, catalog: CatalogService | None = None) -> None:
        self.persistence = persistence
        self.catalog = catalog
        self._items: list[CartItem] = self._dedupe(persistence.load(CART_SLOT))
        self._listeners: list[SubtotalListener] = []

    @staticmethod
    def _dedupe(items: list[CartItem]) -> list[CartItem]:
        """Merge duplicate product lines a hand-edited or corrupt store may contain."""
        merged: dict[str, CartItem] = {}
        for item in items:
            if item.product_id in merged:
                existing = merged[item.product_id]
                merged[item.product_id] = existing.model_copy(
                    update={"quantity": existing.quantity + item.quantity}
                )
            else:
                merged[item.product_id] = item
        return list(merged.values())

    # -------------------------------------------------------------------
    # Subscription
    # -------------------------------------------------------------------
    def subscribe(self, listener: SubtotalListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: SubtotalListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _commit(self, items: list[CartItem], previous_subtotal: Decimal) -> None:
        self._items = items
        self.persistence.save(CART_SLOT, self._items)

        subtotal = self.get_total()
        if subtotal != previous_subtotal:
            for listener in list(self._listeners):
                listener(subtotal)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def get_item(self, product_id: str) -> CartItem | None:
        return next((i for i in self._items if i.product_id == str(product_id)), None)

    def get_total(self) -> Decimal:
        return subtotal_of(self._items)

    def get_item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_item(self, product: Product) -> CartItem:
        """Add one unit of ``product`` (or bump the existing line by one)."""
        previous = self.get_total()
        existing = self.get_item(product.id)

        if existing:
            added = existing.model_copy(update={"quantity": existing.quantity + 1})
            items = [added if i.product_id == product.id else i for i in self._items]
        else:
            added = CartItem.from_product(product)
            items = [*self._items, added]

        self._commit(items, previous)
        logger.debug("cart_item_added", product_id=product.id, quantity=added.quantity)

        if self.catalog is not None:
            spawn(self._record_add_to_cart(product.id), name=f"record-add-to-cart-{product.id}")
        return added

    async def _record_add_to_cart(self, product_id: str) -> None:
        try:
            await self.catalog.record_add_to_cart(product_id)
        except Exception as exc:  # analytics must never reach the shopper
            logger.debug("add_to_cart_tracking_failed", product_id=product_id, error=repr(exc))

    def remove_item(self, product_id: str) -> None:
        product_id = str(product_id)
        if self.get_item(product_id) is None:
            return

        previous = self.get_total()
        self._commit([i for i in self._items if i.product_id != product_id], previous)
        logger.debug("cart_item_removed", product_id=product_id)

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """Overwrite the quantity of a line; zero or less removes it."""
        if quantity <= 0:
            self.remove_item(product_id)
            return

        product_id = str(product_id)
        if self.get_item(product_id) is None:
            return

        previous = self.get_total()
        items = [
            i.model_copy(update={"quantity": quantity}) if i.product_id == product_id else i for i in self._items
        ]
        self._commit(items, previous)
        logger.debug("cart_quantity_updated", product_id=product_id, quantity=quantity)

    def clear(self) -> None:
        """Empty the cart and drop its persisted slot."""
        previous = self.get_total()
        self._items = []
        self.persistence.clear(CART_SLOT)
        logger.debug("cart_cleared")

        if previous != ZERO:
            for listener in list(self._listeners):
                listener(ZERO)
