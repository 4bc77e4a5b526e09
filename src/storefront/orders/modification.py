"""Order modification — edit a submitted order while it is still pending.

The editor loads one order, rebuilds an editable item list, delivery form
and promo state from its snapshot, and applies the same rules as the cart
and checkout: quantities never drop below one (the line is removed
instead), every subtotal change revalidates the applied promo, an emptied
order drops its promo, and saving runs the checkout validation before the
full replacement item list and totals are sent as an update.
"""

from decimal import Decimal

import structlog

from storefront.cart.cart import subtotal_of
from storefront.catalog.port import CatalogService, Product
from storefront.checkout.form import CheckoutForm, update_form, validate_submission
from storefront.checkout.pricing import OrderTotals, compute_totals
from storefront.exceptions import OrderNotEditable, ServiceError, ValidationError
from storefront.orders.port import Order, OrderLine, OrderRequest, OrderService
from storefront.promo.applied import AppliedPromoState, Notice
from storefront.promo.port import PromoCode, PromoRejection
from storefront.promo.validator import PromoCodeValidator

logger = structlog.get_logger(__name__)

UPDATE_FAILED = "Failed to update order. Please try again."


class OrderEditor:
    def __init__(
        self,
        order_service: OrderService,
        catalog: CatalogService,
        promo_validator: PromoCodeValidator,
    ) -> None:
        self.order_service = order_service
        self.catalog = catalog
        self.order: Order | None = None
        self.products: list[Product] = []
        self._items: list[OrderLine] = []
        self._form = CheckoutForm()
        self.promo = AppliedPromoState(promo_validator, self.get_total)

    # -------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------
    async def load(self, order_id: str) -> Order:
        """Enter edit mode for ``order_id``.

        Raises ``OrderNotEditable`` when the order has left the pending state;
        the caller should fall back to a read-only view of it.
        """
        order = await self.order_service.get(order_id)
        if not order.is_editable:
            logger.info("order_not_editable", order_id=order.id, status=order.status.value)
            raise OrderNotEditable(order.id, order.order_number, order.status.value)

        self.order = order
        self._items = list(order.items)
        self._form = CheckoutForm(
            name=order.customer_name,
            phone=order.phone,
            delivery_type=order.delivery_type,
            address=order.address,
        )

        promo = None
        if order.promo_code:
            validated = order.original_amount if order.original_amount is not None else subtotal_of(order.items)
            promo = PromoCode(code=order.promo_code, discount=order.discount_amount, validated_subtotal=validated)
        self.promo.restore(promo)
        if not self.promo.is_trusted():
            self.promo.schedule_revalidation(self.get_total())

        try:
            self.products = await self.catalog.list_products()
        except ServiceError as exc:
            logger.warning("catalog_fetch_failed", order_id=order.id, error=exc.message)
            self.products = []

        logger.debug("order_loaded_for_edit", order_id=order.id, items=len(self._items))
        return order

    def _require_order(self) -> Order:
        if self.order is None:
            raise RuntimeError("No order loaded; call load() first")
        return self.order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def items(self) -> list[OrderLine]:
        return list(self._items)

    @property
    def form(self) -> CheckoutForm:
        return self._form

    def get_total(self) -> Decimal:
        return subtotal_of(self._items)

    def totals(self) -> OrderTotals:
        return compute_totals(self._items, self.promo.promo)

    def drain_notices(self) -> list[Notice]:
        return self.promo.drain_notices()

    # -------------------------------------------------------------------
    # Item edits
    # -------------------------------------------------------------------
    def _line(self, index: int) -> OrderLine:
        if not 0 <= index < len(self._items):
            raise ValidationError({"index": [f"No order line at position {index}"]})
        return self._items[index]

    def _items_changed(self, previous_subtotal: Decimal) -> None:
        if self.promo.promo is None:
            return
        if not self._items:
            self.promo.remove()
            return
        subtotal = self.get_total()
        if subtotal != previous_subtotal:
            self.promo.schedule_revalidation(subtotal)

    def change_quantity(self, index: int, delta: int) -> None:
        """Shift the quantity of line ``index`` by ``delta``; at zero the line goes."""
        self._require_order()
        line = self._line(index)
        previous = self.get_total()

        quantity = line.quantity + delta
        if quantity <= 0:
            del self._items[index]
        else:
            self._items[index] = line.model_copy(update={"quantity": quantity})

        self._items_changed(previous)

    def remove_item(self, index: int) -> None:
        self._require_order()
        self._line(index)
        previous = self.get_total()
        del self._items[index]
        self._items_changed(previous)

    async def add_product(self, product_id: str) -> OrderLine:
        """Add one unit of a catalog product at its current price."""
        self._require_order()
        product_id = str(product_id)

        index = next((i for i, line in enumerate(self._items) if line.product_id == product_id), None)
        if index is not None:
            self.change_quantity(index, 1)
            return self._items[index]

        product = next((p for p in self.products if p.id == product_id), None)
        if product is None:
            product = await self.catalog.get_product(product_id)

        previous = self.get_total()
        line = OrderLine(
            product_id=product.id,
            quantity=1,
            price=product.price,
            name=product.name,
            unit=product.unit,
            image=product.image,
        )
        self._items.append(line)
        self._items_changed(previous)
        return line

    # -------------------------------------------------------------------
    # Form and promo
    # -------------------------------------------------------------------
    def update_form(self, **fields) -> CheckoutForm:
        self._form = update_form(self._form, fields)
        return self._form

    async def apply_promo(self, code: str) -> PromoCode | PromoRejection:
        return await self.promo.apply(code)

    def remove_promo(self) -> None:
        self.promo.remove()

    # -------------------------------------------------------------------
    # Saving
    # -------------------------------------------------------------------
    def build_request(self) -> OrderRequest:
        totals = self.totals()
        promo = self.promo.promo
        return OrderRequest(
            items=[
                OrderLine(product_id=line.product_id, quantity=line.quantity, price=line.price)
                for line in self._items
            ],
            total_amount=totals.total_amount,
            original_amount=totals.original_amount,
            discount_amount=totals.discount_amount,
            promo_code=promo.code if promo and not totals.promo_pending else None,
            delivery_type=self._form.delivery_type,
            phone=self._form.phone.strip(),
            customer_name=self._form.name.strip(),
            address=self._form.shipping_address.strip(),
        )

    async def save(self) -> str:
        """Send the edited order as a full replacement; returns its order number."""
        order = self._require_order()
        validate_submission(self._form, len(self._items))
        await self.promo.ensure_trusted()

        request = self.build_request()
        try:
            order_number = await self.order_service.update(order.id, request)
        except ServiceError as exc:
            logger.warning("order_update_failed", order_id=order.id, error=exc.message, status=exc.status_code)
            raise ServiceError(exc.detail or UPDATE_FAILED, status_code=exc.status_code) from exc

        logger.info(
            "order_updated",
            order_id=order.id,
            order_number=order_number,
            total_amount=str(request.total_amount),
            promo_code=request.promo_code,
        )
        return order_number

    def close(self) -> None:
        """Leave edit mode; promo answers still in flight are dropped."""
        self.promo.close()
