"""Checkout orchestrator — turns the cart, the delivery form and the applied
promo into an order.

The orchestrator owns the checkout form and the applied promo for a cart
session, each in its own persisted slot. It listens to the cart so that any
subtotal change schedules a promo revalidation, and it never trusts a stale
discount at submission time.

Submission is all-or-nothing from the shopper's point of view: state is
cleared only after the order service has confirmed the order; on any
failure cart, form and promo are left as they were so the shopper can
retry.
"""

from decimal import Decimal

import structlog

from storefront.cart.cart import CartStore
from storefront.checkout.form import CHECKOUT_FORM_SLOT, CheckoutForm, update_form, validate_submission
from storefront.checkout.pricing import OrderTotals, compute_totals
from storefront.exceptions import ServiceError
from storefront.orders.port import OrderLine, OrderRequest, OrderResult, OrderService
from storefront.persistence.adapter import PersistenceAdapter
from storefront.promo.applied import AppliedPromoState, Notice
from storefront.promo.port import PromoCode, PromoRejection
from storefront.promo.validator import PromoCodeValidator

logger = structlog.get_logger(__name__)

SUBMIT_FAILED = "Failed to place order. Please try again."


class CheckoutOrchestrator:
    def __init__(
        self,
        cart: CartStore,
        persistence: PersistenceAdapter,
        order_service: OrderService,
        promo_validator: PromoCodeValidator,
    ) -> None:
        self.cart = cart
        self.persistence = persistence
        self.order_service = order_service
        self._form: CheckoutForm = persistence.load(CHECKOUT_FORM_SLOT)
        self.promo = AppliedPromoState(promo_validator, cart.get_total, persistence)
        cart.subscribe(self._on_cart_changed)
        if not self.promo.is_trusted():
            # Restored promo was validated against a different cart
            self.promo.schedule_revalidation(cart.get_total())

    # -------------------------------------------------------------------
    # Delivery form
    # -------------------------------------------------------------------
    @property
    def form(self) -> CheckoutForm:
        return self._form

    def update_form(self, **fields) -> CheckoutForm:
        self._form = update_form(self._form, fields)
        self.persistence.save(CHECKOUT_FORM_SLOT, self._form)
        return self._form

    # -------------------------------------------------------------------
    # Promo code
    # -------------------------------------------------------------------
    async def apply_promo(self, code: str) -> PromoCode | PromoRejection:
        return await self.promo.apply(code)

    def remove_promo(self) -> None:
        self.promo.remove()

    def _on_cart_changed(self, subtotal: Decimal) -> None:
        if self.promo.promo is None:
            return
        if self.cart.is_empty:
            self.promo.remove()
            return
        self.promo.schedule_revalidation(subtotal)

    def drain_notices(self) -> list[Notice]:
        return self.promo.drain_notices()

    # -------------------------------------------------------------------
    # Totals and submission
    # -------------------------------------------------------------------
    def totals(self) -> OrderTotals:
        return compute_totals(self.cart.items, self.promo.promo)

    def build_request(self) -> OrderRequest:
        """Snapshot the cart, totals and delivery details as an order request."""
        totals = self.totals()
        promo = self.promo.promo
        return OrderRequest(
            items=[
                OrderLine(product_id=item.product_id, quantity=item.quantity, price=item.price)
                for item in self.cart.items
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

    async def submit(self) -> OrderResult:
        """Place the order.

        Raises ``ValidationError`` for the first failing form rule and
        ``ServiceError`` when the order service refuses or cannot be reached.
        """
        validate_submission(self._form, len(self.cart.items))
        await self.promo.ensure_trusted()

        request = self.build_request()
        try:
            result = await self.order_service.create(request)
        except ServiceError as exc:
            logger.warning("order_submit_failed", error=exc.message, status=exc.status_code)
            raise ServiceError(exc.detail or SUBMIT_FAILED, status_code=exc.status_code) from exc

        # Only now that the service has confirmed the order
        self.cart.clear()
        self.promo.remove()
        self._form = CheckoutForm()
        self.persistence.clear(CHECKOUT_FORM_SLOT)

        logger.info(
            "order_submitted",
            order_id=result.order_id,
            order_number=result.order_number,
            total_amount=str(request.total_amount),
            promo_code=request.promo_code,
        )
        return result

    def close(self) -> None:
        """Detach from the cart; promo answers still in flight are dropped."""
        self.cart.unsubscribe(self._on_cart_changed)
        self.promo.close()
