"""Order totals shared by checkout and order editing."""

from dataclasses import dataclass
from decimal import Decimal

from storefront.cart.cart import subtotal_of
from storefront.money import ZERO, to_money
from storefront.promo.port import PromoCode


@dataclass(frozen=True)
class OrderTotals:
    original_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    promo_pending: bool = False


def compute_totals(items, promo: PromoCode | None = None) -> OrderTotals:
    """``total = max(0, subtotal - discount)``.

    A promo only discounts the subtotal it was validated against. Any other
    promo contributes nothing and is reported as ``promo_pending`` until it
    has been revalidated.
    """
    original = subtotal_of(items)
    trusted = promo is not None and promo.is_valid_for(original)
    discount = promo.discount if trusted else ZERO
    return OrderTotals(
        original_amount=original,
        discount_amount=discount,
        total_amount=to_money(max(ZERO, original - discount)),
        promo_pending=promo is not None and not trusted,
    )
