"""Configurable in-memory promo service for development and testing.

Evaluates promo rules the same way the storefront API does: activity flag,
validity window, usage limit and minimum purchase are checked in that
order, then a percentage (optionally capped) or fixed discount is computed
and rounded to cents. Responses can be paused to simulate slow round trips
and race successive revalidations against each other.
"""

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

from storefront.exceptions import ServiceError
from storefront.money import ZERO, to_money
from storefront.promo.port import PromoCode, PromoRejection, PromoService, RejectionKind, normalize_code


@dataclass
class PromoRule:
    code: str
    discount_value: Decimal
    discount_type: str = "fixed"  # percentage, fixed
    description: str = ""
    min_purchase_amount: Decimal = ZERO
    max_discount_amount: Decimal | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    usage_limit: int | None = None
    used_count: int = 0
    is_active: bool = True

    def check(self, subtotal: Decimal, now: datetime) -> PromoRejection | None:
        if not self.is_active:
            return PromoRejection(RejectionKind.INACTIVE, "This promo code is not active")
        if self.end_date and now > self.end_date:
            return PromoRejection(RejectionKind.EXPIRED, "This promo code has expired")
        if self.start_date and now < self.start_date:
            return PromoRejection(RejectionKind.NOT_YET_ACTIVE, "This promo code is not yet active")
        if self.usage_limit and self.used_count >= self.usage_limit:
            return PromoRejection(RejectionKind.USAGE_LIMIT_REACHED, "This promo code has reached its usage limit")
        if subtotal < self.min_purchase_amount:
            return PromoRejection(
                RejectionKind.MINIMUM_NOT_MET,
                f"Minimum purchase amount is {to_money(self.min_purchase_amount)}",
            )
        return None

    def discount_for(self, subtotal: Decimal) -> Decimal:
        if self.discount_type == "percentage":
            discount = subtotal * self.discount_value / 100
            if self.max_discount_amount and discount > self.max_discount_amount:
                discount = self.max_discount_amount
        else:
            discount = min(self.discount_value, subtotal)
        return to_money(discount)


class FakePromoService(PromoService):
    def __init__(self) -> None:
        self.rules: dict[str, PromoRule] = {}
        self.should_succeed: bool = True
        self.failure_reason: str = "Promo service unavailable"
        self.calls: list[dict] = []
        self._gate: asyncio.Event | None = None

    def configure(self, should_succeed: bool, failure_reason: str = "Promo service unavailable") -> None:
        """Configure service behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def add_rule(self, code: str, discount_value, **options) -> PromoRule:
        rule = PromoRule(code=normalize_code(code), discount_value=Decimal(str(discount_value)), **options)
        self.rules[rule.code] = rule
        return rule

    def pause(self) -> None:
        """Hold every validation until ``resume()`` is called."""
        if self._gate is None:
            self._gate = asyncio.Event()

    def resume(self) -> None:
        if self._gate is not None:
            self._gate.set()
            self._gate = None

    async def validate(self, code: str, subtotal: Decimal) -> PromoCode | PromoRejection:
        code = normalize_code(code)
        self.calls.append({"method": "validate", "code": code, "subtotal": subtotal})

        if self._gate is not None:
            await self._gate.wait()

        if not self.should_succeed:
            raise ServiceError(self.failure_reason)

        rule = self.rules.get(code)
        if rule is None:
            return PromoRejection(RejectionKind.NOT_FOUND, "Promo code not found")

        rejection = rule.check(subtotal, datetime.now(UTC))
        if rejection is not None:
            return rejection

        return PromoCode(
            code=rule.code,
            discount=rule.discount_for(subtotal),
            description=rule.description or None,
            discount_type=rule.discount_type,
            discount_value=rule.discount_value,
            validated_subtotal=subtotal,
        )

    def reset(self) -> None:
        """Clear recorded calls and restore default behavior (useful between tests)."""
        self.calls.clear()
        self.should_succeed = True
        self.failure_reason = "Promo service unavailable"
        self.resume()
