"""Promo code validation — stateless request/response wrapper.

``apply`` handles the checks that never need the network (empty input,
re-applying the current code) before asking the promo service.
``revalidate`` re-checks an applied code against a new subtotal and
collapses every kind of failure into None, leaving the caller to clear the
promo.
"""

from decimal import Decimal

import structlog

from storefront.exceptions import ServiceError
from storefront.promo.port import PromoCode, PromoRejection, PromoService, RejectionKind, normalize_code

logger = structlog.get_logger(__name__)


class PromoCodeValidator:
    def __init__(self, service: PromoService) -> None:
        self.service = service

    async def apply(
        self,
        code: str,
        subtotal: Decimal,
        current: PromoCode | None = None,
    ) -> PromoCode | PromoRejection:
        """Validate a code entered by the shopper.

        Raises ``ServiceError`` when the promo service cannot be reached.
        """
        code = normalize_code(code)
        if not code:
            return PromoRejection(RejectionKind.EMPTY_CODE, "Please enter a promo code")

        if current is not None and current.code == code:
            return PromoRejection(RejectionKind.ALREADY_APPLIED, "This promo code is already applied")

        result = await self.service.validate(code, subtotal)
        if isinstance(result, PromoRejection):
            logger.info("promo_rejected", code=code, subtotal=str(subtotal), kind=result.kind.value)
        else:
            logger.info("promo_accepted", code=code, subtotal=str(subtotal), discount=str(result.discount))
        return result

    async def revalidate(self, current: PromoCode, new_subtotal: Decimal) -> PromoCode | None:
        """Re-check ``current`` against ``new_subtotal``; None means it no longer holds."""
        try:
            result = await self.service.validate(current.code, new_subtotal)
        except ServiceError as exc:
            logger.warning("promo_revalidation_failed", code=current.code, error=exc.message)
            return None

        if isinstance(result, PromoRejection):
            logger.info(
                "promo_revalidation_rejected",
                code=current.code,
                subtotal=str(new_subtotal),
                kind=result.kind.value,
            )
            return None
        return result
