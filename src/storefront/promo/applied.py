"""Applied promo state — the one promo code currently attached to a cart or order.

The discount of an applied promo is only trusted while the subtotal it was
validated against is still the current subtotal. Every subtotal change
stamps a revalidation with the subtotal it targets; when the answer comes
back it is committed only if that subtotal is still current and the owner
has not been closed in the meantime. Anything else is discarded, so rapid
successive changes may race without a stale answer ever winning.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal

import structlog

from storefront.money import ZERO
from storefront.persistence.adapter import PersistenceAdapter, Slot
from storefront.promo.port import PromoCode, PromoRejection
from storefront.promo.validator import PromoCodeValidator
from storefront.tasks import spawn

logger = structlog.get_logger(__name__)

PROMO_SLOT = Slot("applied_promo", PromoCode | None, lambda: None)

PROMO_CLEARED = "promo_cleared"


@dataclass(frozen=True)
class Notice:
    """A non-blocking message for the presentation layer."""

    kind: str
    message: str


class AppliedPromoState:
    def __init__(
        self,
        validator: PromoCodeValidator,
        subtotal_source: Callable[[], Decimal],
        persistence: PersistenceAdapter | None = None,
    ) -> None:
        self.validator = validator
        self.persistence = persistence
        self._subtotal_source = subtotal_source
        self._promo: PromoCode | None = persistence.load(PROMO_SLOT) if persistence else None
        self._notices: list[Notice] = []
        self._active = True

    # -------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------
    @property
    def promo(self) -> PromoCode | None:
        return self._promo

    @property
    def discount(self) -> Decimal:
        return self._promo.discount if self._promo else ZERO

    @property
    def active(self) -> bool:
        return self._active

    def is_trusted(self) -> bool:
        """True when there is no promo or it was validated against the current subtotal."""
        return self._promo is None or self._promo.is_valid_for(self._subtotal_source())

    def drain_notices(self) -> list[Notice]:
        notices, self._notices = self._notices, []
        return notices

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def _set(self, promo: PromoCode | None) -> None:
        self._promo = promo
        if self.persistence is None:
            return
        if promo is None:
            self.persistence.clear(PROMO_SLOT)
        else:
            self.persistence.save(PROMO_SLOT, promo)

    def restore(self, promo: PromoCode | None) -> None:
        """Seed the state with a promo validated elsewhere (e.g. on a stored order)."""
        self._set(promo)

    async def apply(self, code: str) -> PromoCode | PromoRejection:
        """Validate ``code`` against the current subtotal and keep it if accepted."""
        result = await self.validator.apply(code, self._subtotal_source(), current=self._promo)
        if isinstance(result, PromoRejection):
            return result

        if not self._active:
            logger.debug("promo_result_discarded", code=result.code, reason="closed")
            return result

        self._set(result)
        if not self.is_trusted():
            # The subtotal moved while the code was being checked
            self.schedule_revalidation(self._subtotal_source())
        return result

    def remove(self) -> None:
        self._set(None)

    async def revalidate(self, subtotal: Decimal | None = None) -> PromoCode | None:
        """Re-check the applied promo against ``subtotal`` (default: current).

        Returns the promo in effect once the answer has been handled.
        """
        promo = self._promo
        if promo is None:
            return None

        target = self._subtotal_source() if subtotal is None else subtotal
        if promo.is_valid_for(target):
            return promo

        result = await self.validator.revalidate(promo, target)

        if not self._active:
            logger.debug("promo_result_discarded", code=promo.code, target=str(target), reason="closed")
            return None
        if self._subtotal_source() != target:
            logger.debug("promo_result_discarded", code=promo.code, target=str(target), reason="stale subtotal")
            return self._promo
        if self._promo is None or self._promo.code != promo.code:
            logger.debug("promo_result_discarded", code=promo.code, target=str(target), reason="promo replaced")
            return self._promo

        if result is None:
            self._set(None)
            self._notices.append(
                Notice(PROMO_CLEARED, f"Promo code {promo.code} is no longer valid with the updated order")
            )
            logger.info("promo_cleared", code=promo.code, subtotal=str(target))
            return None

        self._set(result)
        return result

    def schedule_revalidation(self, subtotal: Decimal) -> asyncio.Task | None:
        """Fire-and-forget ``revalidate(subtotal)``."""
        if self._promo is None or not self._active:
            return None
        return spawn(self.revalidate(subtotal), name=f"revalidate-{self._promo.code}")

    async def ensure_trusted(self) -> None:
        """Revalidate until the applied promo matches the current subtotal.

        The subtotal may move while an answer is awaited, so this keeps
        going until the promo is trusted, cleared, or the state is closed.
        """
        while self._active and not self.is_trusted():
            await self.revalidate()

    def close(self) -> None:
        """Stop accepting results; answers still in flight are dropped."""
        self._active = False
