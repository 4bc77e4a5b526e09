"""Promo service port (abstract interface) and its result types.

A promo code is only meaningful relative to the subtotal it was validated
against, so every successful validation carries that subtotal along with
the discount. Rejections are plain values, never exceptions: a rejected
code must not abort whatever cart operation asked about it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from storefront.money import ZERO, Money


def normalize_code(code: str | None) -> str:
    return (code or "").strip().upper()


class RejectionKind(Enum):
    EMPTY_CODE = "EmptyCode"
    NOT_FOUND = "NotFound"
    EXPIRED = "Expired"
    NOT_YET_ACTIVE = "NotYetActive"
    INACTIVE = "Inactive"
    USAGE_LIMIT_REACHED = "UsageLimitReached"
    MINIMUM_NOT_MET = "MinimumNotMet"
    ALREADY_APPLIED = "AlreadyApplied"


@dataclass(frozen=True)
class PromoRejection:
    """Why a code was not accepted."""

    kind: RejectionKind
    message: str

    @property
    def is_informational(self) -> bool:
        """Re-applying the current code is a no-op, not an error."""
        return self.kind is RejectionKind.ALREADY_APPLIED


class PromoCode(BaseModel):
    """An accepted promo code and the discount it grants at ``validated_subtotal``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    code: str
    discount: Money
    description: str | None = None
    discount_type: str | None = None
    discount_value: Decimal | None = None
    validated_subtotal: Money = ZERO

    @field_validator("code")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return normalize_code(value)

    def is_valid_for(self, subtotal: Decimal) -> bool:
        return self.validated_subtotal == subtotal


class PromoService(ABC):
    """Abstract promo validation interface."""

    @abstractmethod
    async def validate(self, code: str, subtotal: Decimal) -> PromoCode | PromoRejection:
        """Validate ``code`` against ``subtotal``.

        Returns the accepted promo (with ``validated_subtotal`` set to
        ``subtotal``) or a rejection. Raises ``ServiceError`` only when the
        service could not be reached.
        """
        ...
