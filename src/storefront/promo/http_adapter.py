"""Promo service adapter for the storefront REST API.

``GET /api/promo-codes/validate/{CODE}?totalAmount=...`` answers 200 with the
computed discount, 404 for unknown codes and 400 with a human message for
every other refusal. The message is the only thing that distinguishes the
refusal reasons, so it is classified here.
"""

from decimal import Decimal

import httpx

from storefront.promo.port import PromoCode, PromoRejection, PromoService, RejectionKind, normalize_code
from storefront.utils.http import ApiClient, ApiError, parse_model

# Checked in order; "not yet active" must win over "not active"
_MESSAGE_KINDS = (
    ("expired", RejectionKind.EXPIRED),
    ("not yet active", RejectionKind.NOT_YET_ACTIVE),
    ("not active", RejectionKind.INACTIVE),
    ("usage limit", RejectionKind.USAGE_LIMIT_REACHED),
    ("minimum", RejectionKind.MINIMUM_NOT_MET),
    ("not found", RejectionKind.NOT_FOUND),
)


def classify_rejection(status_code: int, message: str | None) -> RejectionKind | None:
    """Map an API refusal to a rejection kind, or None if it is not a refusal."""
    text = (message or "").lower()
    for needle, kind in _MESSAGE_KINDS:
        if needle in text:
            return kind
    if status_code == 404:
        return RejectionKind.NOT_FOUND
    return None


class HttpPromoService(PromoService):
    def __init__(self, base_url: str, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        self.api = ApiClient(base_url, timeout=timeout, transport=transport)

    async def validate(self, code: str, subtotal: Decimal) -> PromoCode | PromoRejection:
        code = normalize_code(code)
        try:
            data = await self.api.request(
                "GET",
                f"/api/promo-codes/validate/{code}",
                params={"totalAmount": str(subtotal)},
            )
        except ApiError as exc:
            kind = classify_rejection(exc.status_code, exc.message)
            if kind is None or exc.status_code >= 500:
                raise
            return PromoRejection(kind, exc.message)

        return parse_model(PromoCode, data, validatedSubtotal=subtotal)

    async def aclose(self) -> None:
        await self.api.aclose()
