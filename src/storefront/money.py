"""Money type shared by every model: a non-negative Decimal kept to cents.

Amounts travel as JSON numbers on the wire and in persisted state, and are
quantized back to two places whenever they are read into a model.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from pydantic import AfterValidator, Field, PlainSerializer

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Quantize ``value`` to cents, rounding halves away from zero."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


Money = Annotated[
    Decimal,
    Field(ge=0),
    AfterValidator(to_money),
    PlainSerializer(float, return_type=float, when_used="json"),
]
