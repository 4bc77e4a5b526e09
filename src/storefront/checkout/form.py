"""Checkout form — the shopper's delivery details — and the pre-submission rules.

The same rules guard a new checkout and the save of an edited order. They
are checked in a fixed order and the first failure is reported alone.
"""

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from storefront.exceptions import ValidationError
from storefront.orders.port import DeliveryType
from storefront.persistence.adapter import Slot


class CheckoutForm(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    name: str = ""
    phone: str = ""
    delivery_type: DeliveryType = DeliveryType.DELIVERY
    address: str = ""

    @property
    def shipping_address(self) -> str:
        """Address to send with the order; pickup orders carry none."""
        return self.address if self.delivery_type is DeliveryType.DELIVERY else ""


CHECKOUT_FORM_SLOT = Slot("checkout_form", CheckoutForm, CheckoutForm)


def update_form(form: CheckoutForm, fields: dict) -> CheckoutForm:
    """Return ``form`` with ``fields`` replaced, validated field by field."""
    unknown = sorted(set(fields) - set(CheckoutForm.model_fields))
    if unknown:
        raise ValidationError({name: ["Unknown checkout field"] for name in unknown})
    try:
        return CheckoutForm.model_validate({**form.model_dump(), **fields})
    except PydanticValidationError as exc:
        messages: dict[str, list[str]] = {}
        for error in exc.errors():
            messages.setdefault(str(error["loc"][0]), []).append(error["msg"])
        raise ValidationError(messages) from exc


def validate_submission(form: CheckoutForm, item_count: int) -> None:
    """Raise ``ValidationError`` for the first rule the submission breaks."""
    if not form.name.strip():
        raise ValidationError({"name": ["Name is required"]})
    if not form.phone.strip():
        raise ValidationError({"phone": ["Phone is required"]})
    if form.delivery_type is DeliveryType.DELIVERY and not form.address.strip():
        raise ValidationError({"address": ["Address is required for delivery"]})
    if item_count == 0:
        raise ValidationError({"items": ["Your cart is empty"]})
