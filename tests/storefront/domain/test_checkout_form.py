import pytest
from storefront.checkout.form import CheckoutForm, update_form, validate_submission
from storefront.exceptions import ValidationError
from storefront.orders.port import DeliveryType


def _form(**overrides):
    fields = {"name": "Ama", "phone": "0241234567", "delivery_type": DeliveryType.DELIVERY, "address": "12 Oxford St"}
    fields.update(overrides)
    return CheckoutForm(**fields)


class TestValidateSubmission:
    def test_complete_delivery_form_passes(self):
        validate_submission(_form(), item_count=1)

    def test_pickup_needs_no_address(self):
        validate_submission(_form(delivery_type=DeliveryType.PICKUP, address=""), item_count=1)

    def test_missing_name(self):
        with pytest.raises(ValidationError) as exc:
            validate_submission(_form(name="   "), item_count=1)
        assert exc.value.field == "name"
        assert exc.value.message == "Name is required"

    def test_missing_phone(self):
        with pytest.raises(ValidationError) as exc:
            validate_submission(_form(phone=""), item_count=1)
        assert exc.value.messages == {"phone": ["Phone is required"]}

    def test_delivery_requires_address(self):
        with pytest.raises(ValidationError) as exc:
            validate_submission(_form(address="  "), item_count=2)
        assert exc.value.message == "Address is required for delivery"

    def test_empty_cart(self):
        with pytest.raises(ValidationError) as exc:
            validate_submission(_form(), item_count=0)
        assert exc.value.messages == {"items": ["Your cart is empty"]}

    def test_first_failing_rule_is_reported_alone(self):
        with pytest.raises(ValidationError) as exc:
            validate_submission(CheckoutForm(), item_count=0)
        assert exc.value.messages == {"name": ["Name is required"]}

    def test_address_checked_before_items(self):
        with pytest.raises(ValidationError) as exc:
            validate_submission(_form(address=""), item_count=0)
        assert exc.value.field == "address"


class TestUpdateForm:
    def test_replaces_given_fields_only(self):
        form = update_form(_form(), {"phone": "0200000000"})
        assert form.phone == "0200000000"
        assert form.name == "Ama"
        assert form.address == "12 Oxford St"

    def test_delivery_type_accepts_wire_value(self):
        form = update_form(_form(), {"delivery_type": "pickup"})
        assert form.delivery_type is DeliveryType.PICKUP

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError) as exc:
            update_form(_form(), {"email": "a@b.c"})
        assert exc.value.field == "email"

    def test_invalid_delivery_type_rejected(self):
        with pytest.raises(ValidationError) as exc:
            update_form(_form(), {"delivery_type": "drone"})
        assert exc.value.field == "delivery_type"

    def test_original_form_untouched(self):
        original = _form()
        update_form(original, {"name": "Kofi"})
        assert original.name == "Ama"


class TestShippingAddress:
    def test_delivery_keeps_address(self):
        assert _form().shipping_address == "12 Oxford St"

    def test_pickup_drops_address(self):
        assert _form(delivery_type=DeliveryType.PICKUP).shipping_address == ""
