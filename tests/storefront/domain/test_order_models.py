from decimal import Decimal

import pytest
from pydantic import ValidationError
from storefront.orders.fake_adapter import generate_order_number
from storefront.orders.port import DeliveryType, Order, OrderLine, OrderRequest, OrderStatus


def _request(**overrides):
    fields = dict(
        items=[
            OrderLine(product_id="prod-a", quantity=2, price=Decimal("10.00"), name="Apples"),
            OrderLine(product_id="prod-b", quantity=1, price=Decimal("5.00")),
        ],
        total_amount=Decimal("20.00"),
        original_amount=Decimal("25.00"),
        discount_amount=Decimal("5.00"),
        promo_code="SAVE5",
        delivery_type=DeliveryType.DELIVERY,
        phone="0241234567",
        customer_name="Ama",
        address="12 Oxford St",
    )
    fields.update(overrides)
    return OrderRequest(**fields)


class TestOrderRequestPayload:
    def test_payload_uses_wire_names(self):
        payload = _request().to_payload()
        assert payload == {
            "items": [
                {"productId": "prod-a", "quantity": 2, "price": 10.0},
                {"productId": "prod-b", "quantity": 1, "price": 5.0},
            ],
            "totalAmount": 20.0,
            "originalAmount": 25.0,
            "discountAmount": 5.0,
            "promoCode": "SAVE5",
            "deliveryType": "delivery",
            "phone": "0241234567",
            "customerName": "Ama",
            "address": "12 Oxford St",
        }

    def test_payload_without_promo(self):
        payload = _request(promo_code=None, discount_amount=Decimal("0")).to_payload()
        assert payload["promoCode"] is None
        assert payload["discountAmount"] == 0.0

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            OrderLine(product_id="prod-a", quantity=0, price=Decimal("1"))


class TestOrderParsing:
    def test_parses_stored_order_with_populated_products(self):
        order = Order.model_validate(
            {
                "_id": "64f0c0ffee",
                "orderNumber": "ORD-20260601-1234",
                "status": "pending",
                "items": [
                    {
                        "productId": {"_id": "prod-a", "name": "Apples", "unit": "kg", "image": "a.png"},
                        "quantity": 2,
                        "price": 10,
                    }
                ],
                "totalAmount": 20,
                "originalAmount": 25,
                "discountAmount": 5,
                "promoCode": "SAVE5",
                "deliveryType": "pickup",
                "phone": "0241234567",
                "customerName": "Ama",
                "createdAt": "2026-06-01T12:00:00Z",
            }
        )
        assert order.id == "64f0c0ffee"
        assert order.items[0].product_id == "prod-a"
        assert order.items[0].name == "Apples"
        assert order.items[0].unit == "kg"
        assert order.delivery_type is DeliveryType.PICKUP
        assert order.address == ""
        assert order.is_editable

    def test_plain_product_ids_are_kept(self):
        order = Order.model_validate(
            {
                "_id": "1",
                "orderNumber": "ORD-20260601-0001",
                "items": [{"productId": "prod-b", "quantity": 1, "price": 5}],
                "totalAmount": 5,
            }
        )
        assert order.items[0].product_id == "prod-b"
        assert order.original_amount is None

    @pytest.mark.parametrize("status", ["processing", "shipped", "delivered", "cancelled"])
    def test_only_pending_orders_are_editable(self, status):
        order = Order.model_validate(
            {"_id": "1", "orderNumber": "N", "status": status, "items": [], "totalAmount": 0}
        )
        assert order.status is OrderStatus(status)
        assert not order.is_editable


class TestOrderNumber:
    def test_format(self):
        from datetime import UTC, datetime

        number = generate_order_number(datetime(2026, 6, 1, tzinfo=UTC))
        prefix, date, suffix = number.split("-")
        assert prefix == "ORD"
        assert date == "20260601"
        assert 1000 <= int(suffix) <= 9999
