from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from storefront.promo.fake_adapter import PromoRule
from storefront.promo.port import PromoCode, PromoRejection, RejectionKind, normalize_code

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


class TestNormalizeCode:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("save5", "SAVE5"), ("  Save5 ", "SAVE5"), ("", ""), (None, "")],
    )
    def test_normalize(self, raw, expected):
        assert normalize_code(raw) == expected


class TestPromoCode:
    def test_code_is_normalized(self):
        assert PromoCode(code=" save5", discount=Decimal("5")).code == "SAVE5"

    def test_parses_api_payload(self):
        promo = PromoCode.model_validate(
            {
                "code": "TENPCT",
                "discount": 2.5,
                "discountType": "percentage",
                "discountValue": 10,
                "description": "Ten percent",
                "finalAmount": 22.5,
            }
        )
        assert promo.discount == Decimal("2.50")
        assert promo.discount_type == "percentage"
        assert promo.discount_value == Decimal("10")

    def test_is_valid_only_for_its_subtotal(self):
        promo = PromoCode(code="SAVE5", discount=Decimal("5"), validated_subtotal=Decimal("25.00"))
        assert promo.is_valid_for(Decimal("25"))
        assert not promo.is_valid_for(Decimal("15.00"))

    def test_already_applied_is_informational(self):
        assert PromoRejection(RejectionKind.ALREADY_APPLIED, "x").is_informational
        assert not PromoRejection(RejectionKind.EXPIRED, "x").is_informational


class TestPromoRule:
    def test_fixed_discount(self):
        rule = PromoRule(code="SAVE5", discount_value=Decimal("5"))
        assert rule.check(Decimal("25.00"), NOW) is None
        assert rule.discount_for(Decimal("25.00")) == Decimal("5.00")

    def test_fixed_discount_capped_at_subtotal(self):
        rule = PromoRule(code="SAVE50", discount_value=Decimal("50"))
        assert rule.discount_for(Decimal("25.00")) == Decimal("25.00")

    def test_percentage_discount(self):
        rule = PromoRule(code="TENPCT", discount_value=Decimal("10"), discount_type="percentage")
        assert rule.discount_for(Decimal("25.00")) == Decimal("2.50")

    def test_percentage_discount_with_cap(self):
        rule = PromoRule(
            code="HALF",
            discount_value=Decimal("50"),
            discount_type="percentage",
            max_discount_amount=Decimal("8.00"),
        )
        assert rule.discount_for(Decimal("25.00")) == Decimal("8.00")

    def test_minimum_not_met(self):
        rule = PromoRule(code="BIG5", discount_value=Decimal("5"), min_purchase_amount=Decimal("22"))
        rejection = rule.check(Decimal("15.00"), NOW)
        assert rejection.kind is RejectionKind.MINIMUM_NOT_MET
        assert rejection.message == "Minimum purchase amount is 22.00"

    def test_inactive(self):
        rule = PromoRule(code="OFF", discount_value=Decimal("5"), is_active=False)
        assert rule.check(Decimal("25"), NOW).kind is RejectionKind.INACTIVE

    def test_expired(self):
        rule = PromoRule(code="OLD", discount_value=Decimal("5"), end_date=NOW - timedelta(days=1))
        assert rule.check(Decimal("25"), NOW).kind is RejectionKind.EXPIRED

    def test_not_yet_active(self):
        rule = PromoRule(code="SOON", discount_value=Decimal("5"), start_date=NOW + timedelta(days=1))
        assert rule.check(Decimal("25"), NOW).kind is RejectionKind.NOT_YET_ACTIVE

    def test_usage_limit_reached(self):
        rule = PromoRule(code="ONCE", discount_value=Decimal("5"), usage_limit=1, used_count=1)
        assert rule.check(Decimal("25"), NOW).kind is RejectionKind.USAGE_LIMIT_REACHED

    def test_inactive_wins_over_minimum(self):
        rule = PromoRule(
            code="OFF",
            discount_value=Decimal("5"),
            is_active=False,
            min_purchase_amount=Decimal("100"),
        )
        assert rule.check(Decimal("1"), NOW).kind is RejectionKind.INACTIVE
