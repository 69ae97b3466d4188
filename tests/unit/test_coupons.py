"""
Unit tests for coupon eligibility helpers.
"""

from datetime import datetime, timedelta, timezone

import pytest

from storefront.exceptions import ApiError
from storefront.models import Coupon, DiscountType
from storefront.services.coupons import (
    coupon_shortfall,
    discount_label,
    is_eligible,
    is_expired,
    pick_best_coupon,
    shortfall_from_error,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def flat(code, amount, min_order=None, **kwargs):
    return Coupon(
        coupon_id=f"id-{code}",
        code=code,
        discount_type=DiscountType.FLAT,
        discount_amount=amount,
        min_order_value=min_order,
        **kwargs,
    )


def percent(code, pct, min_order=None, **kwargs):
    return Coupon(
        coupon_id=f"id-{code}",
        code=code,
        discount_type=DiscountType.PERCENTAGE,
        discount_percent=pct,
        min_order_value=min_order,
        **kwargs,
    )


class TestExpiry:

    def test_active_without_window(self):
        assert is_expired(flat("A", 50), NOW) is False

    def test_inactive_counts_as_expired(self):
        assert is_expired(flat("A", 50, is_active=False), NOW) is True

    def test_past_valid_until(self):
        coupon = flat("A", 50, valid_until=NOW - timedelta(minutes=1))
        assert is_expired(coupon, NOW) is True

    def test_naive_valid_until_is_utc(self):
        coupon = flat("A", 50, valid_until=datetime(2026, 10, 19, 13, 0))
        assert is_expired(coupon, NOW) is False


class TestEligibility:

    def test_meets_minimum(self):
        assert is_eligible(flat("SAVE50", 50, min_order=200), 200, NOW) is True

    def test_below_minimum(self):
        assert is_eligible(flat("SAVE50", 50, min_order=200), 199.99, NOW) is False

    def test_expired_never_eligible(self):
        assert is_eligible(flat("A", 50, is_active=False), 1000, NOW) is False

    def test_shortfall(self):
        coupon = flat("SAVE50", 50, min_order=200)
        assert coupon_shortfall(coupon, 100) == 100
        assert coupon_shortfall(coupon, 250) == 0


class TestBestCoupon:
    """Tests for the featured coupon heuristic."""

    def test_highest_magnitude_wins(self):
        coupons = [flat("SAVE50", 50), percent("FEAST20", 20), flat("WELCOME100", 100)]
        assert pick_best_coupon(coupons, NOW).code == "WELCOME100"

    def test_percent_compared_by_percent_not_currency(self):
        coupons = [percent("HALF", 50), flat("FLAT40", 40)]
        assert pick_best_coupon(coupons, NOW).code == "HALF"

    def test_expired_skipped(self):
        coupons = [flat("OLD", 500, is_active=False), flat("SAVE50", 50)]
        assert pick_best_coupon(coupons, NOW).code == "SAVE50"

    def test_ineligible_still_featured(self):
        coupons = [flat("SAVE50", 50), flat("WELCOME100", 100, min_order=699)]
        assert pick_best_coupon(coupons, NOW).code == "WELCOME100"

    def test_tie_keeps_first(self):
        coupons = [flat("FIRST", 100), flat("SECOND", 100)]
        assert pick_best_coupon(coupons, NOW).code == "FIRST"

    def test_none_when_all_expired(self):
        assert pick_best_coupon([flat("OLD", 10, is_active=False)], NOW) is None
        assert pick_best_coupon([], NOW) is None


class TestDiscountLabel:

    def test_percentage(self):
        assert discount_label(percent("FEAST20", 20)) == "20% OFF"

    def test_flat(self):
        assert discount_label(flat("WELCOME100", 100)) == "₹100 OFF"
        assert discount_label(flat("WELCOME100", 100), currency_symbol="$") == "$100 OFF"


class TestShortfallFromError:
    """Tests for reading the coupon shortfall out of a rejection."""

    def test_structured_shortfall(self):
        error = ApiError("nope", status_code=400, payload={"shortfall": 100, "minOrderValue": 200})
        assert shortfall_from_error(error, subtotal=100) == 100

    def test_structured_minimum_order(self):
        error = ApiError("nope", status_code=400, payload={"minOrderValue": 500})
        assert shortfall_from_error(error, subtotal=320) == 180

    def test_legacy_message(self):
        error = ApiError("Minimum order value of ₹200 required for this coupon", status_code=400)
        assert shortfall_from_error(error, subtotal=100) == 100

    def test_legacy_message_with_decimals(self):
        error = ApiError("Minimum order 249.50 required", status_code=400)
        assert shortfall_from_error(error, subtotal=200) == pytest.approx(49.5)

    def test_no_figure(self):
        assert shortfall_from_error(ApiError("Coupon has expired", status_code=400), 100) is None

    def test_already_above_minimum(self):
        error = ApiError("Minimum order value of ₹200 required", status_code=400)
        assert shortfall_from_error(error, subtotal=300) is None


class TestCouponFromWire:

    def test_parses_catalog_entry(self):
        coupon = Coupon.from_wire({
            "_id": "cpn-002",
            "code": "FEAST20",
            "discountType": "PERCENTAGE",
            "discountPercent": 20,
            "maxDiscountAmount": 120,
            "minOrderValue": 500,
            "validUntil": "2026-11-18T10:00:00",
            "isActive": True,
        })

        assert coupon.coupon_id == "cpn-002"
        assert coupon.discount_type == DiscountType.PERCENTAGE
        assert coupon.magnitude == 20
        assert coupon.min_order_value == 500
        assert coupon.is_active is True

    def test_missing_active_flag_is_inactive(self):
        coupon = Coupon.from_wire({"code": "X", "discountType": "FLAT", "discountAmount": 10})
        assert coupon.is_active is False
        assert coupon.coupon_id == "X"
