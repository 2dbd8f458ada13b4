from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from academy.core.exceptions import ConflictError, ValidationError
from academy.models.catalog import OrderKind
from academy.models.coupon import Coupon
from academy.schemas.coupon import CouponCreate
from academy.services.coupons import apply_coupon, consume_coupon, create_coupon, find_coupon

NOW = datetime(2026, 3, 10, 12, 0)


def _coupon(**overrides):
    fields = dict(
        code="SAVE20",
        discount_type="PERCENTAGE",
        discount_value=20,
        max_discount=None,
        min_amount=None,
        usage_limit=None,
        used_count=0,
        applicable_to="ALL",
        valid_from=NOW - timedelta(days=1),
        valid_until=NOW + timedelta(days=1),
        is_active=True,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestApplyCoupon:
    def test_percentage(self):
        assert apply_coupon(_coupon(), 1000, OrderKind.COURSE, NOW) == 200

    def test_percentage_rounds_half_up(self):
        assert apply_coupon(_coupon(discount_value=15), 250, OrderKind.COURSE, NOW) == 38

    def test_percentage_capped(self):
        assert apply_coupon(_coupon(max_discount=150), 1000, OrderKind.COURSE, NOW) == 150

    def test_flat(self):
        assert apply_coupon(_coupon(discount_type="FLAT", discount_value=300), 1000, OrderKind.EBOOK, NOW) == 300

    def test_flat_never_exceeds_amount(self):
        assert apply_coupon(_coupon(discount_type="FLAT", discount_value=300), 120, OrderKind.EBOOK, NOW) == 120

    def test_inactive(self):
        with pytest.raises(ValidationError):
            apply_coupon(_coupon(is_active=False), 1000, OrderKind.COURSE, NOW)

    def test_expired(self):
        with pytest.raises(ValidationError):
            apply_coupon(_coupon(valid_until=NOW - timedelta(minutes=1)), 1000, OrderKind.COURSE, NOW)

    def test_not_yet_valid(self):
        with pytest.raises(ValidationError):
            apply_coupon(_coupon(valid_from=NOW + timedelta(minutes=1)), 1000, OrderKind.COURSE, NOW)

    def test_restricted_to_another_kind(self):
        with pytest.raises(ValidationError):
            apply_coupon(_coupon(applicable_to="EBOOK"), 1000, OrderKind.COURSE, NOW)

    def test_restricted_kind_matches(self):
        assert apply_coupon(_coupon(applicable_to="EBOOK"), 1000, OrderKind.EBOOK, NOW) == 200

    def test_usage_exhausted(self):
        with pytest.raises(ValidationError):
            apply_coupon(_coupon(usage_limit=5, used_count=5), 1000, OrderKind.COURSE, NOW)

    def test_below_minimum(self):
        with pytest.raises(ValidationError) as exc:
            apply_coupon(_coupon(min_amount=500), 499, OrderKind.COURSE, NOW)
        assert exc.value.details["min_amount"] == 500


class TestCouponStore:
    def _create(self, db, **overrides):
        data = dict(
            code=" welcome10 ",
            discount_value=10,
            valid_from=NOW - timedelta(days=1),
            valid_until=NOW + timedelta(days=30),
        )
        data.update(overrides)
        return create_coupon(db, CouponCreate(**data))

    def test_code_is_normalized(self, db):
        coupon = self._create(db)
        assert coupon.code == "WELCOME10"
        assert find_coupon(db, "welcome10").id == coupon.id

    def test_duplicate_code(self, db):
        self._create(db)
        with pytest.raises(ConflictError):
            self._create(db, code="WELCOME10")

    def test_percentage_over_100_rejected(self, db):
        with pytest.raises(ValidationError):
            self._create(db, discount_value=120)

    def test_unknown_kind_rejected(self, db):
        with pytest.raises(ValidationError):
            self._create(db, applicable_to="PODCAST")

    def test_consume_respects_limit(self, db):
        coupon = self._create(db, usage_limit=1)
        consume_coupon(db, coupon)
        db.commit()
        with pytest.raises(ValidationError):
            consume_coupon(db, coupon)
        db.refresh(coupon)
        assert coupon.used_count == 1

    def test_consume_unlimited(self, db):
        coupon = self._create(db)
        for _ in range(3):
            consume_coupon(db, coupon)
        db.commit()
        assert db.query(Coupon).one().used_count == 3
