import uuid
from datetime import datetime, timedelta

import pytest

from academy.core.context import RequestContext
from academy.core.exceptions import ConflictError, NotFoundError, ValidationError
from academy.models.catalog import ItemKind, OrderKind
from academy.models.coupon import Coupon
from academy.models.flash_sale import FlashSale, FlashSaleItem
from academy.models.order import OrderStatus, PaymentStatus
from academy.schemas.order import OrderCreate, OrderPaymentUpdate
from academy.services.orders import (
    RECORD_TYPES,
    BundleOrderRecord,
    EbookOrderRecord,
    WebinarOrderRecord,
    create_order,
    list_my_orders,
    normalize_order,
    update_payment,
)


def _record(cls, **overrides):
    fields = dict(id=uuid.UUID("1234abcd-0000-0000-0000-000000000000"), item_id=uuid.uuid4(),
                  total_amount=500, final_amount=500)
    fields.update(overrides)
    return cls(**fields)


class TestNormalizeOrder:
    def test_every_kind_has_a_record_type(self):
        assert set(RECORD_TYPES) == set(OrderKind)

    def test_order_number_prefix(self):
        assert normalize_order(_record(BundleOrderRecord)).order_number == "BND-1234ABCD"
        assert normalize_order(_record(EbookOrderRecord)).order_number == "EBOOK-1234ABCD"

    def test_paid_is_completed(self):
        order = normalize_order(_record(EbookOrderRecord, payment_status="PAID"))
        assert order.status == OrderStatus.COMPLETED.value

    def test_unpaid_is_pending(self):
        order = normalize_order(_record(EbookOrderRecord, payment_status="FAILED"))
        assert order.status == OrderStatus.PENDING.value

    def test_webinar_with_payment_id_is_paid(self):
        order = normalize_order(_record(WebinarOrderRecord, payment_id="pay_123"))
        assert order.payment_status == PaymentStatus.PAID.value
        assert order.status == OrderStatus.COMPLETED.value
        assert order.order_number.startswith("WEB-")

    def test_free_webinar(self):
        order = normalize_order(_record(WebinarOrderRecord, payment_mode="free", final_amount=0))
        assert order.payment_status == PaymentStatus.FREE.value

    def test_webinar_without_payment_is_pending(self):
        order = normalize_order(_record(WebinarOrderRecord))
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.status == OrderStatus.PENDING.value


class TestCreateOrder:
    def test_plain_checkout_is_pending(self, db, user, make_item):
        item = make_item(price=1000, sale_price=800)
        order = create_order(db, RequestContext(user=user), OrderCreate(item_id=item.id))
        assert order.total_amount == 800
        assert order.final_amount == 800
        assert order.status == OrderStatus.PENDING.value
        assert order.order_number.startswith("COURSE-")

    def test_flash_sale_price_is_charged(self, db, user, make_item):
        item = make_item(price=1000)
        now = datetime.now()
        db.add(FlashSale(
            title="Weekend",
            start_at=now - timedelta(hours=1),
            end_at=now + timedelta(hours=1),
            items=[FlashSaleItem(item_kind=ItemKind.COURSE, item_id=item.id, discount_price=600)],
        ))
        db.commit()
        order = create_order(db, RequestContext(user=user, now=now), OrderCreate(item_id=item.id))
        assert order.final_amount == 600
        assert order.flash_sale_id is not None

    def test_coupon_is_applied_and_consumed(self, db, user, make_item):
        item = make_item(price=1000)
        now = datetime.now()
        db.add(Coupon(code="HALF", discount_type="PERCENTAGE", discount_value=50, usage_limit=1,
                      valid_from=now - timedelta(days=1), valid_until=now + timedelta(days=1)))
        db.commit()
        order = create_order(db, RequestContext(user=user, now=now), OrderCreate(item_id=item.id, coupon_code="half"))
        assert (order.discount_amount, order.final_amount, order.coupon_code) == (500, 500, "HALF")
        assert db.query(Coupon).one().used_count == 1

    def test_exhausted_coupon_leaves_no_order(self, db, user, make_item):
        item = make_item(price=1000)
        now = datetime.now()
        db.add(Coupon(code="GONE", discount_type="FLAT", discount_value=100, usage_limit=1, used_count=1,
                      valid_from=now - timedelta(days=1), valid_until=now + timedelta(days=1)))
        db.commit()
        with pytest.raises(ValidationError):
            create_order(db, RequestContext(user=user, now=now), OrderCreate(item_id=item.id, coupon_code="GONE"))
        assert list_my_orders(db, RequestContext(user=user)) == []

    def test_free_item_completes_immediately(self, db, user, make_item):
        item = make_item(kind=OrderKind.WEBINAR, title="Open Webinar", price=None, is_free=True)
        order = create_order(db, RequestContext(user=user), OrderCreate(item_id=item.id))
        assert order.payment_status == PaymentStatus.FREE.value
        assert order.status == OrderStatus.COMPLETED.value

    def test_cannot_buy_twice(self, db, user, make_item):
        item = make_item(price=0, is_free=True)
        create_order(db, RequestContext(user=user), OrderCreate(item_id=item.id))
        with pytest.raises(ConflictError):
            create_order(db, RequestContext(user=user), OrderCreate(item_id=item.id))

    def test_unpublished_item(self, db, user, make_item):
        item = make_item(is_published=False)
        with pytest.raises(NotFoundError):
            create_order(db, RequestContext(user=user), OrderCreate(item_id=item.id))

    def test_unknown_coupon(self, db, user, make_item):
        item = make_item()
        with pytest.raises(NotFoundError):
            create_order(db, RequestContext(user=user), OrderCreate(item_id=item.id, coupon_code="NOPE"))


class TestPayments:
    def test_paid_completes_the_order(self, db, user, make_item):
        order = create_order(db, RequestContext(user=user), OrderCreate(item_id=make_item().id))
        updated = update_payment(db, order.id, OrderPaymentUpdate(payment_status="PAID", payment_id="pay_1"))
        assert updated.status == OrderStatus.COMPLETED.value
        assert updated.payment_id == "pay_1"

    def test_priced_order_cannot_be_marked_free(self, db, user, make_item):
        order = create_order(db, RequestContext(user=user), OrderCreate(item_id=make_item().id))
        with pytest.raises(ValidationError):
            update_payment(db, order.id, OrderPaymentUpdate(payment_status="FREE"))

    def test_listing_is_uniform(self, db, user, make_item):
        create_order(db, RequestContext(user=user), OrderCreate(item_id=make_item(kind=OrderKind.EBOOK, title="Guide").id))
        create_order(db, RequestContext(user=user), OrderCreate(item_id=make_item(kind=OrderKind.BUNDLE, title="Pack").id))
        orders = list_my_orders(db, RequestContext(user=user))
        assert {o.kind for o in orders} == {OrderKind.EBOOK, OrderKind.BUNDLE}
        assert all(o.status == OrderStatus.PENDING.value for o in orders)
