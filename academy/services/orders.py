"""
Orders across every purchasable kind.

Each kind arrives as its own record type; ``normalize_order`` folds any of
them into one ``NormalizedOrder`` shape so listings never branch on kind.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Dict, List, Optional, Type
from uuid import UUID

from sqlalchemy.orm import Session

from academy.core.context import RequestContext
from academy.core.exceptions import ConflictError, NotFoundError, ValidationError
from academy.models.catalog import OrderKind
from academy.models.order import Order, OrderStatus, PaymentStatus
from academy.schemas.order import OrderCreate, OrderPaymentUpdate
from academy.services.catalog import get_item
from academy.services.coupons import apply_coupon, consume_coupon, find_coupon
from academy.services.flash_sales import get_active_flash_sale
from academy.services.pricing import resolve_pricing

logger = logging.getLogger(__name__)

ORDER_NUMBER_PREFIXES: Dict[OrderKind, str] = {
    OrderKind.EBOOK: "EBOOK",
    OrderKind.BUNDLE: "BND",
    OrderKind.COURSE: "COURSE",
    OrderKind.WEBINAR: "WEB",
    OrderKind.GUIDANCE: "GUID",
    OrderKind.MENTORSHIP: "MENT",
    OrderKind.OFFLINE_BATCH: "BATCH",
}

SETTLED_PAYMENT_STATUSES = (PaymentStatus.PAID.value, PaymentStatus.FREE.value)


# ---------------------------------------------------------------------------
# Record variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OrderRecord:
    id: UUID
    item_id: UUID
    total_amount: int
    final_amount: int
    discount_amount: int = 0
    coupon_code: Optional[str] = None
    payment_status: str = PaymentStatus.PENDING.value
    created_at: Optional[datetime] = None

    kind: ClassVar[OrderKind]


@dataclass(frozen=True)
class EbookOrderRecord(OrderRecord):
    kind: ClassVar[OrderKind] = OrderKind.EBOOK


@dataclass(frozen=True)
class BundleOrderRecord(OrderRecord):
    kind: ClassVar[OrderKind] = OrderKind.BUNDLE


@dataclass(frozen=True)
class CourseOrderRecord(OrderRecord):
    kind: ClassVar[OrderKind] = OrderKind.COURSE


@dataclass(frozen=True)
class WebinarOrderRecord(OrderRecord):
    """Webinar registrations carry no payment status of their own."""

    payment_id: Optional[str] = None
    payment_mode: Optional[str] = None

    kind: ClassVar[OrderKind] = OrderKind.WEBINAR


@dataclass(frozen=True)
class GuidanceOrderRecord(OrderRecord):
    kind: ClassVar[OrderKind] = OrderKind.GUIDANCE


@dataclass(frozen=True)
class MentorshipOrderRecord(OrderRecord):
    kind: ClassVar[OrderKind] = OrderKind.MENTORSHIP


@dataclass(frozen=True)
class OfflineBatchOrderRecord(OrderRecord):
    kind: ClassVar[OrderKind] = OrderKind.OFFLINE_BATCH


RECORD_TYPES: Dict[OrderKind, Type[OrderRecord]] = {
    cls.kind: cls
    for cls in (
        EbookOrderRecord,
        BundleOrderRecord,
        CourseOrderRecord,
        WebinarOrderRecord,
        GuidanceOrderRecord,
        MentorshipOrderRecord,
        OfflineBatchOrderRecord,
    )
}


@dataclass(frozen=True)
class NormalizedOrder:
    id: UUID
    order_number: str
    kind: OrderKind
    status: str
    payment_status: str
    total_amount: int
    final_amount: int
    discount_amount: int
    coupon_code: Optional[str]
    created_at: Optional[datetime]
    item_id: UUID


def order_number(kind: OrderKind, order_id: UUID) -> str:
    return f"{ORDER_NUMBER_PREFIXES[kind]}-{order_id.hex[:8].upper()}"


def derive_status(payment_status: str) -> str:
    if payment_status in SETTLED_PAYMENT_STATUSES:
        return OrderStatus.COMPLETED.value
    return OrderStatus.PENDING.value


def _payment_status(record: OrderRecord) -> str:
    if isinstance(record, WebinarOrderRecord):
        if record.payment_id:
            return PaymentStatus.PAID.value
        if (record.payment_mode or "").upper() == PaymentStatus.FREE.value:
            return PaymentStatus.FREE.value
        return PaymentStatus.PENDING.value
    return record.payment_status


def normalize_order(record: OrderRecord) -> NormalizedOrder:
    payment_status = _payment_status(record)
    return NormalizedOrder(
        id=record.id,
        order_number=order_number(record.kind, record.id),
        kind=record.kind,
        status=derive_status(payment_status),
        payment_status=payment_status,
        total_amount=record.total_amount,
        final_amount=record.final_amount,
        discount_amount=record.discount_amount,
        coupon_code=record.coupon_code,
        created_at=record.created_at,
        item_id=record.item_id,
    )


def record_from_model(order: Order) -> OrderRecord:
    """Wrap a stored order in the record variant for its kind."""
    fields = dict(
        id=order.id,
        item_id=order.item_id,
        total_amount=order.total_amount,
        final_amount=order.final_amount,
        discount_amount=order.discount_amount,
        coupon_code=order.coupon_code,
        payment_status=order.payment_status,
        created_at=order.created_at,
    )
    if order.kind == OrderKind.WEBINAR:
        return WebinarOrderRecord(
            payment_id=order.payment_id,
            payment_mode=PaymentStatus.FREE.value if order.final_amount == 0 else None,
            **fields,
        )
    return RECORD_TYPES[order.kind](**fields)


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


def create_order(db: Session, ctx: RequestContext, data: OrderCreate) -> Order:
    """Price ``data.item_id`` for the signed-in user and store the order.

    Raises:
        NotFoundError: the item or coupon does not exist.
        ConflictError: the user already owns the item.
        ValidationError: the coupon cannot be applied.
    """
    item = get_item(db, data.item_id)

    already_owned = (
        db.query(Order.id)
        .filter(
            Order.user_id == ctx.user.id,
            Order.item_id == item.id,
            Order.status == OrderStatus.COMPLETED.value,
        )
        .first()
    )
    if already_owned is not None:
        raise ConflictError("You have already purchased this item", details={"item_id": str(item.id)})

    sale = get_active_flash_sale(db, ctx.now)
    pricing = resolve_pricing(item, sale)
    amount = pricing.effective_price

    try:
        discount = 0
        coupon_code = None
        if data.coupon_code and data.coupon_code.strip():
            coupon = find_coupon(db, data.coupon_code)
            discount = apply_coupon(coupon, amount, item.kind, ctx.now)
            consume_coupon(db, coupon)
            coupon_code = coupon.code

        final_amount = amount - discount
        payment_status = PaymentStatus.FREE.value if final_amount == 0 else PaymentStatus.PENDING.value

        order_id = uuid.uuid4()
        order = Order(
            id=order_id,
            order_number=order_number(item.kind, order_id),
            user_id=ctx.user.id,
            item_id=item.id,
            kind=item.kind,
            status=derive_status(payment_status),
            payment_status=payment_status,
            total_amount=amount,
            discount_amount=discount,
            final_amount=final_amount,
            coupon_code=coupon_code,
            flash_sale_id=sale.id if pricing.has_flash_sale else None,
        )
        db.add(order)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(order)
    logger.info("Order %s created for item %s (final %d)", order.order_number, item.id, final_amount)
    return order


def list_my_orders(db: Session, ctx: RequestContext) -> List[NormalizedOrder]:
    orders = (
        db.query(Order)
        .filter(Order.user_id == ctx.user.id)
        .order_by(Order.created_at.desc())
        .all()
    )
    return [normalize_order(record_from_model(o)) for o in orders]


def orders_query(db: Session, kind: Optional[OrderKind] = None, status: Optional[str] = None):
    query = db.query(Order)
    if kind:
        query = query.filter(Order.kind == kind)
    if status:
        query = query.filter(Order.status == status.upper())
    return query


def update_payment(db: Session, order_id: UUID, data: OrderPaymentUpdate) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise NotFoundError("Order not found")
    if data.payment_status == PaymentStatus.FREE and order.final_amount > 0:
        raise ValidationError("Only zero-amount orders can be marked free")

    order.payment_status = data.payment_status.value
    if data.payment_id is not None:
        order.payment_id = data.payment_id
    order.status = derive_status(order.payment_status)
    db.commit()
    db.refresh(order)
    logger.info("Order %s payment set to %s", order.order_number, order.payment_status)
    return order
