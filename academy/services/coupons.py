"""
Coupon rules and redemption.

``apply_coupon`` is pure and decides the discount; ``consume_coupon`` bumps
the usage counter with a conditional UPDATE so the limit holds under
concurrent checkouts.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from academy.core.exceptions import ConflictError, NotFoundError, ValidationError
from academy.models.catalog import OrderKind
from academy.models.coupon import Coupon, DiscountType
from academy.schemas.coupon import CouponCreate, CouponUpdate
from academy.services.pricing import round_half_up
from academy.utils.timeslots import to_local_naive

logger = logging.getLogger(__name__)

ALL_KINDS = "ALL"


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


def apply_coupon(coupon: Any, amount: int, kind: Any, now: datetime) -> int:
    """Discount, in minor units, that ``coupon`` grants on ``amount``.

    Raises ``ValidationError`` when the coupon cannot be used for this
    purchase. The result never exceeds ``amount``.
    """
    if not coupon.is_active:
        raise ValidationError("Coupon is not active", details={"code": coupon.code})
    if now < coupon.valid_from or now > coupon.valid_until:
        raise ValidationError("Coupon has expired or is not yet valid", details={"code": coupon.code})

    kind_value = getattr(kind, "value", kind)
    if coupon.applicable_to != ALL_KINDS and coupon.applicable_to != kind_value:
        raise ValidationError(
            "Coupon is not applicable to this item",
            details={"code": coupon.code, "applicable_to": coupon.applicable_to},
        )
    if coupon.usage_limit is not None and coupon.used_count >= coupon.usage_limit:
        raise ValidationError("Coupon usage limit reached", details={"code": coupon.code})
    if coupon.min_amount is not None and amount < coupon.min_amount:
        raise ValidationError(
            f"Minimum order amount for this coupon is {coupon.min_amount}",
            details={"code": coupon.code, "min_amount": coupon.min_amount},
        )

    if coupon.discount_type == DiscountType.PERCENTAGE.value:
        discount = round_half_up(Decimal(amount) * Decimal(coupon.discount_value) / Decimal(100))
        if coupon.max_discount is not None:
            discount = min(discount, coupon.max_discount)
    else:
        discount = coupon.discount_value

    return max(0, min(discount, amount))


def find_coupon(db: Session, code: str) -> Coupon:
    coupon = db.query(Coupon).filter(Coupon.code == normalize_code(code)).first()
    if not coupon:
        raise NotFoundError("Invalid coupon code", details={"code": normalize_code(code)})
    return coupon


def consume_coupon(db: Session, coupon: Coupon) -> None:
    """Count one redemption. Does not commit."""
    query = db.query(Coupon).filter(Coupon.id == coupon.id)
    if coupon.usage_limit is not None:
        query = query.filter(Coupon.used_count < Coupon.usage_limit)
    updated = query.update(
        {Coupon.used_count: Coupon.used_count + 1},
        synchronize_session=False,
    )
    if updated == 0:
        raise ValidationError("Coupon usage limit reached", details={"code": coupon.code})


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


def _validate_rules(
    discount_type: str,
    discount_value: int,
    applicable_to: str,
    valid_from: datetime,
    valid_until: datetime,
) -> None:
    if discount_value is None or discount_value <= 0:
        raise ValidationError("Discount value must be positive")
    if discount_type == DiscountType.PERCENTAGE.value and discount_value > 100:
        raise ValidationError("Percentage discount cannot exceed 100")
    if applicable_to != ALL_KINDS and applicable_to not in OrderKind.__members__:
        raise ValidationError(
            "Unknown item kind",
            details={"applicable_to": applicable_to, "allowed": [ALL_KINDS] + list(OrderKind.__members__)},
        )
    if valid_until <= valid_from:
        raise ValidationError("Coupon end date must be after its start date")


def list_coupons(db: Session, is_active: Optional[bool] = None) -> List[Coupon]:
    query = db.query(Coupon)
    if is_active is not None:
        query = query.filter(Coupon.is_active == is_active)
    return query.order_by(Coupon.created_at.desc()).all()


def get_coupon(db: Session, coupon_id: UUID) -> Coupon:
    coupon = db.query(Coupon).filter(Coupon.id == coupon_id).first()
    if not coupon:
        raise NotFoundError("Coupon not found")
    return coupon


def create_coupon(db: Session, data: CouponCreate) -> Coupon:
    code = normalize_code(data.code)
    if not code:
        raise ValidationError("Coupon code is required")
    valid_from = to_local_naive(data.valid_from)
    valid_until = to_local_naive(data.valid_until)
    applicable_to = data.applicable_to.upper()
    _validate_rules(data.discount_type.value, data.discount_value, applicable_to, valid_from, valid_until)

    if db.query(Coupon.id).filter(Coupon.code == code).first() is not None:
        raise ConflictError("Coupon code already exists", details={"code": code})

    coupon = Coupon(
        code=code,
        discount_type=data.discount_type.value,
        discount_value=data.discount_value,
        max_discount=data.max_discount,
        min_amount=data.min_amount,
        usage_limit=data.usage_limit,
        applicable_to=applicable_to,
        valid_from=valid_from,
        valid_until=valid_until,
        is_active=data.is_active,
    )
    db.add(coupon)
    db.commit()
    db.refresh(coupon)
    logger.info("Created coupon %s", code)
    return coupon


def update_coupon(db: Session, coupon_id: UUID, data: CouponUpdate) -> Coupon:
    coupon = get_coupon(db, coupon_id)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("discount_type") is not None:
        changes["discount_type"] = changes["discount_type"].value
    if changes.get("applicable_to") is not None:
        changes["applicable_to"] = changes["applicable_to"].upper()
    for field in ("valid_from", "valid_until"):
        if changes.get(field) is not None:
            changes[field] = to_local_naive(changes[field])

    merged = {
        field: changes[field] if changes.get(field) is not None else getattr(coupon, field)
        for field in ("discount_type", "discount_value", "applicable_to", "valid_from", "valid_until")
    }
    _validate_rules(**merged)

    for field, value in changes.items():
        if value is None and field not in ("max_discount", "min_amount", "usage_limit"):
            continue
        setattr(coupon, field, value)
    db.commit()
    db.refresh(coupon)
    return coupon


def delete_coupon(db: Session, coupon_id: UUID) -> None:
    coupon = get_coupon(db, coupon_id)
    db.delete(coupon)
    db.commit()
