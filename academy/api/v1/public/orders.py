from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from academy.db.session import get_db
from academy.api.deps import get_user_context
from academy.core.context import RequestContext
from academy.schemas.coupon import CouponCheck, CouponQuote
from academy.schemas.order import Order as OrderSchema, OrderCreate
from academy.services import orders as order_service
from academy.services.catalog import get_item
from academy.services.coupons import apply_coupon, find_coupon
from academy.services.flash_sales import get_active_flash_sale
from academy.services.pricing import resolve_pricing

router = APIRouter(tags=["Orders"])


@router.post("/orders", response_model=OrderSchema, status_code=status.HTTP_201_CREATED)
def create_order(
    data: OrderCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_user_context),
):
    """Check out one item. Zero-amount orders complete immediately."""
    order = order_service.create_order(db, ctx, data)
    return order_service.normalize_order(order_service.record_from_model(order))


@router.get("/orders/mine", response_model=List[OrderSchema])
def my_orders(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_user_context),
):
    """All of the user's orders, newest first, in one shape."""
    return order_service.list_my_orders(db, ctx)


@router.post("/coupons/validate", response_model=CouponQuote)
def validate_coupon(
    data: CouponCheck,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_user_context),
):
    """Preview a coupon against an item's current price without redeeming it."""
    item = get_item(db, data.item_id)
    amount = resolve_pricing(item, get_active_flash_sale(db, ctx.now)).effective_price
    coupon = find_coupon(db, data.code)
    discount = apply_coupon(coupon, amount, item.kind, ctx.now)
    return CouponQuote(
        code=coupon.code,
        amount=amount,
        discount_amount=discount,
        final_amount=amount - discount,
    )
