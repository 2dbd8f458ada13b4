from typing import Optional
from pydantic import BaseModel, UUID4
from datetime import datetime

from academy.models.coupon import DiscountType


class CouponCreate(BaseModel):
    code: str
    discount_type: DiscountType = DiscountType.PERCENTAGE
    discount_value: int
    max_discount: Optional[int] = None
    min_amount: Optional[int] = None
    usage_limit: Optional[int] = None      # None = unlimited
    applicable_to: str = "ALL"             # ALL or an order kind
    valid_from: datetime
    valid_until: datetime
    is_active: bool = True


class CouponUpdate(BaseModel):
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[int] = None
    max_discount: Optional[int] = None
    min_amount: Optional[int] = None
    usage_limit: Optional[int] = None
    applicable_to: Optional[str] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: Optional[bool] = None


class Coupon(BaseModel):
    id: UUID4
    code: str
    discount_type: DiscountType
    discount_value: int
    max_discount: Optional[int] = None
    min_amount: Optional[int] = None
    usage_limit: Optional[int] = None
    used_count: int
    applicable_to: str
    valid_from: datetime
    valid_until: datetime
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Preview for POST /coupons/validate
class CouponCheck(BaseModel):
    code: str
    item_id: UUID4


class CouponQuote(BaseModel):
    code: str
    amount: int
    discount_amount: int
    final_amount: int
