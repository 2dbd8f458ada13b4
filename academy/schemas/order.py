from typing import Optional
from pydantic import BaseModel, UUID4
from datetime import datetime

from academy.models.catalog import OrderKind
from academy.models.order import PaymentStatus


class OrderCreate(BaseModel):
    item_id: UUID4
    coupon_code: Optional[str] = None


# Admin payment reconciliation
class OrderPaymentUpdate(BaseModel):
    payment_status: PaymentStatus
    payment_id: Optional[str] = None


# Uniform order view, whatever kind was purchased
class Order(BaseModel):
    id: UUID4
    order_number: str
    kind: OrderKind
    status: str
    payment_status: str
    total_amount: int
    discount_amount: int
    final_amount: int
    coupon_code: Optional[str] = None
    created_at: Optional[datetime] = None
    item_id: UUID4

    class Config:
        from_attributes = True
