import uuid
import enum
from sqlalchemy import Column, String, DateTime, func, Integer, Enum, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from academy.db.session import Base
from academy.models.catalog import OrderKind


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


class PaymentStatus(str, enum.Enum):
    CREATED = "CREATED"
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    FREE = "FREE"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_number = Column(String(40), unique=True, nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    item_id = Column(Uuid(as_uuid=True), ForeignKey("catalog_items.id"), nullable=False)
    kind = Column(Enum(OrderKind, name="order_kind"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value, index=True)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    total_amount = Column(Integer, nullable=False, default=0)
    discount_amount = Column(Integer, nullable=False, default=0)
    final_amount = Column(Integer, nullable=False, default=0)
    coupon_code = Column(String(50), nullable=True)
    payment_id = Column(String(100), nullable=True)  # gateway reference, set by admin reconciliation
    flash_sale_id = Column(Uuid(as_uuid=True), ForeignKey("flash_sales.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    user = relationship("User")
    item = relationship("CatalogItem")
