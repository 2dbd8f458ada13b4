import uuid
import enum
from sqlalchemy import Column, String, Boolean, DateTime, func, Integer, Uuid
from academy.db.session import Base


class DiscountType(str, enum.Enum):
    PERCENTAGE = "PERCENTAGE"
    FLAT = "FLAT"


class Coupon(Base):
    __tablename__ = "coupons"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    code = Column(String(50), unique=True, nullable=False, index=True)
    discount_type = Column(String(20), nullable=False, default=DiscountType.PERCENTAGE.value)
    discount_value = Column(Integer, nullable=False)  # percent, or minor units for FLAT
    max_discount = Column(Integer, nullable=True)
    min_amount = Column(Integer, nullable=True)
    usage_limit = Column(Integer, nullable=True)  # NULL = unlimited
    used_count = Column(Integer, nullable=False, default=0)
    applicable_to = Column(String(20), nullable=False, default="ALL")  # ALL or an OrderKind value
    valid_from = Column(DateTime, nullable=False)
    valid_until = Column(DateTime, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
