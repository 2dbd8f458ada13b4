import uuid
import enum
from sqlalchemy import Column, String, Boolean, DateTime, func, Integer, Enum, Uuid, CheckConstraint
from academy.db.session import Base


class OrderKind(str, enum.Enum):
    EBOOK = "EBOOK"
    BUNDLE = "BUNDLE"
    COURSE = "COURSE"
    WEBINAR = "WEBINAR"
    GUIDANCE = "GUIDANCE"
    MENTORSHIP = "MENTORSHIP"
    OFFLINE_BATCH = "OFFLINE_BATCH"


# Anything a flash sale entry can point at: every orderable kind plus interview slots
class ItemKind(str, enum.Enum):
    EBOOK = "EBOOK"
    BUNDLE = "BUNDLE"
    COURSE = "COURSE"
    WEBINAR = "WEBINAR"
    GUIDANCE = "GUIDANCE"
    MENTORSHIP = "MENTORSHIP"
    OFFLINE_BATCH = "OFFLINE_BATCH"
    MOCK_INTERVIEW = "MOCK_INTERVIEW"


class CatalogItem(Base):
    __tablename__ = "catalog_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    kind = Column(Enum(OrderKind, name="order_kind"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    price = Column(Integer, nullable=True)       # minor currency units
    sale_price = Column(Integer, nullable=True)
    currency = Column(String(3), default="INR", nullable=False)
    is_free = Column(Boolean, default=False, nullable=False)
    is_published = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    __table_args__ = (
        CheckConstraint("price IS NULL OR price >= 0", name="ck_catalog_price_non_negative"),
        CheckConstraint("sale_price IS NULL OR sale_price >= 0", name="ck_catalog_sale_price_non_negative"),
    )
