import uuid
from sqlalchemy import Column, String, Boolean, DateTime, func, Integer, Enum, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from academy.db.session import Base
from academy.models.catalog import ItemKind

class FlashSale(Base):
    __tablename__ = "flash_sales"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False, default="")
    subtitle = Column(String(255), nullable=True)
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    items = relationship("FlashSaleItem", back_populates="flash_sale", cascade="all, delete-orphan")

class FlashSaleItem(Base):
    __tablename__ = "flash_sale_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    flash_sale_id = Column(Uuid(as_uuid=True), ForeignKey("flash_sales.id"), nullable=False, index=True)
    item_kind = Column(Enum(ItemKind, name="item_kind"), nullable=False)
    item_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    discount_price = Column(Integer, nullable=True)

    flash_sale = relationship("FlashSale", back_populates="items")
