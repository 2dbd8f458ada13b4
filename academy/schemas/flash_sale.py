from typing import Optional, List
from pydantic import BaseModel, UUID4
from datetime import datetime

from academy.models.catalog import ItemKind


class FlashSaleItemInput(BaseModel):
    item_kind: ItemKind
    item_id: UUID4
    discount_price: Optional[int] = None   # falls back to the sale-wide discount_percent


class FlashSaleCreate(BaseModel):
    title: str = ""  # blank sales are shown under FLASH_SALE_DEFAULT_TITLE
    subtitle: Optional[str] = None
    start_at: datetime
    end_at: datetime
    is_active: bool = True
    discount_percent: Optional[int] = None
    items: List[FlashSaleItemInput]


class FlashSaleUpdate(BaseModel):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    is_active: Optional[bool] = None
    discount_percent: Optional[int] = None
    items: Optional[List[FlashSaleItemInput]] = None


class FlashSaleItem(BaseModel):
    item_kind: ItemKind
    item_id: UUID4
    discount_price: Optional[int] = None

    class Config:
        from_attributes = True


class FlashSale(BaseModel):
    id: UUID4
    title: str
    subtitle: Optional[str] = None
    start_at: datetime
    end_at: datetime
    is_active: bool
    created_at: Optional[datetime] = None
    items: List[FlashSaleItem] = []

    class Config:
        from_attributes = True


class ActiveFlashSaleResponse(BaseModel):
    flash_sale: Optional[FlashSale] = None
