from typing import Optional
from pydantic import BaseModel, UUID4
from datetime import datetime

from academy.models.catalog import OrderKind
from academy.schemas.pricing import Pricing


class CatalogItemCreate(BaseModel):
    kind: OrderKind
    title: str
    slug: Optional[str] = None     # generated from title when omitted
    price: Optional[int] = None
    sale_price: Optional[int] = None
    currency: Optional[str] = None
    is_free: bool = False
    is_published: bool = True


class CatalogItemUpdate(BaseModel):
    title: Optional[str] = None
    price: Optional[int] = None
    sale_price: Optional[int] = None
    currency: Optional[str] = None
    is_free: Optional[bool] = None
    is_published: Optional[bool] = None


class CatalogItem(BaseModel):
    id: UUID4
    kind: OrderKind
    title: str
    slug: str
    price: Optional[int] = None
    sale_price: Optional[int] = None
    currency: str
    is_free: bool
    is_published: bool
    created_at: Optional[datetime] = None
    pricing: Pricing
