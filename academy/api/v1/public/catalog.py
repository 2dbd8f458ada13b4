from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from academy.db.session import get_db
from academy.api.deps import get_request_context
from academy.core.context import RequestContext
from academy.models.catalog import CatalogItem, OrderKind
from academy.schemas.catalog import CatalogItem as CatalogItemSchema
from academy.schemas.pricing import Pricing
from academy.services import catalog as catalog_service
from academy.services.flash_sales import get_active_flash_sale
from academy.services.pricing import resolve_pricing

router = APIRouter(prefix="/catalog", tags=["Catalog"])


def serialize_item(item: CatalogItem, flash_sale=None) -> CatalogItemSchema:
    return CatalogItemSchema(
        id=item.id,
        kind=item.kind,
        title=item.title,
        slug=item.slug,
        price=item.price,
        sale_price=item.sale_price,
        currency=item.currency,
        is_free=item.is_free,
        is_published=item.is_published,
        created_at=item.created_at,
        pricing=Pricing.from_result(resolve_pricing(item, flash_sale)),
    )


@router.get("/", response_model=List[CatalogItemSchema])
def list_items(
    kind: Optional[OrderKind] = Query(None),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Published items with their current effective price."""
    sale = get_active_flash_sale(db, ctx.now)
    return [serialize_item(i, sale) for i in catalog_service.list_items(db, kind)]


@router.get("/{item_id}", response_model=CatalogItemSchema)
def get_item(
    item_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    item = catalog_service.get_item(db, item_id)
    return serialize_item(item, get_active_flash_sale(db, ctx.now))
