from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from academy.db.session import get_db
from academy.api.deps import get_current_admin_user, get_request_context
from academy.api.v1.public.catalog import serialize_item
from academy.core.context import RequestContext
from academy.models.catalog import OrderKind
from academy.models.user import User
from academy.schemas.catalog import CatalogItem as CatalogItemSchema, CatalogItemCreate, CatalogItemUpdate
from academy.services import catalog as catalog_service
from academy.services.flash_sales import get_active_flash_sale

router = APIRouter(prefix="/admin/catalog", tags=["Admin - Catalog"])


@router.get("/", response_model=List[CatalogItemSchema])
def list_items(
    kind: Optional[OrderKind] = Query(None),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
    admin: User = Depends(get_current_admin_user),
):
    sale = get_active_flash_sale(db, ctx.now)
    return [serialize_item(i, sale) for i in catalog_service.list_items(db, kind, published_only=False)]


@router.post("/", response_model=CatalogItemSchema, status_code=status.HTTP_201_CREATED)
def create_item(
    data: CatalogItemCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
    admin: User = Depends(get_current_admin_user),
):
    item = catalog_service.create_item(db, data)
    return serialize_item(item, get_active_flash_sale(db, ctx.now))


@router.patch("/{item_id}", response_model=CatalogItemSchema)
def update_item(
    item_id: UUID,
    data: CatalogItemUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
    admin: User = Depends(get_current_admin_user),
):
    item = catalog_service.update_item(db, item_id, data)
    return serialize_item(item, get_active_flash_sale(db, ctx.now))
