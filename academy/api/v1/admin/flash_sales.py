from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from academy.db.session import get_db
from academy.api.deps import get_current_admin_user
from academy.models.flash_sale import FlashSale
from academy.models.user import User
from academy.schemas.common import PaginatedResponse, paginate
from academy.schemas.flash_sale import FlashSale as FlashSaleSchema, FlashSaleCreate, FlashSaleUpdate
from academy.services import flash_sales as flash_sale_service

router = APIRouter(prefix="/admin/flash-sales", tags=["Admin - Flash Sales"])


@router.get("/", response_model=PaginatedResponse[FlashSaleSchema])
def list_flash_sales(
    is_active: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    query = flash_sale_service.flash_sales_query(db, is_active)
    return paginate(query, page, limit, order_by=[FlashSale.created_at.desc()])


@router.get("/{sale_id}", response_model=FlashSaleSchema)
def get_flash_sale(
    sale_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    return flash_sale_service.get_flash_sale(db, sale_id)


@router.post("/", response_model=FlashSaleSchema, status_code=status.HTTP_201_CREATED)
def create_flash_sale(
    data: FlashSaleCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    """Create a sale. Creating it active switches off whichever sale was running."""
    return flash_sale_service.create_flash_sale(db, data)


@router.patch("/{sale_id}", response_model=FlashSaleSchema)
def update_flash_sale(
    sale_id: UUID,
    data: FlashSaleUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    return flash_sale_service.update_flash_sale(db, sale_id, data)


@router.patch("/{sale_id}/toggle", response_model=FlashSaleSchema)
def toggle_flash_sale(
    sale_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    return flash_sale_service.toggle_flash_sale(db, sale_id)


@router.delete("/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_flash_sale(
    sale_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    flash_sale_service.delete_flash_sale(db, sale_id)
