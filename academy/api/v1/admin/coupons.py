from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from academy.db.session import get_db
from academy.api.deps import get_current_admin_user
from academy.models.user import User
from academy.schemas.coupon import Coupon as CouponSchema, CouponCreate, CouponUpdate
from academy.services import coupons as coupon_service

router = APIRouter(prefix="/admin/coupons", tags=["Admin - Coupons"])


@router.get("/", response_model=List[CouponSchema])
def list_coupons(
    is_active: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    return coupon_service.list_coupons(db, is_active)


@router.post("/", response_model=CouponSchema, status_code=status.HTTP_201_CREATED)
def create_coupon(
    data: CouponCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    return coupon_service.create_coupon(db, data)


@router.patch("/{coupon_id}", response_model=CouponSchema)
def update_coupon(
    coupon_id: UUID,
    data: CouponUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    return coupon_service.update_coupon(db, coupon_id, data)


@router.delete("/{coupon_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_coupon(
    coupon_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    coupon_service.delete_coupon(db, coupon_id)
