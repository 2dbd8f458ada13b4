from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from academy.db.session import get_db
from academy.api.deps import get_current_admin_user
from academy.models.catalog import OrderKind
from academy.models.order import Order
from academy.models.user import User
from academy.schemas.common import PaginatedResponse, paginate
from academy.schemas.order import Order as OrderSchema, OrderPaymentUpdate
from academy.services import orders as order_service

router = APIRouter(prefix="/admin/orders", tags=["Admin - Orders"])


def _serialize(order: Order):
    return order_service.normalize_order(order_service.record_from_model(order))


@router.get("/", response_model=PaginatedResponse[OrderSchema])
def list_orders(
    kind: Optional[OrderKind] = Query(None),
    status: Optional[str] = Query(None, description="PENDING | COMPLETED"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    query = order_service.orders_query(db, kind, status)
    return paginate(query, page, limit, order_by=[Order.created_at.desc()], serialize=_serialize)


@router.patch("/{order_id}/payment", response_model=OrderSchema)
def update_payment(
    order_id: UUID,
    data: OrderPaymentUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    """Record a payment outcome; the order completes once paid."""
    return _serialize(order_service.update_payment(db, order_id, data))
