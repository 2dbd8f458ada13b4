"""
Flash sales: time-boxed per-item price overrides.

At most one sale is active at a time; activating one deactivates the rest.
"""

import logging
from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from academy.core.exceptions import NotFoundError, ValidationError
from academy.models.catalog import CatalogItem, ItemKind, OrderKind
from academy.models.flash_sale import FlashSale, FlashSaleItem
from academy.models.slot import Slot
from academy.schemas.flash_sale import FlashSaleCreate, FlashSaleItemInput, FlashSaleUpdate
from academy.services.pricing import percent_off_price
from academy.utils.timeslots import to_local_naive

logger = logging.getLogger(__name__)


def get_active_flash_sale(db: Session, now: datetime) -> Optional[FlashSale]:
    """The newest active sale whose window contains ``now``."""
    return (
        db.query(FlashSale)
        .options(selectinload(FlashSale.items))
        .filter(
            FlashSale.is_active == True,  # noqa: E712
            FlashSale.start_at <= now,
            FlashSale.end_at >= now,
        )
        .order_by(FlashSale.created_at.desc())
        .first()
    )


def get_flash_sale(db: Session, sale_id: UUID) -> FlashSale:
    sale = (
        db.query(FlashSale)
        .options(selectinload(FlashSale.items))
        .filter(FlashSale.id == sale_id)
        .first()
    )
    if not sale:
        raise NotFoundError("Flash sale not found")
    return sale


def flash_sales_query(db: Session, is_active: Optional[bool] = None):
    query = db.query(FlashSale).options(selectinload(FlashSale.items))
    if is_active is not None:
        query = query.filter(FlashSale.is_active == is_active)
    return query


def _load_referenced_item(db: Session, kind: ItemKind, item_id: UUID) -> Any:
    if kind == ItemKind.MOCK_INTERVIEW:
        return db.query(Slot).filter(Slot.id == item_id).first()
    return (
        db.query(CatalogItem)
        .filter(CatalogItem.id == item_id, CatalogItem.kind == OrderKind(kind.value))
        .first()
    )


def _build_items(
    db: Session,
    inputs: List[FlashSaleItemInput],
    discount_percent: Optional[int],
) -> List[FlashSaleItem]:
    if not inputs:
        raise ValidationError("A flash sale needs at least one item")
    if discount_percent is not None and not 0 < discount_percent <= 100:
        raise ValidationError("Discount percent must be between 1 and 100")

    items = []
    for entry in inputs:
        referenced = _load_referenced_item(db, entry.item_kind, entry.item_id)
        if referenced is None:
            raise NotFoundError(
                "One or more referenced items not found",
                details={"item_kind": entry.item_kind.value, "item_id": str(entry.item_id)},
            )

        discount_price = entry.discount_price
        if discount_price is None and discount_percent is not None:
            discount_price = percent_off_price(referenced.price, referenced.sale_price, discount_percent)
        if discount_price is None:
            raise ValidationError("Each item needs a discount price, or the sale a discount percent")
        if discount_price < 0:
            raise ValidationError("Discount price cannot be negative")

        items.append(FlashSaleItem(
            item_kind=entry.item_kind,
            item_id=entry.item_id,
            discount_price=discount_price,
        ))
    return items


def _deactivate_others(db: Session, keep_id: Optional[UUID] = None) -> None:
    query = db.query(FlashSale).filter(FlashSale.is_active == True)  # noqa: E712
    if keep_id is not None:
        query = query.filter(FlashSale.id != keep_id)
    count = query.update({FlashSale.is_active: False}, synchronize_session=False)
    if count:
        logger.info("Deactivated %d other flash sale(s)", count)


def create_flash_sale(db: Session, data: FlashSaleCreate) -> FlashSale:
    start_at = to_local_naive(data.start_at)
    end_at = to_local_naive(data.end_at)
    if end_at <= start_at:
        raise ValidationError("End date must be after start date")

    items = _build_items(db, data.items, data.discount_percent)
    if data.is_active:
        _deactivate_others(db)

    sale = FlashSale(
        title=data.title.strip(),
        subtitle=data.subtitle,
        start_at=start_at,
        end_at=end_at,
        is_active=data.is_active,
        items=items,
    )
    db.add(sale)
    db.commit()
    return get_flash_sale(db, sale.id)


def update_flash_sale(db: Session, sale_id: UUID, data: FlashSaleUpdate) -> FlashSale:
    sale = get_flash_sale(db, sale_id)
    changes = data.model_dump(exclude_unset=True, exclude={"items", "discount_percent"})
    for field in ("start_at", "end_at"):
        if changes.get(field) is not None:
            changes[field] = to_local_naive(changes[field])

    start_at = changes.get("start_at") or sale.start_at
    end_at = changes.get("end_at") or sale.end_at
    if end_at <= start_at:
        raise ValidationError("End date must be after start date")

    if data.items is not None:
        sale.items = _build_items(db, data.items, data.discount_percent)

    if changes.get("is_active") and not sale.is_active:
        _deactivate_others(db, keep_id=sale.id)

    for field, value in changes.items():
        if value is None and field != "subtitle":
            continue
        setattr(sale, field, value)

    db.commit()
    return get_flash_sale(db, sale.id)


def toggle_flash_sale(db: Session, sale_id: UUID) -> FlashSale:
    sale = get_flash_sale(db, sale_id)
    if not sale.is_active:
        _deactivate_others(db, keep_id=sale.id)
    sale.is_active = not sale.is_active
    db.commit()
    return get_flash_sale(db, sale.id)


def delete_flash_sale(db: Session, sale_id: UUID) -> None:
    sale = get_flash_sale(db, sale_id)
    db.delete(sale)
    db.commit()
