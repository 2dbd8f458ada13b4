from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from academy.core.config import settings
from academy.core.exceptions import ConflictError, NotFoundError, ValidationError
from academy.models.catalog import CatalogItem, OrderKind
from academy.schemas.catalog import CatalogItemCreate, CatalogItemUpdate
from academy.utils.slug import generate_slug, make_unique_slug


def _validate_prices(price: Optional[int], sale_price: Optional[int]) -> None:
    if price is not None and price < 0:
        raise ValidationError("Price cannot be negative")
    if sale_price is not None and sale_price < 0:
        raise ValidationError("Sale price cannot be negative")


def list_items(db: Session, kind: Optional[OrderKind] = None, published_only: bool = True) -> List[CatalogItem]:
    query = db.query(CatalogItem)
    if kind:
        query = query.filter(CatalogItem.kind == kind)
    if published_only:
        query = query.filter(CatalogItem.is_published == True)  # noqa: E712
    return query.order_by(CatalogItem.title).all()


def get_item(db: Session, item_id: UUID, published_only: bool = True) -> CatalogItem:
    query = db.query(CatalogItem).filter(CatalogItem.id == item_id)
    if published_only:
        query = query.filter(CatalogItem.is_published == True)  # noqa: E712
    item = query.first()
    if not item:
        raise NotFoundError("Item not found")
    return item


def create_item(db: Session, data: CatalogItemCreate) -> CatalogItem:
    _validate_prices(data.price, data.sale_price)
    if not data.title.strip():
        raise ValidationError("Title is required")

    if data.slug:
        slug = generate_slug(data.slug)
        if db.query(CatalogItem.id).filter(CatalogItem.slug == slug).first() is not None:
            raise ConflictError("Slug already in use", details={"slug": slug})
    else:
        slug = make_unique_slug(db, data.title)

    item = CatalogItem(
        kind=data.kind,
        title=data.title.strip(),
        slug=slug,
        price=data.price,
        sale_price=data.sale_price,
        currency=data.currency or settings.DEFAULT_CURRENCY,
        is_free=data.is_free,
        is_published=data.is_published,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def update_item(db: Session, item_id: UUID, data: CatalogItemUpdate) -> CatalogItem:
    item = get_item(db, item_id, published_only=False)
    changes = data.model_dump(exclude_unset=True)
    _validate_prices(changes.get("price"), changes.get("sale_price"))
    for field, value in changes.items():
        if field in ("title", "currency", "is_free", "is_published") and value is None:
            continue
        setattr(item, field, value)
    db.commit()
    db.refresh(item)
    return item
