"""
Effective-price resolution for catalog items and interview slots.

Precedence, highest first: flash-sale entry price, item sale price, item
base price, zero. All amounts are integers in minor currency units.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from academy.core.config import settings


@dataclass(frozen=True)
class PricingResult:
    is_free: bool
    price: int
    sale_price: Optional[int]
    effective_price: int
    original_price: int
    has_flash_sale: bool = False
    flash_sale_title: Optional[str] = None
    discount_percent: int = 0

    @property
    def has_discount(self) -> bool:
        return self.effective_price < self.original_price


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _clamp(amount: Optional[int]) -> Optional[int]:
    """Missing stays missing; negatives become 0."""
    if amount is None:
        return None
    return max(0, int(amount))


def _first(*amounts: Optional[int]) -> int:
    for amount in amounts:
        if amount is not None:
            return amount
    return 0


def discount_percent(original_price: int, effective_price: int) -> int:
    """Whole-number percentage off, 0 when there is nothing to discount."""
    if original_price <= 0 or effective_price >= original_price:
        return 0
    return round_half_up(Decimal(original_price - effective_price) * 100 / Decimal(original_price))


def _kind_value(kind: Any) -> str:
    return getattr(kind, "value", kind)


def find_flash_sale_entry(flash_sale: Any, item_kind: Any, item_id: Any) -> Optional[Any]:
    if flash_sale is None:
        return None
    for entry in flash_sale.items:
        if _kind_value(entry.item_kind) == _kind_value(item_kind) and str(entry.item_id) == str(item_id):
            return entry
    return None


def resolve_pricing(item: Any, active_flash_sale: Any = None) -> PricingResult:
    """Resolve the price a buyer pays for ``item``.

    ``item`` needs ``kind``, ``id``, ``price``, ``sale_price`` and
    ``is_free``; ``active_flash_sale`` needs ``title`` and ``items`` whose
    entries carry ``item_kind``, ``item_id`` and ``discount_price``.
    """
    if item.is_free:
        return PricingResult(
            is_free=True,
            price=0,
            sale_price=None,
            effective_price=0,
            original_price=0,
        )

    base = _clamp(item.price)
    sale = _clamp(item.sale_price)

    entry = find_flash_sale_entry(active_flash_sale, item.kind, item.id)
    if entry is not None:
        effective = _first(_clamp(entry.discount_price), sale, base)
        original = _first(sale, base)
        return PricingResult(
            is_free=False,
            price=base or 0,
            sale_price=sale,
            effective_price=effective,
            original_price=original,
            has_flash_sale=True,
            flash_sale_title=active_flash_sale.title or settings.FLASH_SALE_DEFAULT_TITLE,
            discount_percent=discount_percent(original, effective),
        )

    effective = _first(sale, base)
    original = base or 0
    return PricingResult(
        is_free=False,
        price=original,
        sale_price=sale,
        effective_price=effective,
        original_price=original,
        discount_percent=discount_percent(original, effective),
    )


def percent_off_price(price: Optional[int], sale_price: Optional[int], percent: int) -> int:
    """Price after ``percent`` off the sale price when positive, else the base price."""
    basis = sale_price if sale_price and sale_price > 0 else (price or 0)
    return max(0, round_half_up(Decimal(basis) * (Decimal(100) - Decimal(percent)) / Decimal(100)))
