from typing import Optional
from pydantic import BaseModel

from academy.services.pricing import PricingResult


class Pricing(BaseModel):
    is_free: bool
    price: int
    sale_price: Optional[int] = None
    effective_price: int
    original_price: int
    has_flash_sale: bool = False
    flash_sale_title: Optional[str] = None
    discount_percent: int = 0
    has_discount: bool = False

    @classmethod
    def from_result(cls, result: PricingResult) -> "Pricing":
        return cls(
            is_free=result.is_free,
            price=result.price,
            sale_price=result.sale_price,
            effective_price=result.effective_price,
            original_price=result.original_price,
            has_flash_sale=result.has_flash_sale,
            flash_sale_title=result.flash_sale_title,
            discount_percent=result.discount_percent,
            has_discount=result.has_discount,
        )
