from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from academy.db.session import get_db
from academy.api.deps import get_request_context
from academy.core.context import RequestContext
from academy.schemas.flash_sale import ActiveFlashSaleResponse, FlashSale as FlashSaleSchema
from academy.services.flash_sales import get_active_flash_sale

router = APIRouter(prefix="/flash-sales", tags=["Flash Sales"])


@router.get("/active", response_model=ActiveFlashSaleResponse)
def active_flash_sale(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """The sale currently running, or ``{"flash_sale": null}``."""
    sale = get_active_flash_sale(db, ctx.now)
    return ActiveFlashSaleResponse(flash_sale=FlashSaleSchema.model_validate(sale) if sale else None)
