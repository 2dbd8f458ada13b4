from fastapi import APIRouter

# Auth
from academy.api.v1.public.auth import router as auth_router

# Public: profile & notifications
from academy.api.v1.public.me import router as me_router

# Public: mock interviews, catalog, pricing
from academy.api.v1.public.mock_interviews import router as mock_interviews_router
from academy.api.v1.public.catalog import router as catalog_router
from academy.api.v1.public.flash_sales import router as flash_sales_router
from academy.api.v1.public.orders import router as orders_router

# Admin
from academy.api.v1.admin.mock_interviews import router as admin_mock_interviews_router
from academy.api.v1.admin.catalog import router as admin_catalog_router
from academy.api.v1.admin.flash_sales import router as admin_flash_sales_router
from academy.api.v1.admin.coupons import router as admin_coupons_router
from academy.api.v1.admin.orders import router as admin_orders_router

api_router = APIRouter()

# --- Auth ---
api_router.include_router(auth_router)

# --- Public ---
api_router.include_router(me_router)
api_router.include_router(mock_interviews_router)
api_router.include_router(catalog_router)
api_router.include_router(flash_sales_router)
api_router.include_router(orders_router)

# --- Admin ---
api_router.include_router(admin_mock_interviews_router)
api_router.include_router(admin_catalog_router)
api_router.include_router(admin_flash_sales_router)
api_router.include_router(admin_coupons_router)
api_router.include_router(admin_orders_router)
