from academy.schemas.common import PaginatedResponse, ErrorResponse
from academy.schemas.user import User, UserCreate, AdminCreate, UserUpdate, Token
from academy.schemas.pricing import Pricing
from academy.schemas.slot import (
    Slot, SlotCreate, SlotUpdate, SlotAvailability, AdminSlot,
    SlotSummary, SlotDeleteResponse,
)
from academy.schemas.booking import Booking, BookingCreate, BookingStatusUpdate, BookingAccess
from academy.schemas.catalog import CatalogItem, CatalogItemCreate, CatalogItemUpdate
from academy.schemas.flash_sale import (
    FlashSale, FlashSaleCreate, FlashSaleUpdate, FlashSaleItem, FlashSaleItemInput,
    ActiveFlashSaleResponse,
)
from academy.schemas.coupon import Coupon, CouponCreate, CouponUpdate, CouponCheck, CouponQuote
from academy.schemas.order import Order, OrderCreate, OrderPaymentUpdate
from academy.schemas.notification import Notification, NotificationsRead, InboxCounts
