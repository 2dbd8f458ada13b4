from academy.models.user import User
from academy.models.catalog import CatalogItem, ItemKind, OrderKind
from academy.models.slot import Slot
from academy.models.booking import Booking, BookingStatus
from academy.models.flash_sale import FlashSale, FlashSaleItem
from academy.models.coupon import Coupon, DiscountType
from academy.models.order import Order, OrderStatus, PaymentStatus
from academy.models.notification import Notification
