
from academy.db.session import Base
from academy.models.user import User
from academy.models.catalog import CatalogItem
from academy.models.slot import Slot
from academy.models.booking import Booking
from academy.models.flash_sale import FlashSale, FlashSaleItem
from academy.models.coupon import Coupon
from academy.models.order import Order
from academy.models.notification import Notification
