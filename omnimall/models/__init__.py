"""SQLAlchemy ORM models.

Models represent database tables:
- profiles: Users, keyed by the auth user id
- products: Listings (products and services) with stock
- orders: Purchases awaiting seller approval
- merchandising: Admin-curated home page placements
- live_notifications: Site-wide banner messages
"""

from omnimall.models.profile import Profile
from omnimall.models.product import Product
from omnimall.models.order import Order
from omnimall.models.merchandising import MerchandisingEntry
from omnimall.models.live_notification import LiveNotification

__all__ = ["Profile", "Product", "Order", "MerchandisingEntry", "LiveNotification"]
