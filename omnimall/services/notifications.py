"""Order notification dispatcher.

Texts the seller when one of their orders is approved. Drop-shipped
products (supplier_id set) are fulfilled by the admin team, so the
message goes to the admin profile instead of the listing seller.

Nothing here raises into the caller: a missing recipient is logged and
skipped, a gateway failure is logged and returned as SmsResult.
"""

import logging

from omnimall.errors import OmnimallError
from omnimall.models import Order, Product
from omnimall.services.sms import SendexaClient, SmsResult
from omnimall.stores.gateway import Gateway

logger = logging.getLogger("uvicorn.error")


def format_order_message(order: Order, product: Product, dashboard_url: str) -> str:
    """SMS body for a new order."""
    return (
        "New Omnimall Order!\n"
        f"Buyer: {order.buyer_name}\n"
        f"Product: {product.name} (x{order.quantity})\n"
        f"Total: GHC {order.final_total:.2f}.\n"
        f"click here to open your dashboard: {dashboard_url} to check your orders"
    )


class NotificationDispatcher:
    """Resolves an order's recipient and sends the order SMS."""

    def __init__(
        self,
        gateway: Gateway,
        sms: SendexaClient,
        *,
        admin_email: str = "",
        dashboard_url: str = "",
    ):
        self.gateway = gateway
        self.sms = sms
        self.admin_email = admin_email
        self.dashboard_url = dashboard_url

    async def notify_order(self, order_id: str) -> SmsResult | None:
        """Send the order SMS.

        Returns:
            SmsResult of the send attempt, or None when there is no recipient.
        """
        try:
            order = await self.gateway.get_order_for_notification(order_id)
            if order is None or order.product is None:
                logger.error(f"Could not fetch order details for SMS: order {order_id} not found")
                return SmsResult(success=False, error="Order not found")

            phone = await self._recipient_phone(order.product)
        except OmnimallError as e:
            logger.error(f"Failed to handle SMS notification for order {order_id}: {e.message}")
            return SmsResult(success=False, error=e.message)

        if not phone:
            logger.warning(f"No phone number found for seller of product in order {order_id}. SMS not sent.")
            return None

        message = format_order_message(order, order.product, self.dashboard_url)
        return await self.sms.send_sms(phone, message)

    async def _recipient_phone(self, product: Product) -> str | None:
        if product.is_drop_shipped:
            if not self.admin_email:
                logger.warning("ADMIN_EMAIL is not set; cannot route drop-shipped order SMS")
                return None
            admin = await self.gateway.get_profile_by_email(self.admin_email)
            if admin is None:
                logger.error(f"Could not fetch admin profile {self.admin_email} for dropship SMS")
                return None
            return admin.phone_number

        seller = product.seller
        return seller.phone_number if seller is not None else None
