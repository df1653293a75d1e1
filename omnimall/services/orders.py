"""Order fulfillment workflow.

approve_order runs two ordered steps:
1. Mark the order approved
2. Atomically decrement the product's stock in the database

If step 2 fails the order stays approved and the caller gets a failure
result; inventory is reconciled by hand. This partial outcome is the
default policy. With strict=True the approval is rolled back instead.

After both steps succeed the seller is texted. The SMS outcome never
changes the returned result.
"""

import logging

from omnimall.errors import OmnimallError
from omnimall.models.order import ORDER_APPROVED, ORDER_REJECTED
from omnimall.schemas.common import ActionResult
from omnimall.services.notifications import NotificationDispatcher
from omnimall.stores.gateway import Gateway
from omnimall.stores.redis import PageCache

logger = logging.getLogger("uvicorn.error")

ORDER_VIEW_PATHS = ("/profile", "/admin/orders")


async def approve_order(
    *,
    gateway: Gateway,
    dispatcher: NotificationDispatcher,
    pages: PageCache,
    order_id: str,
    product_id: str,
    quantity: int,
    strict: bool = False,
) -> ActionResult:
    """Approve an order and take its quantity out of stock.

    Args:
        gateway: Table gateway bound to the request's session.
        dispatcher: Sends the seller SMS after a successful approval.
        pages: Page cache to mark order views stale.
        order_id: Order to approve.
        product_id: Product the order references.
        quantity: Units ordered.
        strict: Revert the approval when the stock decrement fails.

    Returns:
        ActionResult; success=False with the order still approved when only
        the decrement failed (unless strict).
    """
    if quantity < 1:
        return ActionResult.fail("Quantity must be at least 1.", code="VALIDATION_ERROR")

    try:
        found = await gateway.set_order_status(order_id, ORDER_APPROVED)
        if not found:
            await gateway.abort()
            return ActionResult.fail(f"Order {order_id} not found.", code="NOT_FOUND")
        if not strict:
            # Persist the approval on its own so a failed decrement cannot undo it.
            await gateway.commit()
    except OmnimallError as e:
        logger.error(f"Failed to approve order {order_id}: {e.message}")
        return ActionResult.from_error(e)

    try:
        decremented = await gateway.decrement_product_quantity(product_id, quantity)
        reason = None if decremented else "insufficient stock or product not found"
    except OmnimallError as e:
        decremented = False
        reason = e.message

    if not decremented:
        logger.error(f"Failed to decrement stock for product {product_id} (order {order_id}): {reason}")
        await gateway.abort()
        if strict:
            logger.info(f"Strict approval: order {order_id} left pending")
        else:
            logger.warning(
                f"Order {order_id} is approved but stock for product {product_id} was not updated; "
                "manual inventory reconciliation needed"
            )
        return ActionResult.fail(f"Stock could not be updated: {reason}")

    try:
        await gateway.commit()
    except OmnimallError as e:
        logger.error(f"Failed to commit stock update for order {order_id}: {e.message}")
        return ActionResult.from_error(e)

    await pages.invalidate(*ORDER_VIEW_PATHS)

    try:
        sms = await dispatcher.notify_order(order_id)
        if sms is not None and not sms.success:
            logger.warning(f"Order {order_id} approved but seller SMS failed: {sms.error}")
    except Exception:
        logger.exception(f"Seller notification crashed for order {order_id}")

    logger.info(f"Order {order_id} approved, {quantity} unit(s) of {product_id} deducted")
    return ActionResult.ok()


async def reject_order(*, gateway: Gateway, pages: PageCache, order_id: str) -> ActionResult:
    """Mark an order rejected. Stock is untouched."""
    try:
        found = await gateway.set_order_status(order_id, ORDER_REJECTED)
        if not found:
            return ActionResult.fail(f"Order {order_id} not found.", code="NOT_FOUND")
        await gateway.commit()
    except OmnimallError as e:
        logger.error(f"Failed to reject order {order_id}: {e.message}")
        return ActionResult.from_error(e)

    await pages.invalidate(*ORDER_VIEW_PATHS)
    return ActionResult.ok()
