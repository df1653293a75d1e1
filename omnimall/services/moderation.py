"""Admin moderation of listings and sellers.

Product status and the seller verified flag decide what the merchandising
assembler resolves, so every change here marks the home page stale.
"""

import logging

from omnimall.errors import OmnimallError
from omnimall.models.product import PRODUCT_APPROVED, PRODUCT_PENDING, PRODUCT_REJECTED
from omnimall.schemas.common import ActionResult
from omnimall.stores.gateway import Gateway
from omnimall.stores.redis import PageCache

logger = logging.getLogger("uvicorn.error")

PRODUCT_STATUSES = (PRODUCT_PENDING, PRODUCT_APPROVED, PRODUCT_REJECTED)

MODERATION_VIEW_PATHS = ("/", "/admin/products", "/admin/sellers")


async def set_product_status(
    *,
    gateway: Gateway,
    pages: PageCache,
    product_id: str,
    status: str,
) -> ActionResult:
    """Approve, reject or return a listing to pending."""
    if status not in PRODUCT_STATUSES:
        return ActionResult.fail(f"Unknown product status: {status}", code="VALIDATION_ERROR")

    try:
        found = await gateway.set_product_status(product_id, status)
        if not found:
            await gateway.abort()
            return ActionResult.fail(f"Product {product_id} not found.", code="NOT_FOUND")
        await gateway.commit()
    except OmnimallError as e:
        logger.error(f"Failed to set status of product {product_id}: {e.message}")
        await gateway.abort()
        return ActionResult.from_error(e)

    logger.info(f"Product {product_id} moderated: {status}")
    await pages.invalidate(*MODERATION_VIEW_PATHS)
    return ActionResult.ok()


async def revoke_seller(*, gateway: Gateway, pages: PageCache, seller_id: str) -> ActionResult:
    """Clear a seller's verified flag. Their listings stay as they are."""
    try:
        found = await gateway.update_profile(seller_id, {"is_verified_seller": False})
        if not found:
            await gateway.abort()
            return ActionResult.fail(f"Seller {seller_id} not found.", code="NOT_FOUND")
        await gateway.commit()
    except OmnimallError as e:
        logger.error(f"Failed to revoke seller {seller_id}: {e.message}")
        await gateway.abort()
        return ActionResult.from_error(e)

    logger.info(f"Seller privileges revoked for {seller_id}")
    await pages.invalidate(*MODERATION_VIEW_PATHS)
    return ActionResult.ok()
