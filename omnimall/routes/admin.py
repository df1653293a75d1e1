"""Admin endpoints for site content management.

Merchandising:
- GET /v1/admin/merchandising  - raw entries for the editor
- PUT /v1/admin/merchandising  - replace every section

Moderation:
- PATCH /v1/admin/products/{id}        - set listing status
- POST  /v1/admin/sellers/{id}/revoke  - clear verified seller flag

Live notifications:
- GET    /v1/admin/notifications
- POST   /v1/admin/notifications
- PATCH  /v1/admin/notifications/{id}  - activate / deactivate
- DELETE /v1/admin/notifications/{id}

Guarded by X-Admin-Key when ADMIN_API_KEY is set.
"""

from fastapi import APIRouter, Depends

from omnimall.deps import get_change_feed, get_gateway, get_page_cache
from omnimall.routes.responses import ensure_success
from omnimall.schemas import (
    ActionResult,
    CreateLiveNotificationRequest,
    LiveNotificationOut,
    MerchandisingEntryOut,
    ProductStatusRequest,
    ReplaceMerchandisingRequest,
    SetActiveRequest,
)
from omnimall.services import live_notifications, merchandising, moderation
from omnimall.services.changefeed import ChangeFeed
from omnimall.settings import Settings, get_settings
from omnimall.stores.gateway import Gateway
from omnimall.stores.redis import PageCache

router = APIRouter()


@router.get("/merchandising", response_model=list[MerchandisingEntryOut])
async def list_merchandising(
    gateway: Gateway = Depends(get_gateway),
) -> list[MerchandisingEntryOut]:
    """Every merchandising entry in position order."""
    entries = await merchandising.list_entries(gateway)
    return [MerchandisingEntryOut.model_validate(e) for e in entries]


@router.put("/merchandising", response_model=ActionResult)
async def replace_merchandising(
    request: ReplaceMerchandisingRequest,
    gateway: Gateway = Depends(get_gateway),
    pages: PageCache = Depends(get_page_cache),
    settings: Settings = Depends(get_settings),
) -> ActionResult:
    """Replace all merchandising sections.

    Sections missing from the request lose their entries.
    """
    result = await merchandising.replace_all(
        gateway=gateway,
        pages=pages,
        sections=request.sections,
        strict=settings.strict_merchandising_replace,
    )
    return ensure_success(result)


@router.get("/notifications", response_model=list[LiveNotificationOut])
async def list_notifications(
    gateway: Gateway = Depends(get_gateway),
) -> list[LiveNotificationOut]:
    notifications = await gateway.list_live_notifications()
    return [LiveNotificationOut.model_validate(n) for n in notifications]


@router.post("/notifications", response_model=LiveNotificationOut, status_code=201)
async def create_notification(
    request: CreateLiveNotificationRequest,
    gateway: Gateway = Depends(get_gateway),
    feed: ChangeFeed = Depends(get_change_feed),
) -> LiveNotificationOut:
    """Create a notification (inactive until activated)."""
    notification = await live_notifications.create_notification(
        gateway=gateway, feed=feed, request=request
    )
    return LiveNotificationOut.model_validate(notification)


@router.patch("/notifications/{notification_id}", response_model=ActionResult)
async def set_notification_active(
    notification_id: str,
    request: SetActiveRequest,
    gateway: Gateway = Depends(get_gateway),
    feed: ChangeFeed = Depends(get_change_feed),
) -> ActionResult:
    """Activate (deactivating all others) or deactivate a notification."""
    result = await live_notifications.set_notification_active(
        gateway=gateway,
        feed=feed,
        notification_id=notification_id,
        is_active=request.is_active,
    )
    return ensure_success(result)


@router.delete("/notifications/{notification_id}", response_model=ActionResult)
async def delete_notification(
    notification_id: str,
    gateway: Gateway = Depends(get_gateway),
    feed: ChangeFeed = Depends(get_change_feed),
) -> ActionResult:
    result = await live_notifications.delete_notification(
        gateway=gateway, feed=feed, notification_id=notification_id
    )
    return ensure_success(result)


@router.patch("/products/{product_id}", response_model=ActionResult)
async def set_product_status(
    product_id: str,
    request: ProductStatusRequest,
    gateway: Gateway = Depends(get_gateway),
    pages: PageCache = Depends(get_page_cache),
) -> ActionResult:
    """Approve, reject or return a listing to pending."""
    result = await moderation.set_product_status(
        gateway=gateway, pages=pages, product_id=product_id, status=request.status
    )
    return ensure_success(result)


@router.post("/sellers/{seller_id}/revoke", response_model=ActionResult)
async def revoke_seller(
    seller_id: str,
    gateway: Gateway = Depends(get_gateway),
    pages: PageCache = Depends(get_page_cache),
) -> ActionResult:
    result = await moderation.revoke_seller(gateway=gateway, pages=pages, seller_id=seller_id)
    return ensure_success(result)
