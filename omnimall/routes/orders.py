"""Order fulfillment endpoints.

POST /v1/orders/{orderId}/approve - approve and deduct stock
POST /v1/orders/{orderId}/reject  - reject (stock untouched)
"""

from fastapi import APIRouter, Depends, Path

from omnimall.deps import get_dispatcher, get_gateway, get_page_cache
from omnimall.routes.responses import ensure_success
from omnimall.schemas import ActionResult, ApproveOrderRequest
from omnimall.services.notifications import NotificationDispatcher
from omnimall.services.orders import approve_order, reject_order
from omnimall.settings import Settings, get_settings
from omnimall.stores.gateway import Gateway
from omnimall.stores.redis import PageCache

router = APIRouter()

OrderId = Path(description="Order ID", min_length=1, max_length=36)


@router.post("/{order_id}/approve", response_model=ActionResult)
async def approve(
    request: ApproveOrderRequest,
    order_id: str = OrderId,
    gateway: Gateway = Depends(get_gateway),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    pages: PageCache = Depends(get_page_cache),
    settings: Settings = Depends(get_settings),
) -> ActionResult:
    """Approve an order and deduct stock.

    A 502 with the order still approved means only the stock update failed.
    """
    result = await approve_order(
        gateway=gateway,
        dispatcher=dispatcher,
        pages=pages,
        order_id=order_id,
        product_id=request.product_id,
        quantity=request.quantity,
        strict=settings.strict_order_approval,
    )
    return ensure_success(result)


@router.post("/{order_id}/reject", response_model=ActionResult)
async def reject(
    order_id: str = OrderId,
    gateway: Gateway = Depends(get_gateway),
    pages: PageCache = Depends(get_page_cache),
) -> ActionResult:
    """Reject an order."""
    result = await reject_order(gateway=gateway, pages=pages, order_id=order_id)
    return ensure_success(result)
