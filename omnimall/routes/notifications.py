"""Public live notification endpoint.

GET /v1/notifications/live - the active banner, or null.
"""

from fastapi import APIRouter, Depends

from omnimall.deps import get_live_board
from omnimall.schemas import LiveNotificationOut
from omnimall.services.live_notifications import LiveNotificationBoard

router = APIRouter()


@router.get("/live", response_model=LiveNotificationOut | None)
async def get_live_notification(
    board: LiveNotificationBoard = Depends(get_live_board),
) -> LiveNotificationOut | None:
    """Currently active notification, refreshed whenever an admin changes one."""
    return await board.current()
