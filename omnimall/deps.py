"""FastAPI dependencies.

Process-wide clients live on app.state (created and closed by the
lifespan in omnimall.main). Per-request objects (session-bound gateway,
dispatcher) are built here and handed to services explicitly.
"""

from collections.abc import AsyncGenerator

from fastapi import Depends, Header, HTTPException, Request, status

from omnimall.services.changefeed import ChangeFeed
from omnimall.services.live_notifications import LiveNotificationBoard
from omnimall.services.notifications import NotificationDispatcher
from omnimall.services.sms import SendexaClient
from omnimall.settings import Settings, get_settings
from omnimall.stores.gateway import Gateway
from omnimall.stores.postgres import get_session
from omnimall.stores.redis import PageCache
from omnimall.stores.storage import StorageClient


async def get_gateway() -> AsyncGenerator[Gateway, None]:
    """Gateway bound to a fresh session for the duration of the request."""
    async with get_session() as session:
        yield Gateway(session)


def get_page_cache() -> PageCache:
    return PageCache()


def get_sms_client(request: Request) -> SendexaClient:
    return request.app.state.sms


def get_storage_client(request: Request) -> StorageClient:
    return request.app.state.storage


def get_change_feed(request: Request) -> ChangeFeed:
    return request.app.state.change_feed


def get_live_board(request: Request) -> LiveNotificationBoard:
    return request.app.state.live_board


def get_dispatcher(
    gateway: Gateway = Depends(get_gateway),
    sms: SendexaClient = Depends(get_sms_client),
    settings: Settings = Depends(get_settings),
) -> NotificationDispatcher:
    return NotificationDispatcher(
        gateway,
        sms,
        admin_email=settings.admin_email,
        dashboard_url=settings.dashboard_url,
    )


def require_admin(
    settings: Settings = Depends(get_settings),
    x_admin_key: str | None = Header(default=None),
) -> None:
    """Guard admin routes when ADMIN_API_KEY is configured."""
    if not settings.admin_api_key:
        return
    if x_admin_key != settings.admin_api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": {
                    "code": "UNAUTHORIZED",
                    "message": "Invalid or missing admin key",
                    "detail": None,
                }
            },
        )
