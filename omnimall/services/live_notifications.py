"""Live notifications: the single active site-wide banner.

Admin mutations commit, then publish a ChangeEvent on the
"live_notifications" table. LiveNotificationBoard subscribes to that
table and refetches the active notification on every event, so readers
always get the post-change state without polling.
"""

from collections.abc import Awaitable, Callable
import logging

from omnimall.errors import OmnimallError
from omnimall.models import LiveNotification
from omnimall.schemas.common import ActionResult
from omnimall.schemas.notifications import CreateLiveNotificationRequest, LiveNotificationOut
from omnimall.services.changefeed import ChangeEvent, ChangeFeed
from omnimall.stores.gateway import Gateway

logger = logging.getLogger("uvicorn.error")

LIVE_NOTIFICATIONS_TABLE = "live_notifications"

ActiveLoader = Callable[[], Awaitable[LiveNotificationOut | None]]


class LiveNotificationBoard:
    """Snapshot of the active notification, kept fresh by the change feed."""

    def __init__(self, loader: ActiveLoader):
        self._loader = loader
        self._current: LiveNotificationOut | None = None
        self.loaded = False

    def attach(self, feed: ChangeFeed) -> Callable[[], None]:
        """Refetch on every live_notifications change. Returns the unsubscriber."""
        return feed.subscribe(LIVE_NOTIFICATIONS_TABLE, self._on_change)

    async def _on_change(self, event: ChangeEvent) -> None:
        logger.info(f"Live notification {event.action} ({event.record_id}), refetching")
        await self.refresh()

    async def refresh(self) -> LiveNotificationOut | None:
        """Reload the active notification; keeps the previous snapshot on failure."""
        try:
            self._current = await self._loader()
        except (OmnimallError, RuntimeError) as e:
            logger.error(f"Failed to load active live notification: {e}")
            return self._current
        self.loaded = True
        return self._current

    async def current(self) -> LiveNotificationOut | None:
        if not self.loaded:
            return await self.refresh()
        return self._current


async def create_notification(
    *,
    gateway: Gateway,
    feed: ChangeFeed,
    request: CreateLiveNotificationRequest,
) -> LiveNotification:
    """Create an inactive notification.

    Raises:
        DependencyError: If the insert fails.
    """
    notification = await gateway.create_live_notification(
        LiveNotification(
            title=request.title,
            message=request.message,
            link=request.link or None,
            link_text=request.link_text or None,
            is_active=False,
        )
    )
    await gateway.commit()
    await feed.publish(ChangeEvent(LIVE_NOTIFICATIONS_TABLE, "insert", notification.id))
    return notification


async def set_notification_active(
    *,
    gateway: Gateway,
    feed: ChangeFeed,
    notification_id: str,
    is_active: bool,
) -> ActionResult:
    """Activate (deactivating every other) or deactivate a notification."""
    try:
        found = await gateway.set_live_notification_active(notification_id, is_active)
        if not found:
            await gateway.abort()
            return ActionResult.fail(f"Notification {notification_id} not found.", code="NOT_FOUND")
        await gateway.commit()
    except OmnimallError as e:
        logger.error(f"Failed to update notification {notification_id}: {e.message}")
        await gateway.abort()
        return ActionResult.from_error(e)

    await feed.publish(ChangeEvent(LIVE_NOTIFICATIONS_TABLE, "update", notification_id))
    return ActionResult.ok()


async def delete_notification(
    *,
    gateway: Gateway,
    feed: ChangeFeed,
    notification_id: str,
) -> ActionResult:
    try:
        found = await gateway.delete_live_notification(notification_id)
        if not found:
            return ActionResult.fail(f"Notification {notification_id} not found.", code="NOT_FOUND")
        await gateway.commit()
    except OmnimallError as e:
        logger.error(f"Failed to delete notification {notification_id}: {e.message}")
        await gateway.abort()
        return ActionResult.from_error(e)

    await feed.publish(ChangeEvent(LIVE_NOTIFICATIONS_TABLE, "delete", notification_id))
    return ActionResult.ok()
