"""Change feed: subscribe to change events on a table, react with a refetch.

Transport-independent observer. Mutating code publishes a ChangeEvent
after its transaction commits; subscribers receive it in subscription
order. A failing subscriber is logged and does not stop the others.
"""

from collections import defaultdict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
import inspect
import logging

logger = logging.getLogger("uvicorn.error")

ChangeCallback = Callable[["ChangeEvent"], Awaitable[None] | None]


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    action: str  # insert, update, delete
    record_id: str | None = None


class ChangeFeed:
    """In-process observer registry keyed by table name."""

    def __init__(self) -> None:
        self._subscribers: defaultdict[str, list[ChangeCallback]] = defaultdict(list)

    def subscribe(self, table: str, callback: ChangeCallback) -> Callable[[], None]:
        """Register a callback. Returns a function that unsubscribes it."""
        self._subscribers[table].append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers[table]
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    async def publish(self, event: ChangeEvent) -> None:
        for callback in list(self._subscribers.get(event.table, ())):
            try:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(f"Change subscriber failed for {event.table}:{event.action}")
