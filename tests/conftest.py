"""Shared fixtures: in-memory stand-ins for the gateway, page cache, storage and SMS.

FakeGateway applies writes to a shared FakeDatabase immediately and keeps
undo steps until commit, so rollback behaves like an aborted transaction.
Every operation yields to the event loop first, which lets concurrent
workflows interleave between steps the way real database calls do.
"""

import asyncio
from typing import Any
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from omnimall.errors import DependencyError, NotConfiguredError
from omnimall.models import LiveNotification, MerchandisingEntry, Order, Product, Profile
from omnimall.services.sms import SmsResult
from omnimall.stores.gateway import Gateway


class FakeDatabase:
    def __init__(self) -> None:
        self.orders: dict[str, Order] = {}
        self.products: dict[str, Product] = {}
        self.profiles: dict[str, Profile] = {}
        self.merchandising: list[MerchandisingEntry] = []
        self.notifications: dict[str, LiveNotification] = {}
        self.queries: list[str] = []
        self._next_entry_id = 1

    def add_profile(self, id: str, **kwargs: Any) -> Profile:
        values = {
            "email": None,
            "display_name": id.title(),
            "phone_number": None,
            "location": None,
            "avatar_url": None,
            "is_verified_seller": False,
        }
        values.update(kwargs)
        profile = Profile(id=id, **values)
        self.profiles[id] = profile
        return profile

    def add_product(self, id: str, **kwargs: Any) -> Product:
        values = {
            "seller_id": "seller-1",
            "supplier_id": None,
            "name": f"Product {id}",
            "price": 10.0,
            "category": "electronics",
            "location": "Legon",
            "image_urls": [],
            "quantity": 5,
            "is_unlimited": False,
            "status": "approved",
        }
        values.update(kwargs)
        product = Product(id=id, **values)
        self.products[id] = product
        return product

    def add_order(self, id: str, **kwargs: Any) -> Order:
        values = {
            "product_id": "p1",
            "quantity": 1,
            "buyer_name": "Ama Mensah",
            "final_total": 10.0,
            "status": "pending",
        }
        values.update(kwargs)
        order = Order(id=id, **values)
        self.orders[id] = order
        return order

    def add_entry(self, section_id: str, item_id: str, item_type: str, position: int) -> MerchandisingEntry:
        entry = MerchandisingEntry(
            id=self._next_entry_id,
            section_id=section_id,
            item_id=item_id,
            item_type=item_type,
            position=position,
        )
        self._next_entry_id += 1
        self.merchandising.append(entry)
        return entry


class FakeGateway:
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db
        self.fail_on: set[str] = set()
        self.commits = 0
        self.rollbacks = 0
        self._undo: list[Any] = []

    async def _enter(self, op: str) -> None:
        await asyncio.sleep(0)
        self.db.queries.append(op)
        if op in self.fail_on:
            raise DependencyError(f"{op} failed")

    async def commit(self) -> None:
        await self._enter("commit")
        self._undo.clear()
        self.commits += 1

    async def rollback(self) -> None:
        if "rollback" in self.fail_on:
            raise DependencyError("Database rollback failed: OperationalError")
        for undo in reversed(self._undo):
            undo()
        self._undo.clear()
        self.rollbacks += 1

    async def abort(self) -> None:
        try:
            await self.rollback()
        except DependencyError:
            pass

    async def set_order_status(self, order_id: str, status: str) -> bool:
        await self._enter("set_order_status")
        order = self.db.orders.get(order_id)
        if order is None:
            return False
        previous = order.status
        order.status = status
        self._undo.append(lambda: setattr(order, "status", previous))
        return True

    async def get_order_for_notification(self, order_id: str) -> Order | None:
        await self._enter("get_order_for_notification")
        order = self.db.orders.get(order_id)
        if order is None:
            return None
        product = self.db.products.get(order.product_id)
        if product is not None:
            product.seller = self.db.profiles.get(product.seller_id)
        order.product = product
        return order

    async def decrement_product_quantity(self, product_id: str, quantity: int) -> bool:
        await self._enter("decrement_product_quantity")
        product = self.db.products.get(product_id)
        if product is None:
            return False
        if product.is_unlimited:
            return True
        if product.quantity is None or product.quantity < quantity:
            return False
        product.quantity -= quantity
        self._undo.append(lambda: setattr(product, "quantity", product.quantity + quantity))
        return True

    async def set_product_status(self, product_id: str, status: str) -> bool:
        await self._enter("set_product_status")
        product = self.db.products.get(product_id)
        if product is None:
            return False
        previous = product.status
        product.status = status
        self._undo.append(lambda: setattr(product, "status", previous))
        return True

    async def get_approved_products(self, product_ids: list[str]) -> list[Product]:
        await self._enter("get_approved_products")
        return [
            p for p in self.db.products.values() if p.id in product_ids and p.status == "approved"
        ]

    async def get_verified_sellers(self, profile_ids: list[str]) -> list[Profile]:
        await self._enter("get_verified_sellers")
        return [
            p for p in self.db.profiles.values() if p.id in profile_ids and p.is_verified_seller
        ]

    async def get_profile_by_email(self, email: str) -> Profile | None:
        await self._enter("get_profile_by_email")
        return next((p for p in self.db.profiles.values() if p.email == email), None)

    async def update_profile(self, profile_id: str, values: dict[str, Any]) -> bool:
        await self._enter("update_profile")
        profile = self.db.profiles.get(profile_id)
        if profile is None:
            return False
        previous = {key: getattr(profile, key) for key in values}
        for key, value in values.items():
            setattr(profile, key, value)

        def undo() -> None:
            for key, value in previous.items():
                setattr(profile, key, value)

        self._undo.append(undo)
        return True

    async def list_merchandising_entries(self) -> list[MerchandisingEntry]:
        await self._enter("list_merchandising_entries")
        return sorted(self.db.merchandising, key=lambda e: e.position)

    async def delete_all_merchandising_entries(self) -> None:
        await self._enter("delete_all_merchandising_entries")
        previous = list(self.db.merchandising)
        self.db.merchandising.clear()
        self._undo.append(lambda: self.db.merchandising.extend(previous))

    async def insert_merchandising_entries(self, entries: list[MerchandisingEntry]) -> None:
        await self._enter("insert_merchandising_entries")
        count = len(entries)
        self.db.merchandising.extend(entries)
        self._undo.append(lambda: self.db.merchandising.__delitem__(slice(-count, None)))

    async def list_live_notifications(self) -> list[LiveNotification]:
        await self._enter("list_live_notifications")
        return list(self.db.notifications.values())

    async def get_active_live_notification(self) -> LiveNotification | None:
        await self._enter("get_active_live_notification")
        return next((n for n in self.db.notifications.values() if n.is_active), None)

    async def create_live_notification(self, notification: LiveNotification) -> LiveNotification:
        await self._enter("create_live_notification")
        if notification.id is None:
            notification.id = str(uuid4())
        self.db.notifications[notification.id] = notification
        return notification

    async def set_live_notification_active(self, notification_id: str, is_active: bool) -> bool:
        await self._enter("set_live_notification_active")
        target = self.db.notifications.get(notification_id)
        if target is None:
            return False
        if is_active:
            for other in self.db.notifications.values():
                other.is_active = False
        target.is_active = is_active
        return True

    async def delete_live_notification(self, notification_id: str) -> bool:
        await self._enter("delete_live_notification")
        return self.db.notifications.pop(notification_id, None) is not None


class FakePageCache:
    def __init__(self) -> None:
        self.pages: dict[str, Any] = {}
        self.invalidated: list[str] = []

    async def get(self, path: str) -> Any | None:
        return self.pages.get(path)

    async def set(self, path: str, payload: Any, ttl: int = 60) -> None:
        self.pages[path] = payload

    async def invalidate(self, *paths: str) -> None:
        for path in paths:
            self.pages.pop(path, None)
        self.invalidated.extend(paths)


class FakeStorage:
    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.removed: list[str] = []
        self.fail_upload = False
        self.fail_remove = False
        self.configured = True

    async def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> str:
        if not self.configured:
            raise NotConfiguredError("Storage service is not configured.")
        if self.fail_upload:
            raise DependencyError("Upload failed with status 500")
        self.objects[f"{bucket}/{path}"] = content
        return path

    def public_url(self, bucket: str, path: str) -> str:
        return f"https://storage.test/storage/v1/object/public/{bucket}/{path}"

    async def remove(self, bucket: str, paths: list[str]) -> None:
        if self.fail_remove:
            raise DependencyError("Delete failed with status 500")
        for path in paths:
            self.objects.pop(f"{bucket}/{path}", None)
            self.removed.append(f"{bucket}/{path}")


class FakeSms:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.result = SmsResult(success=True)

    async def send_sms(self, recipient: str, message: str) -> SmsResult:
        self.sent.append((recipient, message))
        return self.result


@pytest.fixture
def db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def make_gateway(db: FakeDatabase):
    """Factory for extra gateways (sessions) over the same database."""
    return lambda: FakeGateway(db)


@pytest.fixture
def gateway(db: FakeDatabase) -> FakeGateway:
    return FakeGateway(db)


@pytest.fixture
def pages() -> FakePageCache:
    return FakePageCache()


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def sms() -> FakeSms:
    return FakeSms()


class DisconnectedSession:
    """Session whose connection dropped: statements and rollback both fail."""

    async def execute(self, stmt: Any) -> Any:
        raise OperationalError("UPDATE", {}, ConnectionError("connection lost"))

    async def commit(self) -> None:
        raise OperationalError("COMMIT", {}, ConnectionError("connection lost"))

    async def rollback(self) -> None:
        raise OperationalError("ROLLBACK", {}, ConnectionError("connection lost"))


@pytest.fixture
def disconnected_gateway() -> Gateway:
    """Real Gateway over a session that fails every call."""
    return Gateway(DisconnectedSession())
