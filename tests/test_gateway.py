"""Gateway SQL against a real async engine (in-memory SQLite via aiosqlite)."""

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from omnimall.errors import DependencyError
from omnimall.models import LiveNotification, MerchandisingEntry, Order, Product, Profile
from omnimall.stores.gateway import Gateway
from omnimall.stores.postgres import Base


@pytest.fixture
async def session():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        session.add_all(
            [
                Profile(id="seller-1", display_name="Kojo", phone_number="0241234567", is_verified_seller=True),
                Profile(id="buyer-1", display_name="Ama", is_verified_seller=False),
                Product(id="p1", seller_id="seller-1", name="Lamp", price=50.0, quantity=5, status="approved"),
                Product(id="p2", seller_id="seller-1", name="Notes", price=5.0, quantity=0, is_unlimited=True),
                Product(id="p3", seller_id="seller-1", name="Tutoring", price=20.0, quantity=None),
            ]
        )
        await session.commit()
        yield session

    await engine.dispose()


async def _quantity(session, product_id: str) -> int | None:
    return await session.scalar(select(Product.quantity).where(Product.id == product_id))


@pytest.mark.asyncio
async def test_decrement_takes_stock_then_refuses_oversell(session):
    gateway = Gateway(session)

    assert await gateway.decrement_product_quantity("p1", 3) is True
    assert await _quantity(session, "p1") == 2

    assert await gateway.decrement_product_quantity("p1", 3) is False
    assert await _quantity(session, "p1") == 2


@pytest.mark.asyncio
async def test_decrement_exact_stock_reaches_zero(session):
    gateway = Gateway(session)

    assert await gateway.decrement_product_quantity("p1", 5) is True
    assert await _quantity(session, "p1") == 0


@pytest.mark.asyncio
async def test_decrement_unlimited_keeps_quantity(session):
    gateway = Gateway(session)

    assert await gateway.decrement_product_quantity("p2", 10) is True
    assert await _quantity(session, "p2") == 0


@pytest.mark.asyncio
async def test_decrement_null_quantity_or_missing_product_fails(session):
    gateway = Gateway(session)

    assert await gateway.decrement_product_quantity("p3", 1) is False
    assert await _quantity(session, "p3") is None
    assert await gateway.decrement_product_quantity("nope", 1) is False


@pytest.mark.asyncio
async def test_order_for_notification_loads_product_and_seller(session):
    session.add(Order(id="o1", product_id="p1", quantity=2, buyer_name="Ama", final_total=100.0))
    await session.commit()
    session.expunge_all()

    order = await Gateway(session).get_order_for_notification("o1")

    assert order.product.name == "Lamp"
    assert order.product.seller.phone_number == "0241234567"
    assert await Gateway(session).get_order_for_notification("missing") is None


@pytest.mark.asyncio
async def test_set_order_status_reports_missing_order(session):
    session.add(Order(id="o1", product_id="p1", quantity=1, buyer_name="Ama", final_total=50.0))
    await session.commit()
    gateway = Gateway(session)

    assert await gateway.set_order_status("o1", "approved") is True
    assert await session.scalar(select(Order.status).where(Order.id == "o1")) == "approved"
    assert await gateway.set_order_status("missing", "approved") is False


@pytest.mark.asyncio
async def test_moderation_changes_what_resolves(session):
    gateway = Gateway(session)

    assert [p.id for p in await gateway.get_approved_products(["p1", "p2", "p3"])] == ["p1"]
    assert [s.id for s in await gateway.get_verified_sellers(["seller-1", "buyer-1"])] == ["seller-1"]

    assert await gateway.set_product_status("p2", "approved") is True
    assert await gateway.set_product_status("missing", "approved") is False
    assert await gateway.update_profile("seller-1", {"is_verified_seller": False}) is True
    assert await gateway.update_profile("missing", {"is_verified_seller": False}) is False
    await gateway.commit()
    session.expunge_all()

    assert sorted(p.id for p in await gateway.get_approved_products(["p1", "p2"])) == ["p1", "p2"]
    assert await gateway.get_verified_sellers(["seller-1"]) == []


@pytest.mark.asyncio
async def test_merchandising_entries_ordered_by_position(session):
    gateway = Gateway(session)
    await gateway.insert_merchandising_entries(
        [
            MerchandisingEntry(section_id="hero", item_id="p1", item_type="product", position=1),
            MerchandisingEntry(section_id="hero", item_id="p2", item_type="product", position=0),
            MerchandisingEntry(section_id="sellers", item_id="seller-1", item_type="seller", position=0),
        ]
    )
    await gateway.commit()

    entries = await gateway.list_merchandising_entries()
    assert [(e.position, e.item_id) for e in entries] == [(0, "p2"), (0, "seller-1"), (1, "p1")]

    await gateway.delete_all_merchandising_entries()
    await gateway.commit()
    assert await gateway.list_merchandising_entries() == []


@pytest.mark.asyncio
async def test_activating_notification_deactivates_others(session):
    gateway = Gateway(session)
    for notification_id in ("n1", "n2", "n3"):
        await gateway.create_live_notification(
            LiveNotification(id=notification_id, title=notification_id, message="m", is_active=False)
        )
    await gateway.commit()

    async def active_ids() -> list[str]:
        result = await session.execute(
            select(LiveNotification.id).where(LiveNotification.is_active.is_(True))
        )
        return list(result.scalars().all())

    assert await gateway.set_live_notification_active("n2", True) is True
    assert await active_ids() == ["n2"]

    assert await gateway.set_live_notification_active("n3", True) is True
    assert await active_ids() == ["n3"]

    assert await gateway.set_live_notification_active("n3", False) is True
    assert await active_ids() == []

    assert await gateway.set_live_notification_active("missing", False) is False
    assert await gateway.delete_live_notification("n1") is True
    assert await gateway.delete_live_notification("n1") is False


@pytest.mark.asyncio
async def test_failed_rollback_is_a_dependency_error(disconnected_gateway):
    gateway = disconnected_gateway

    with pytest.raises(DependencyError):
        await gateway.update_profile("u1", {"is_verified_seller": True})
    with pytest.raises(DependencyError):
        await gateway.rollback()

    await gateway.abort()
