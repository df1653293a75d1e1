import asyncio

import pytest

from omnimall.services.notifications import NotificationDispatcher
from omnimall.services.orders import ORDER_VIEW_PATHS, approve_order, reject_order
from omnimall.services.sms import SmsResult


def _dispatcher(gateway, sms) -> NotificationDispatcher:
    return NotificationDispatcher(gateway, sms, admin_email="", dashboard_url="https://omnimall.test/profile")


@pytest.fixture
def seeded(db):
    db.add_profile("seller-1", phone_number="0241234567")
    db.add_product("p1", seller_id="seller-1", quantity=5)
    db.add_order("o1", product_id="p1", quantity=3)
    return db


async def _approve(gateway, sms, pages, order_id="o1", quantity=3, strict=False):
    return await approve_order(
        gateway=gateway,
        dispatcher=_dispatcher(gateway, sms),
        pages=pages,
        order_id=order_id,
        product_id="p1",
        quantity=quantity,
        strict=strict,
    )


@pytest.mark.asyncio
async def test_approve_order_deducts_stock_and_texts_seller(seeded, gateway, sms, pages):
    result = await _approve(gateway, sms, pages)

    assert result.success is True
    assert seeded.orders["o1"].status == "approved"
    assert seeded.products["p1"].quantity == 2
    assert len(sms.sent) == 1
    assert set(ORDER_VIEW_PATHS) <= set(pages.invalidated)


@pytest.mark.asyncio
async def test_approve_order_ignores_sms_failure(seeded, gateway, sms, pages):
    sms.result = SmsResult(success=False, error="API Error: Status 500")

    result = await _approve(gateway, sms, pages)

    assert result.success is True
    assert seeded.products["p1"].quantity == 2


@pytest.mark.asyncio
async def test_approve_order_insufficient_stock_leaves_order_approved(seeded, gateway, sms, pages):
    seeded.products["p1"].quantity = 2

    result = await _approve(gateway, sms, pages)

    assert result.success is False
    assert result.error.startswith("Stock could not be updated")
    assert seeded.orders["o1"].status == "approved"
    assert seeded.products["p1"].quantity == 2
    assert sms.sent == []


@pytest.mark.asyncio
async def test_strict_approval_reverts_when_decrement_fails(seeded, gateway, sms, pages):
    gateway.fail_on.add("decrement_product_quantity")

    result = await _approve(gateway, sms, pages, strict=True)

    assert result.success is False
    assert seeded.orders["o1"].status == "pending"
    assert seeded.products["p1"].quantity == 5


@pytest.mark.asyncio
async def test_approve_order_unlimited_product_keeps_quantity(seeded, gateway, sms, pages):
    seeded.products["p1"].is_unlimited = True
    seeded.products["p1"].quantity = 0

    result = await _approve(gateway, sms, pages)

    assert result.success is True
    assert seeded.products["p1"].quantity == 0


@pytest.mark.asyncio
async def test_approve_order_rejects_zero_quantity(seeded, gateway, sms, pages):
    result = await _approve(gateway, sms, pages, quantity=0)

    assert result.success is False
    assert result.code == "VALIDATION_ERROR"
    assert seeded.queries == []


@pytest.mark.asyncio
async def test_approve_missing_order(seeded, gateway, sms, pages):
    result = await _approve(gateway, sms, pages, order_id="nope")

    assert result.success is False
    assert result.code == "NOT_FOUND"
    assert seeded.products["p1"].quantity == 5


@pytest.mark.asyncio
async def test_concurrent_approvals_never_oversell(seeded, make_gateway, sms, pages):
    seeded.add_order("o2", product_id="p1", quantity=3)

    first, second = await asyncio.gather(
        _approve(make_gateway(), sms, pages, order_id="o1"),
        _approve(make_gateway(), sms, pages, order_id="o2"),
    )

    assert [first.success, second.success].count(True) == 1
    assert seeded.products["p1"].quantity == 2


@pytest.mark.asyncio
async def test_reject_order_leaves_stock(seeded, gateway, pages):
    result = await reject_order(gateway=gateway, pages=pages, order_id="o1")

    assert result.success is True
    assert seeded.orders["o1"].status == "rejected"
    assert seeded.products["p1"].quantity == 5


@pytest.mark.asyncio
async def test_failed_rollback_does_not_escape_approval(seeded, gateway, sms, pages):
    gateway.fail_on.update({"decrement_product_quantity", "rollback"})

    result = await _approve(gateway, sms, pages, strict=True)

    assert result.success is False
    assert result.error.startswith("Stock could not be updated")
    assert sms.sent == []


@pytest.mark.asyncio
async def test_approval_on_dropped_connection_returns_failure(disconnected_gateway, sms, pages):
    result = await _approve(disconnected_gateway, sms, pages)

    assert result.success is False
    assert result.code == "DEPENDENCY_ERROR"
