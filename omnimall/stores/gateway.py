"""Persistence gateway over the marketplace tables.

One Gateway is bound to one AsyncSession (one request). It exposes the
typed table operations the services need and nothing else: no business
rules live here. Database failures surface as DependencyError.
"""

from collections.abc import Sequence
import logging
from typing import Any

from sqlalchemy import case, delete, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from omnimall.errors import DependencyError
from omnimall.models import LiveNotification, MerchandisingEntry, Order, Product, Profile
from omnimall.models.product import PRODUCT_APPROVED

logger = logging.getLogger("uvicorn.error")


class Gateway:
    """Table operations bound to a single database session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _execute(self, stmt: Any) -> Any:
        try:
            return await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise DependencyError(f"Database error: {e.__class__.__name__}") from e

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            raise DependencyError(f"Database commit failed: {e.__class__.__name__}") from e

    async def rollback(self) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError as e:
            raise DependencyError(f"Database rollback failed: {e.__class__.__name__}") from e

    async def abort(self) -> None:
        """Roll back after a failed step.

        The caller already holds the error it will report, so a failing
        rollback (e.g. a dropped connection) is logged instead of raised.
        """
        try:
            await self.rollback()
        except DependencyError as e:
            logger.error(f"{e.message}; session discarded")

    # ============================================================
    # Orders
    # ============================================================

    async def set_order_status(self, order_id: str, status: str) -> bool:
        """Set order status. Returns False if the order does not exist."""
        result = await self._execute(
            update(Order).where(Order.id == order_id).values(status=status).returning(Order.id)
        )
        return result.scalar_one_or_none() is not None

    async def get_order_for_notification(self, order_id: str) -> Order | None:
        """Load an order with its product and the product's seller profile."""
        result = await self._execute(
            select(Order)
            .options(joinedload(Order.product).joinedload(Product.seller))
            .where(Order.id == order_id)
        )
        return result.scalar_one_or_none()

    # ============================================================
    # Products
    # ============================================================

    async def decrement_product_quantity(self, product_id: str, quantity: int) -> bool:
        """Atomically take `quantity` units out of stock.

        Single UPDATE statement: the stock check and the write happen in the
        database, so concurrent approvals cannot both pass on stale reads.
        Unlimited products match but keep their quantity.

        Returns:
            False if the product is missing or stock is insufficient.
        """
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .where(or_(Product.is_unlimited.is_(True), Product.quantity >= quantity))
            .values(
                quantity=case(
                    (Product.is_unlimited.is_(True), Product.quantity),
                    else_=Product.quantity - quantity,
                )
            )
            .returning(Product.id)
            .execution_options(synchronize_session=False)
        )
        result = await self._execute(stmt)
        return result.scalar_one_or_none() is not None

    async def set_product_status(self, product_id: str, status: str) -> bool:
        """Set moderation status. Returns False if the product does not exist."""
        result = await self._execute(
            update(Product).where(Product.id == product_id).values(status=status).returning(Product.id)
        )
        return result.scalar_one_or_none() is not None

    async def get_approved_products(self, product_ids: Sequence[str]) -> list[Product]:
        result = await self._execute(
            select(Product).where(Product.id.in_(product_ids), Product.status == PRODUCT_APPROVED)
        )
        return list(result.scalars().all())

    # ============================================================
    # Profiles
    # ============================================================

    async def get_verified_sellers(self, profile_ids: Sequence[str]) -> list[Profile]:
        result = await self._execute(
            select(Profile).where(Profile.id.in_(profile_ids), Profile.is_verified_seller.is_(True))
        )
        return list(result.scalars().all())

    async def get_profile_by_email(self, email: str) -> Profile | None:
        result = await self._execute(select(Profile).where(Profile.email == email).limit(1))
        return result.scalar_one_or_none()

    async def update_profile(self, profile_id: str, values: dict[str, Any]) -> bool:
        """Apply one combined update. Returns False if the profile does not exist."""
        result = await self._execute(
            update(Profile).where(Profile.id == profile_id).values(**values).returning(Profile.id)
        )
        return result.scalar_one_or_none() is not None

    # ============================================================
    # Merchandising
    # ============================================================

    async def list_merchandising_entries(self) -> list[MerchandisingEntry]:
        """All entries by position; ties fall back to insertion order."""
        result = await self._execute(
            select(MerchandisingEntry).order_by(
                MerchandisingEntry.position.asc(),
                MerchandisingEntry.id.asc(),
            )
        )
        return list(result.scalars().all())

    async def delete_all_merchandising_entries(self) -> None:
        await self._execute(delete(MerchandisingEntry))

    async def insert_merchandising_entries(self, entries: Sequence[MerchandisingEntry]) -> None:
        self.session.add_all(entries)
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            raise DependencyError(f"Database error: {e.__class__.__name__}") from e

    # ============================================================
    # Live notifications
    # ============================================================

    async def list_live_notifications(self) -> list[LiveNotification]:
        result = await self._execute(
            select(LiveNotification).order_by(LiveNotification.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_active_live_notification(self) -> LiveNotification | None:
        result = await self._execute(
            select(LiveNotification).where(LiveNotification.is_active.is_(True)).limit(1)
        )
        return result.scalar_one_or_none()

    async def create_live_notification(self, notification: LiveNotification) -> LiveNotification:
        self.session.add(notification)
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            raise DependencyError(f"Database error: {e.__class__.__name__}") from e
        return notification

    async def set_live_notification_active(self, notification_id: str, is_active: bool) -> bool:
        """Toggle a notification. Activating one deactivates every other."""
        if is_active:
            await self._execute(
                update(LiveNotification)
                .where(LiveNotification.id != notification_id)
                .values(is_active=False)
                .execution_options(synchronize_session=False)
            )
        result = await self._execute(
            update(LiveNotification)
            .where(LiveNotification.id == notification_id)
            .values(is_active=is_active)
            .returning(LiveNotification.id)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none() is not None

    async def delete_live_notification(self, notification_id: str) -> bool:
        result = await self._execute(
            delete(LiveNotification)
            .where(LiveNotification.id == notification_id)
            .returning(LiveNotification.id)
        )
        return result.scalar_one_or_none() is not None
