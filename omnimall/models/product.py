"""Product model.

A listing (physical product or service) posted by a seller.
A non-null supplier_id marks the listing as drop-shipped.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from omnimall.models.profile import Profile
from omnimall.stores.postgres import Base

PRODUCT_PENDING = "pending"
PRODUCT_APPROVED = "approved"
PRODUCT_REJECTED = "rejected"


def generate_id() -> str:
    """Generate a new UUID primary key."""
    return str(uuid4())


class Product(Base):
    """Marketplace listing with stock."""

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint(
            "is_unlimited OR quantity IS NULL OR quantity >= 0",
            name="ck_products_quantity_non_negative",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)

    # Relations
    seller_id: Mapped[str] = mapped_column(ForeignKey("profiles.id"), index=True)
    supplier_id: Mapped[str | None] = mapped_column(String(36))

    # Listing
    name: Mapped[str] = mapped_column(String(300))
    description: Mapped[str | None] = mapped_column(Text)
    price: Mapped[float] = mapped_column()
    category: Mapped[str | None] = mapped_column(String(100))
    type: Mapped[str] = mapped_column(String(20), default="product")  # product, service
    condition: Mapped[str] = mapped_column(String(10), default="new")  # new, used, na
    location: Mapped[str | None] = mapped_column(String(200))
    image_urls: Mapped[list[str]] = mapped_column(JSON, default=list)

    # Stock: quantity is ignored when is_unlimited is set
    quantity: Mapped[int | None] = mapped_column()
    is_unlimited: Mapped[bool] = mapped_column(default=False)

    # Moderation: pending, approved, rejected
    status: Mapped[str] = mapped_column(String(20), default=PRODUCT_PENDING, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    seller: Mapped[Profile] = relationship(lazy="raise")

    @property
    def is_drop_shipped(self) -> bool:
        return self.supplier_id is not None

    def __repr__(self) -> str:
        return f"<Product {self.id} {self.name!r} qty={self.quantity}>"
