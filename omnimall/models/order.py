"""Order model.

Created by the checkout flow. Buyer details are denormalized at order time.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from omnimall.models.product import Product, generate_id
from omnimall.stores.postgres import Base

ORDER_PENDING = "pending"
ORDER_APPROVED = "approved"
ORDER_REJECTED = "rejected"


class Order(Base):
    """A buyer's order for a single product."""

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)

    product_id: Mapped[str] = mapped_column(ForeignKey("products.id"), index=True)
    buyer_id: Mapped[str | None] = mapped_column(ForeignKey("profiles.id"))
    quantity: Mapped[int] = mapped_column()

    # Denormalized buyer info
    buyer_name: Mapped[str] = mapped_column(String(200))
    buyer_phone: Mapped[str | None] = mapped_column(String(50))
    delivery_address: Mapped[str | None] = mapped_column(Text)

    delivery_fee: Mapped[float] = mapped_column(default=0)
    final_total: Mapped[float] = mapped_column()

    status: Mapped[str] = mapped_column(String(20), default=ORDER_PENDING, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    product: Mapped[Product] = relationship(lazy="raise")

    def __repr__(self) -> str:
        return f"<Order {self.id} {self.status}>"
