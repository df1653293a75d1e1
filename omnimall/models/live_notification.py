"""Live notification model.

Site-wide banner; at most one row is active at a time.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from omnimall.stores.postgres import Base


class LiveNotification(Base):
    """Admin-authored banner message."""

    __tablename__ = "live_notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    title: Mapped[str] = mapped_column(String(200))
    message: Mapped[str] = mapped_column(Text)
    link: Mapped[str | None] = mapped_column(Text)
    link_text: Mapped[str | None] = mapped_column(String(100))
    is_active: Mapped[bool] = mapped_column(default=False, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<LiveNotification {self.id} active={self.is_active}>"
