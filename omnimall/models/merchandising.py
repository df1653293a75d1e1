"""Merchandising entry model.

Places a product or seller into a named home page section at a rank.
The whole table is replaced on every admin save.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from omnimall.stores.postgres import Base

ITEM_PRODUCT = "product"
ITEM_SELLER = "seller"


class MerchandisingEntry(Base):
    """Single curated placement."""

    __tablename__ = "merchandising"

    id: Mapped[int] = mapped_column(primary_key=True)

    section_id: Mapped[str] = mapped_column(String(100), index=True)
    item_id: Mapped[str] = mapped_column(String(36))
    item_type: Mapped[str] = mapped_column(String(20))  # product, seller
    position: Mapped[int] = mapped_column(index=True)

    def __repr__(self) -> str:
        return f"<MerchandisingEntry {self.section_id}[{self.position}] {self.item_type}:{self.item_id}>"
