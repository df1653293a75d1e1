"""Schemas for merchandising (home page sections)."""

from typing import Literal

from pydantic import BaseModel, Field


class ProductCard(BaseModel):
    """Resolved product placed in a section."""

    item_type: Literal["product"] = Field(default="product", alias="itemType")
    id: str
    name: str
    price: float
    category: str | None = None
    image_urls: list[str] = Field(default_factory=list, alias="imageUrls")
    location: str | None = None
    seller_id: str = Field(alias="sellerId")

    model_config = {"populate_by_name": True, "from_attributes": True}


class SellerCard(BaseModel):
    """Resolved verified seller placed in a section."""

    item_type: Literal["seller"] = Field(default="seller", alias="itemType")
    id: str
    display_name: str | None = Field(default=None, alias="displayName")
    avatar_url: str | None = Field(default=None, alias="avatarUrl")
    location: str | None = None

    model_config = {"populate_by_name": True, "from_attributes": True}


class MerchandisedContentResponse(BaseModel):
    """Response payload for GET /v1/ui/home.

    Sections with no resolvable items are absent.
    """

    sections: dict[str, list[ProductCard | SellerCard]]


class ItemRef(BaseModel):
    """Reference to a product or seller inside a section."""

    id: str = Field(min_length=1, max_length=36)
    type: Literal["product", "seller"]


class SectionItems(BaseModel):
    """Ordered items for one section; list index becomes position."""

    section_id: str = Field(alias="sectionId", min_length=1, max_length=100)
    items: list[ItemRef] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class ReplaceMerchandisingRequest(BaseModel):
    """Full replacement of every section."""

    sections: list[SectionItems]


class MerchandisingEntryOut(BaseModel):
    section_id: str = Field(alias="sectionId")
    item_id: str = Field(alias="itemId")
    item_type: str = Field(alias="itemType")
    position: int

    model_config = {"populate_by_name": True, "from_attributes": True}
