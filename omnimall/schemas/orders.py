"""Schemas for order fulfillment endpoints."""

from pydantic import BaseModel, Field


class ApproveOrderRequest(BaseModel):
    product_id: str = Field(alias="productId", min_length=1, max_length=36)
    quantity: int = Field(ge=1)

    model_config = {"populate_by_name": True}
