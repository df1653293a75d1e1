"""Schemas for admin moderation."""

from typing import Literal

from pydantic import BaseModel


class ProductStatusRequest(BaseModel):
    status: Literal["pending", "approved", "rejected"]
