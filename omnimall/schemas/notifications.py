"""Schemas for live notifications."""

from datetime import datetime

from pydantic import BaseModel, Field


class LiveNotificationOut(BaseModel):
    id: str
    title: str
    message: str
    link: str | None = None
    link_text: str | None = Field(default=None, alias="linkText")
    is_active: bool = Field(alias="isActive")
    created_at: datetime | None = Field(default=None, alias="createdAt")

    model_config = {"populate_by_name": True, "from_attributes": True}


class CreateLiveNotificationRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)
    link: str | None = None
    link_text: str | None = Field(default=None, alias="linkText", max_length=100)

    model_config = {"populate_by_name": True}


class SetActiveRequest(BaseModel):
    is_active: bool = Field(alias="isActive")

    model_config = {"populate_by_name": True}
