"""Schemas for seller verification."""

from pydantic import BaseModel, EmailStr, Field


class VerificationForm(BaseModel):
    """Text fields submitted with the verification selfie."""

    full_name: str = Field(min_length=2, max_length=200)
    business_name: str = Field(min_length=2, max_length=200)
    location: str = Field(min_length=2, max_length=200)
    business_email: EmailStr
    business_phone: str = Field(min_length=10, max_length=50)

    model_config = {"str_strip_whitespace": True}
