"""Pydantic schemas for the contact form."""

from pydantic import EmailStr, Field

from src.core.schemas import ApiModel


class ContactRequest(ApiModel):
    name: str | None = Field(None, max_length=100)
    email: EmailStr | None = None
    message: str | None = Field(None, max_length=5000)
