"""Database models for contact messages."""

from datetime import UTC, datetime
from typing import Any

from pymongo import DESCENDING, IndexModel

from src.auth.models import ensure_utc_aware


CONTACTS_COLLECTION = "contacts"

CONTACTS_INDEXES = [
    IndexModel([("created_at", DESCENDING)], name="contacts_created_at"),
]


class ContactMessage:
    """Free-form message from the contact form. No relation to other entities."""

    def __init__(
        self,
        name: str,
        email: str,
        message: str,
        created_at: datetime | None = None,
        id: str | None = None,
    ):
        self.id = id
        self.name = name.strip()
        self.email = email.strip()
        self.message = message.strip()
        self.created_at = ensure_utc_aware(created_at) or datetime.now(UTC)

    def to_document(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "message": self.message,
            "created_at": self.created_at,
        }
