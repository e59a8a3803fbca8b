"""Database models for authentication.

MongoDB collection definition for users. Documents are plain dicts; the
``User`` entity converts to and from them.
"""

from datetime import UTC, datetime
from typing import Any

from pymongo import ASCENDING, IndexModel


USERS_COLLECTION = "users"

USERS_INDEXES = [
    IndexModel([("email", ASCENDING)], unique=True, name="users_email_unique"),
]


def normalize_email(email: str) -> str:
    """Emails are stored and looked up lower-cased and trimmed."""
    return email.lower().strip()


def ensure_utc_aware(dt: datetime | None) -> datetime | None:
    """Ensure datetime is UTC-aware (documents may hold naive datetimes)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


class User:
    """User entity for signup and login.

    Attributes:
        id: Storage identifier (stringified ObjectId), None until inserted
        name: Full name
        email: Unique email address
        password_hash: Argon2id hash, never the plaintext
        created_at: Account creation timestamp
        last_login: Last successful login timestamp
    """

    def __init__(
        self,
        id: str | None = None,
        name: str = "",
        email: str = "",
        password_hash: str = "",
        created_at: datetime | None = None,
        last_login: datetime | None = None,
    ):
        self.id = id
        self.name = name.strip()
        self.email = normalize_email(email)
        self.password_hash = password_hash
        self.created_at = ensure_utc_aware(created_at) or datetime.now(UTC)
        self.last_login = ensure_utc_aware(last_login)

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "User":
        """Create User instance from a MongoDB document."""
        return cls(
            id=str(doc["_id"]) if doc.get("_id") is not None else None,
            name=doc.get("name", ""),
            email=doc.get("email", ""),
            password_hash=doc.get("password_hash", ""),
            created_at=doc.get("created_at"),
            last_login=doc.get("last_login"),
        )

    def to_document(self) -> dict[str, Any]:
        """Convert to a MongoDB document (without ``_id``)."""
        return {
            "name": self.name,
            "email": self.email,
            "password_hash": self.password_hash,
            "created_at": self.created_at,
            "last_login": self.last_login,
        }

    def __repr__(self) -> str:
        return f"<User {self.email}>"
