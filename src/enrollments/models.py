"""Database models for the enrollment ledger.

One document per (email, course_id) pair. The pair is checked before
insert and also backed by a unique compound index so that two concurrent
enrollments cannot both succeed.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pymongo import ASCENDING, DESCENDING, IndexModel

from src.auth.models import ensure_utc_aware, normalize_email


ENROLLMENTS_COLLECTION = "enrollments"

ENROLLMENTS_INDEXES = [
    IndexModel(
        [("email", ASCENDING), ("course_id", ASCENDING)],
        unique=True,
        name="enrollments_email_course_unique",
    ),
    IndexModel(
        [("email", ASCENDING), ("enrollment_date", DESCENDING)],
        name="enrollments_by_email",
    ),
]


class PaymentStatus(str, Enum):
    """Enrollment payment status."""

    PENDING = "pending"
    COMPLETED = "completed"  # Free courses are completed on enrollment


class Enrollment:
    """Enrollment entity.

    Attributes:
        id: Storage identifier (stringified ObjectId)
        course_id: External id of the course
        student_name: Name given at enrollment
        email: Student email (normalized)
        phone: Contact phone
        enrollment_date: When the enrollment was created
        payment_status: PaymentStatus value
    """

    def __init__(
        self,
        course_id: str,
        student_name: str,
        email: str,
        phone: str,
        enrollment_date: datetime | None = None,
        payment_status: str = PaymentStatus.PENDING.value,
        id: str | None = None,
    ):
        self.id = id
        self.course_id = course_id
        self.student_name = student_name.strip()
        self.email = normalize_email(email)
        self.phone = phone.strip()
        self.enrollment_date = ensure_utc_aware(enrollment_date) or datetime.now(UTC)
        self.payment_status = payment_status

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Enrollment":
        return cls(
            id=str(doc["_id"]) if doc.get("_id") is not None else None,
            course_id=doc["course_id"],
            student_name=doc.get("student_name", ""),
            email=doc.get("email", ""),
            phone=doc.get("phone", ""),
            enrollment_date=doc.get("enrollment_date"),
            payment_status=doc.get("payment_status", PaymentStatus.PENDING.value),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "course_id": self.course_id,
            "student_name": self.student_name,
            "email": self.email,
            "phone": self.phone,
            "enrollment_date": self.enrollment_date,
            "payment_status": self.payment_status,
        }

    def __repr__(self) -> str:
        return f"<Enrollment {self.email} -> {self.course_id}>"
