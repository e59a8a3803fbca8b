"""Pydantic schemas for the enrollment ledger."""

from datetime import datetime

from pydantic import EmailStr, Field

from src.core.schemas import ApiModel, ApiResponse
from src.enrollments.models import Enrollment, PaymentStatus


class EnrollRequest(ApiModel):
    """Request to enroll in a course."""

    course_id: str | None = Field(None, description="Course external id")
    student_name: str | None = Field(None, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=30)


class EnrollmentResponse(ApiModel):
    id: str
    course_id: str
    student_name: str
    email: str
    phone: str
    enrollment_date: datetime
    payment_status: PaymentStatus

    @classmethod
    def from_entity(cls, enrollment: Enrollment) -> "EnrollmentResponse":
        return cls(
            id=enrollment.id or "",
            course_id=enrollment.course_id,
            student_name=enrollment.student_name,
            email=enrollment.email,
            phone=enrollment.phone,
            enrollment_date=enrollment.enrollment_date,
            payment_status=PaymentStatus(enrollment.payment_status),
        )


class EnrollResponse(ApiResponse):
    enrollment_id: str


class CheckEnrollmentResponse(ApiResponse):
    enrolled: bool


class EnrollmentListResponse(ApiResponse):
    enrollments: list[EnrollmentResponse]
