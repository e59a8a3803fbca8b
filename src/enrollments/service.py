"""Enrollment ledger service layer.

Business logic for:
- Enrollment status checks
- Enrollment creation (idempotency per email/course pair)
- Student enrollment listing

Enrollment writes two documents: the ledger record and the course's
``total_students`` counter. Both run inside one store transaction when the
store supports it; otherwise a failed counter update deletes the
just-inserted record before the error is surfaced.
"""

import structlog

from src.auth.models import normalize_email
from src.core.database import DocumentStore, DuplicateDocumentError, to_object_id
from src.core.exceptions import (
    ConflictError,
    StorageError,
    ValidationError,
    require_fields,
)
from src.courses.service import CourseNotFoundError, CourseService
from src.enrollments.models import ENROLLMENTS_COLLECTION, Enrollment, PaymentStatus


logger = structlog.get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class AlreadyEnrolledError(ConflictError):
    """Student already enrolled in the course."""

    code = "already_enrolled"

    def __init__(self, message: str = "You are already enrolled in this course"):
        super().__init__(message)


# ==============================================================================
# Enrollment Service
# ==============================================================================


class EnrollmentService:
    """Service for the enrollment ledger."""

    def __init__(self, store: DocumentStore, course_service: CourseService):
        self.store = store
        self.course_service = course_service

    async def check_enrolled(self, email: str | None, course_id: str | None) -> bool:
        """Check whether an enrollment exists for the pair.

        Raises:
            ValidationError: If email or course id is missing
        """
        require_fields(email, course_id, message="Email and courseId are required")

        doc = await self.store.find_one(
            ENROLLMENTS_COLLECTION,
            {"email": normalize_email(email), "course_id": course_id},
        )
        return doc is not None

    async def enroll(
        self,
        course_id: str | None,
        student_name: str | None,
        email: str | None,
        phone: str | None,
    ) -> Enrollment:
        """Enroll a student in a course.

        Nothing is written unless every check passes.

        Raises:
            ValidationError: If any field is missing
            AlreadyEnrolledError: If the (email, course) pair exists
            CourseNotFoundError: If the course does not exist
            StorageError: If a write fails (no enrollment is left behind)
        """
        require_fields(course_id, student_name, email, phone)

        if await self.check_enrolled(email, course_id):
            logger.info("enrollment_rejected_duplicate", course_id=course_id)
            raise AlreadyEnrolledError

        if await self.course_service.find_course(course_id) is None:
            logger.info("enrollment_rejected_unknown_course", course_id=course_id)
            raise CourseNotFoundError

        enrollment = Enrollment(
            course_id=course_id,
            student_name=student_name,
            email=email,
            phone=phone,
            payment_status=PaymentStatus.COMPLETED.value,  # Free course
        )

        async with self.store.transaction() as session:
            try:
                enrollment.id = await self.store.insert_one(
                    ENROLLMENTS_COLLECTION, enrollment.to_document(), session=session
                )
            except DuplicateDocumentError as e:
                raise AlreadyEnrolledError from e

            try:
                counted = await self.course_service.increment_students(
                    course_id, session=session
                )
            except StorageError:
                if session is None:
                    await self._discard(enrollment)
                raise

            if not counted:
                # Course deleted after the existence check
                if session is None:
                    await self._discard(enrollment)
                raise CourseNotFoundError

        logger.info(
            "enrollment_created",
            enrollment_id=enrollment.id,
            course_id=course_id,
        )
        return enrollment

    async def _discard(self, enrollment: Enrollment) -> None:
        """Compensate a failed enrollment by removing its ledger record."""
        try:
            await self.store.delete_one(
                ENROLLMENTS_COLLECTION, {"_id": to_object_id(enrollment.id)}
            )
        except StorageError:
            logger.exception(
                "enrollment_compensation_failed",
                enrollment_id=enrollment.id,
                course_id=enrollment.course_id,
            )
            return
        logger.warning(
            "enrollment_compensated",
            enrollment_id=enrollment.id,
            course_id=enrollment.course_id,
        )

    async def list_enrollments(self, email: str | None) -> list[Enrollment]:
        """List a student's enrollments, newest first."""
        if email is None or not email.strip():
            raise ValidationError("Email is required")

        docs = await self.store.find_all(
            ENROLLMENTS_COLLECTION,
            {"email": normalize_email(email)},
            sort=[("enrollment_date", -1)],
        )
        return [Enrollment.from_document(doc) for doc in docs]
