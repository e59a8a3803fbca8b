"""Tests for EnrollmentService, including the compensating delete."""

from datetime import UTC, datetime

import pytest

from src.core.exceptions import StorageError, ValidationError
from src.courses.models import Course
from src.courses.schemas import CreateCourseRequest
from src.courses.service import CourseNotFoundError, CourseService
from src.enrollments.models import Enrollment, PaymentStatus
from src.enrollments.service import AlreadyEnrolledError, EnrollmentService
from tests.fakes import InMemoryDocumentStore


@pytest.fixture
async def course(store: InMemoryDocumentStore) -> Course:
    course = Course(external_id="web-dev", title="Web Dev", total_students=10)
    course.id = await store.insert_one("courses", course.to_document())
    return course


def total_students(store: InMemoryDocumentStore) -> int:
    return store.documents("courses")[0]["total_students"]


class TestEnroll:
    async def test_enroll_creates_record_and_bumps_counter(
        self,
        enrollment_service: EnrollmentService,
        store: InMemoryDocumentStore,
        course: Course,
    ) -> None:
        enrollment = await enrollment_service.enroll(
            "web-dev", "Ana", "Ana@Example.com", "555-0100"
        )

        assert enrollment.id is not None
        assert enrollment.payment_status == PaymentStatus.COMPLETED.value
        [doc] = store.documents("enrollments")
        assert doc["email"] == "ana@example.com"
        assert total_students(store) == 11
        assert await enrollment_service.check_enrolled("ana@example.com", "web-dev")

    async def test_enroll_twice_rejected_without_writes(
        self,
        enrollment_service: EnrollmentService,
        store: InMemoryDocumentStore,
        course: Course,
    ) -> None:
        await enrollment_service.enroll("web-dev", "Ana", "ana@example.com", "1")

        with pytest.raises(AlreadyEnrolledError, match="already enrolled"):
            await enrollment_service.enroll("web-dev", "Ana", "ANA@example.com", "1")

        assert len(store.documents("enrollments")) == 1
        assert total_students(store) == 11

    async def test_enroll_unknown_course(
        self, enrollment_service: EnrollmentService, store: InMemoryDocumentStore
    ) -> None:
        with pytest.raises(CourseNotFoundError):
            await enrollment_service.enroll("nope", "Ana", "ana@example.com", "1")
        assert store.documents("enrollments") == []

    @pytest.mark.parametrize(
        "args",
        [
            (None, "Ana", "ana@example.com", "1"),
            ("web-dev", "", "ana@example.com", "1"),
            ("web-dev", "Ana", None, "1"),
            ("web-dev", "Ana", "ana@example.com", " "),
        ],
    )
    async def test_enroll_missing_field(
        self,
        enrollment_service: EnrollmentService,
        store: InMemoryDocumentStore,
        course: Course,
        args: tuple,
    ) -> None:
        with pytest.raises(ValidationError, match="All fields are required"):
            await enrollment_service.enroll(*args)
        assert store.documents("enrollments") == []

    async def test_failed_counter_update_removes_enrollment(
        self,
        enrollment_service: EnrollmentService,
        store: InMemoryDocumentStore,
        course: Course,
    ) -> None:
        store.fail_on("increment")

        with pytest.raises(StorageError):
            await enrollment_service.enroll("web-dev", "Ana", "ana@example.com", "1")

        assert store.documents("enrollments") == []
        assert total_students(store) == 10
        assert ("delete_one", "enrollments") in store.calls

    async def test_failed_compensation_still_surfaces_storage_error(
        self,
        enrollment_service: EnrollmentService,
        store: InMemoryDocumentStore,
        course: Course,
    ) -> None:
        store.fail_on("increment", "delete_one")

        with pytest.raises(StorageError, match="increment"):
            await enrollment_service.enroll("web-dev", "Ana", "ana@example.com", "1")

    async def test_course_deleted_before_counter_update(
        self,
        enrollment_service: EnrollmentService,
        store: InMemoryDocumentStore,
        course: Course,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        course_service = enrollment_service.course_service
        find_course = course_service.find_course

        async def find_then_delete(course_id: str) -> Course | None:
            found = await find_course(course_id)
            await store.delete_one("courses", {"external_id": course_id})
            return found

        monkeypatch.setattr(course_service, "find_course", find_then_delete)

        with pytest.raises(CourseNotFoundError):
            await enrollment_service.enroll("web-dev", "Ana", "ana@example.com", "1")

        assert store.documents("enrollments") == []

    async def test_transaction_rolls_back_without_compensation(
        self, course_payload: dict
    ) -> None:
        store = InMemoryDocumentStore(use_transactions=True)
        course_service = CourseService(store)
        await course_service.create_course(
            CreateCourseRequest.model_validate(course_payload)
        )
        enrollment_service = EnrollmentService(store, course_service)
        store.fail_on("increment")

        with pytest.raises(StorageError):
            await enrollment_service.enroll("web-dev", "Ana", "ana@example.com", "1")

        # Rollback is left to the aborted transaction
        assert ("insert_one", "enrollments") in store.calls
        assert ("delete_one", "enrollments") not in store.calls


class TestCheckEnrolled:
    async def test_not_enrolled(self, enrollment_service: EnrollmentService) -> None:
        assert await enrollment_service.check_enrolled("a@example.com", "x") is False

    async def test_missing_parameter(
        self, enrollment_service: EnrollmentService
    ) -> None:
        with pytest.raises(ValidationError, match="Email and courseId are required"):
            await enrollment_service.check_enrolled(None, "web-dev")


class TestListEnrollments:
    async def test_newest_first(
        self,
        enrollment_service: EnrollmentService,
        store: InMemoryDocumentStore,
    ) -> None:
        rows = [
            ("web-dev", "ana@example.com", datetime(2024, 1, 1, tzinfo=UTC)),
            ("app-dev", "ana@example.com", datetime(2024, 3, 1, tzinfo=UTC)),
            ("app-dev", "bruno@example.com", datetime(2024, 2, 1, tzinfo=UTC)),
        ]
        for course_id, email, enrolled_at in rows:
            enrollment = Enrollment(
                course_id, "Student", email, "1", enrollment_date=enrolled_at
            )
            await store.insert_one("enrollments", enrollment.to_document())

        enrollments = await enrollment_service.list_enrollments("ANA@example.com")

        assert [e.course_id for e in enrollments] == ["app-dev", "web-dev"]

    async def test_email_required(self, enrollment_service: EnrollmentService) -> None:
        with pytest.raises(ValidationError, match="Email is required"):
            await enrollment_service.list_enrollments("")
