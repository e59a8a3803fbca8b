"""Course catalog service layer.

Business logic for:
- Course listing and lookup by external id
- Course creation (assigns module and lesson ids)
"""

from typing import TYPE_CHECKING

import structlog

from src.core.database import DocumentStore, DuplicateDocumentError
from src.core.exceptions import ConflictError, NotFoundError
from src.courses.models import COURSES_COLLECTION, Course, Lesson, Module
from src.courses.schemas import CreateCourseRequest


if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorClientSession

logger = structlog.get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class CourseNotFoundError(NotFoundError):
    """No course with the given external id."""

    code = "course_not_found"

    def __init__(self, message: str = "Course not found"):
        super().__init__(message)


class CourseExistsError(ConflictError):
    """External id already in use."""

    code = "course_exists"

    def __init__(self, message: str = "A course with this id already exists"):
        super().__init__(message)


# ==============================================================================
# Course Service
# ==============================================================================


class CourseService:
    """Service for the course catalog."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def find_course(self, course_id: str) -> Course | None:
        """Find a course by external id, None if it does not exist.

        Courses written without module/lesson ids get ids assigned and
        persisted on first read, so lesson ids stay stable across reads.
        """
        doc = await self.store.find_one(COURSES_COLLECTION, {"external_id": course_id})
        return await self._load(doc) if doc else None

    async def _load(self, doc: dict) -> Course | None:
        if Course.lacks_content_ids(doc):
            return await self._backfill_content_ids(doc)
        return Course.from_document(doc)

    async def _backfill_content_ids(self, doc: dict) -> Course | None:
        course = Course.from_document(doc)
        # Only matches while the modules are unchanged since the read
        matched = await self.store.update_one(
            COURSES_COLLECTION,
            {"external_id": course.external_id, "modules": doc.get("modules", [])},
            {"modules": [module.to_document() for module in course.modules]},
        )
        if matched:
            logger.info("course_content_ids_assigned", course_id=course.external_id)
            return course

        # Lost to a concurrent writer: its ids (if any) win
        doc = await self.store.find_one(
            COURSES_COLLECTION, {"external_id": course.external_id}
        )
        return Course.from_document(doc) if doc else None

    async def get_course(self, course_id: str) -> Course:
        """Get a course by external id.

        Raises:
            CourseNotFoundError: If no course has that external id
        """
        course = await self.find_course(course_id)
        if course is None:
            logger.info("course_not_found", course_id=course_id)
            raise CourseNotFoundError
        return course

    async def list_courses(self) -> list[Course]:
        docs = await self.store.find_all(COURSES_COLLECTION, sort=[("_id", 1)])
        courses = []
        for doc in docs:
            course = await self._load(doc)
            if course is not None:
                courses.append(course)
        return courses

    async def create_course(self, data: CreateCourseRequest) -> Course:
        """Create a course with its modules and lessons.

        Raises:
            CourseExistsError: If the external id is taken
        """
        if await self.find_course(data.id):
            raise CourseExistsError

        course = Course(
            external_id=data.id,
            title=data.title,
            description=data.description,
            image=data.image,
            duration=data.duration,
            price=data.price,
            instructor=data.instructor,
            total_students=data.total_students,
            modules=[
                Module(
                    title=module.title,
                    lessons=[
                        Lesson(
                            title=lesson.title,
                            type=lesson.type,
                            content=lesson.content,
                            completed=lesson.completed,
                        )
                        for lesson in module.lessons
                    ],
                )
                for module in data.modules
            ],
        )

        try:
            course.id = await self.store.insert_one(
                COURSES_COLLECTION, course.to_document()
            )
        except DuplicateDocumentError as e:
            raise CourseExistsError from e

        logger.info(
            "course_created",
            course_id=course.external_id,
            modules=len(course.modules),
        )
        return course

    async def increment_students(
        self,
        course_id: str,
        amount: int = 1,
        session: "AsyncIOMotorClientSession | None" = None,
    ) -> bool:
        """Atomically bump the course's ``total_students`` counter."""
        return await self.store.increment(
            COURSES_COLLECTION,
            {"external_id": course_id},
            "total_students",
            amount,
            session=session,
        )

    async def set_lesson_completed(
        self,
        course_id: str,
        module_index: int,
        lesson_index: int,
        lesson_id: str,
        completed: bool,
    ) -> bool:
        """Set one lesson's ``completed`` flag in place.

        Only that field is written, so concurrent counter updates survive.
        The write is conditional on ``lesson_id`` still sitting at the given
        position.

        Returns:
            False if the course or the lesson at that position is gone
        """
        lesson_path = f"modules.{module_index}.lessons.{lesson_index}"
        return await self.store.update_one(
            COURSES_COLLECTION,
            {"external_id": course_id, f"{lesson_path}.id": lesson_id},
            {f"{lesson_path}.completed": completed},
        )
