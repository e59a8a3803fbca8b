"""Course progress service layer.

Progress is computed from the lesson ``completed`` flags stored inside the
course document; nothing is persisted separately.
"""

import structlog

from src.core.exceptions import NotFoundError
from src.courses.models import Course, Lesson
from src.courses.service import CourseService

from .schemas import CourseProgress


logger = structlog.get_logger(__name__)


class LessonNotFoundError(NotFoundError):
    """Module or lesson does not resolve inside the course."""

    code = "lesson_not_found"

    def __init__(self, message: str = "Module or lesson not found"):
        super().__init__(message)


def compute_progress(course: Course) -> CourseProgress:
    """Aggregate lesson completion across all modules.

    A course without lessons reports 0 percent.
    """
    total = sum(len(module.lessons) for module in course.modules)
    completed = sum(
        1 for module in course.modules for lesson in module.lessons if lesson.completed
    )
    percentage = (completed / total) * 100 if total else 0.0
    return CourseProgress(
        total_lessons=total,
        completed_lessons=completed,
        percentage=percentage,
    )


class ProgressService:
    """Service for lesson completion and course progress."""

    def __init__(self, course_service: CourseService):
        self.course_service = course_service

    async def get_progress(self, course_id: str) -> CourseProgress:
        """Get the completion ratio of a course.

        Raises:
            CourseNotFoundError: If the course does not exist
        """
        course = await self.course_service.get_course(course_id)
        return compute_progress(course)

    async def set_lesson_completion(
        self,
        course_id: str,
        module_index: int,
        lesson_index: int,
        completed: bool,
    ) -> Lesson:
        """Set a lesson's completion flag by zero-based position.

        Raises:
            CourseNotFoundError: If the course does not exist
            LessonNotFoundError: If either index is out of range (no write)
        """
        course = await self.course_service.get_course(course_id)
        lesson = course.lesson_at(module_index, lesson_index)
        if lesson is None:
            logger.info(
                "lesson_position_not_found",
                course_id=course_id,
                module_index=module_index,
                lesson_index=lesson_index,
            )
            raise LessonNotFoundError

        return await self._update(course, module_index, lesson_index, completed)

    async def set_lesson_completion_by_id(
        self,
        course_id: str,
        lesson_id: str,
        completed: bool,
    ) -> Lesson:
        """Set a lesson's completion flag by its stable id.

        Raises:
            CourseNotFoundError: If the course does not exist
            LessonNotFoundError: If no lesson has that id (no write)
        """
        course = await self.course_service.get_course(course_id)
        position = course.lesson_position(lesson_id)
        if position is None:
            logger.info("lesson_id_not_found", course_id=course_id, lesson_id=lesson_id)
            raise LessonNotFoundError("Lesson not found")

        return await self._update(course, *position, completed)

    async def _update(
        self, course: Course, module_index: int, lesson_index: int, completed: bool
    ) -> Lesson:
        lesson = course.modules[module_index].lessons[lesson_index]
        updated = await self.course_service.set_lesson_completed(
            course.external_id, module_index, lesson_index, lesson.id, completed
        )
        if not updated:
            # Course deleted or restructured since it was read
            raise LessonNotFoundError

        lesson.completed = completed
        logger.info(
            "lesson_completion_updated",
            course_id=course.external_id,
            lesson_id=lesson.id,
            completed=completed,
        )
        return lesson
