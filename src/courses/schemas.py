"""Pydantic schemas for the course catalog.

On the wire a course's ``id`` is its external id; the storage ``_id`` is
never exposed.
"""

from pydantic import Field

from src.core.schemas import ApiModel, ApiResponse
from src.courses.models import Course, Lesson, Module


# ==============================================================================
# Request Schemas
# ==============================================================================


class CreateLessonRequest(ApiModel):
    title: str = Field(..., min_length=1, max_length=200)
    type: str = Field("video", max_length=50, description="video, article, quiz...")
    content: str = Field("", description="Content reference (URL or text)")
    completed: bool = False


class CreateModuleRequest(ApiModel):
    title: str = Field(..., min_length=1, max_length=200)
    lessons: list[CreateLessonRequest] = []


class CreateCourseRequest(ApiModel):
    """Course creation request."""

    id: str = Field(
        ..., min_length=1, max_length=100, description="External id, e.g. 'web-dev'"
    )
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=5000)
    image: str | None = Field(None, max_length=500)
    duration: str | None = Field(None, max_length=100)
    price: float = Field(0, ge=0, description="Listed price (courses are free)")
    instructor: str = Field("", max_length=100)
    total_students: int = Field(0, ge=0)
    modules: list[CreateModuleRequest] = []


# ==============================================================================
# Response Schemas
# ==============================================================================


class LessonResponse(ApiModel):
    id: str
    title: str
    type: str
    content: str
    completed: bool

    @classmethod
    def from_entity(cls, lesson: Lesson) -> "LessonResponse":
        return cls(
            id=lesson.id,
            title=lesson.title,
            type=lesson.type,
            content=lesson.content,
            completed=lesson.completed,
        )


class ModuleResponse(ApiModel):
    id: str
    title: str
    lessons: list[LessonResponse] = []

    @classmethod
    def from_entity(cls, module: Module) -> "ModuleResponse":
        return cls(
            id=module.id,
            title=module.title,
            lessons=[LessonResponse.from_entity(lesson) for lesson in module.lessons],
        )


class CourseResponse(ApiModel):
    """Course with its modules and lessons."""

    id: str = Field(description="External id")
    title: str
    description: str = ""
    image: str | None = None
    duration: str | None = None
    price: float = 0
    instructor: str = ""
    total_students: int = 0
    modules: list[ModuleResponse] = []

    @classmethod
    def fields_from_entity(cls, course: Course) -> dict:
        return {
            "id": course.external_id,
            "title": course.title,
            "description": course.description,
            "image": course.image,
            "duration": course.duration,
            "price": course.price,
            "instructor": course.instructor,
            "total_students": course.total_students,
            "modules": [ModuleResponse.from_entity(m) for m in course.modules],
        }

    @classmethod
    def from_entity(cls, course: Course) -> "CourseResponse":
        return cls(**cls.fields_from_entity(course))


class CourseDetailResponse(ApiResponse, CourseResponse):
    """Envelope with the course fields spread at the top level."""

    @classmethod
    def from_entity(cls, course: Course) -> "CourseDetailResponse":
        return cls(**CourseResponse.fields_from_entity(course))


class CourseListResponse(ApiResponse):
    courses: list[CourseResponse]


class CreateCourseResponse(ApiResponse):
    course_id: str
