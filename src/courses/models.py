"""Database models for the course catalog.

A course document embeds its modules, and each module embeds its lessons
(composition, no independent lifecycle). Modules and lessons carry stable
ids assigned at creation time so they can be addressed independently of
their position.
"""

from typing import Any
from uuid import uuid4

from pymongo import ASCENDING, IndexModel


COURSES_COLLECTION = "courses"

COURSES_INDEXES = [
    IndexModel(
        [("external_id", ASCENDING)], unique=True, name="courses_external_id_unique"
    ),
]


def generate_content_id() -> str:
    """Generate a stable module/lesson identifier."""
    return uuid4().hex


class Lesson:
    """Lesson entity (embedded in a module).

    Attributes:
        id: Stable identifier within the course
        title: Lesson title
        type: Content type (video, article, quiz, ...)
        content: Content reference (URL or text)
        completed: Completion flag
    """

    def __init__(
        self,
        id: str | None = None,
        title: str = "",
        type: str = "video",
        content: str = "",
        completed: bool = False,
    ):
        self.id = id or generate_content_id()
        self.title = title
        self.type = type
        self.content = content
        self.completed = completed

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Lesson":
        return cls(
            id=doc.get("id"),
            title=doc.get("title", ""),
            type=doc.get("type", "video"),
            content=doc.get("content", ""),
            completed=bool(doc.get("completed", False)),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "content": self.content,
            "completed": self.completed,
        }

    def __repr__(self) -> str:
        return f"<Lesson {self.title} ({'done' if self.completed else 'todo'})>"


class Module:
    """Module entity: an ordered sequence of lessons."""

    def __init__(
        self,
        id: str | None = None,
        title: str = "",
        lessons: list[Lesson] | None = None,
    ):
        self.id = id or generate_content_id()
        self.title = title
        self.lessons = lessons or []

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Module":
        return cls(
            id=doc.get("id"),
            title=doc.get("title", ""),
            lessons=[Lesson.from_document(d) for d in doc.get("lessons", [])],
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "lessons": [lesson.to_document() for lesson in self.lessons],
        }

    def __repr__(self) -> str:
        return f"<Module {self.title} ({len(self.lessons)} lessons)>"


class Course:
    """Course entity.

    Attributes:
        id: Storage identifier (stringified ObjectId)
        external_id: Stable client-facing key (exposed as ``id`` on the wire)
        title: Course title
        description: Course description
        image: Cover image path or URL
        duration: Human readable duration ("12 weeks")
        price: Listed price (not charged, every course is free)
        instructor: Instructor name
        total_students: Enrollment counter
        modules: Ordered modules
    """

    def __init__(
        self,
        external_id: str,
        title: str = "",
        description: str = "",
        image: str | None = None,
        duration: str | None = None,
        price: float = 0,
        instructor: str = "",
        total_students: int = 0,
        modules: list[Module] | None = None,
        id: str | None = None,
    ):
        self.id = id
        self.external_id = external_id
        self.title = title
        self.description = description
        self.image = image
        self.duration = duration
        self.price = price
        self.instructor = instructor
        self.total_students = total_students
        self.modules = modules or []

    @staticmethod
    def lacks_content_ids(doc: dict[str, Any]) -> bool:
        """True if a stored module or lesson has no id (written by other tools)."""
        return any(
            not module.get("id")
            or any(not lesson.get("id") for lesson in module.get("lessons", []))
            for module in doc.get("modules", [])
        )

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Course":
        """Create Course instance from a MongoDB document."""
        return cls(
            id=str(doc["_id"]) if doc.get("_id") is not None else None,
            external_id=doc["external_id"],
            title=doc.get("title", ""),
            description=doc.get("description", ""),
            image=doc.get("image"),
            duration=doc.get("duration"),
            price=doc.get("price", 0),
            instructor=doc.get("instructor", ""),
            total_students=doc.get("total_students", 0),
            modules=[Module.from_document(d) for d in doc.get("modules", [])],
        )

    def to_document(self) -> dict[str, Any]:
        """Convert to a MongoDB document (without ``_id``)."""
        return {
            "external_id": self.external_id,
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "duration": self.duration,
            "price": self.price,
            "instructor": self.instructor,
            "total_students": self.total_students,
            "modules": [module.to_document() for module in self.modules],
        }

    def lesson_at(self, module_index: int, lesson_index: int) -> Lesson | None:
        """Resolve a lesson by zero-based position. Negative indices never match."""
        if not 0 <= module_index < len(self.modules):
            return None
        lessons = self.modules[module_index].lessons
        if not 0 <= lesson_index < len(lessons):
            return None
        return lessons[lesson_index]

    def lesson_position(self, lesson_id: str) -> tuple[int, int] | None:
        """Resolve a lesson id to its (module_index, lesson_index)."""
        for module_index, module in enumerate(self.modules):
            for lesson_index, lesson in enumerate(module.lessons):
                if lesson.id == lesson_id:
                    return module_index, lesson_index
        return None

    def __repr__(self) -> str:
        return f"<Course {self.external_id}: {self.title}>"
