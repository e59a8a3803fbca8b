"""Seed the course catalog with the sample courses.

Existing courses are deleted first, then every sample course is created
through ``CourseService`` so modules and lessons get their stable ids.

Usage:
    python -m scripts.seed_courses
"""

import asyncio
from pathlib import Path

import structlog

from src.config.settings import get_settings
from src.core.context import RequestContext
from src.core.database import DocumentStore, init_mongo, shutdown_mongo
from src.core.logging import configure_structlog
from src.courses.models import COURSES_COLLECTION
from src.courses.schemas import CreateCourseRequest
from src.courses.service import CourseService


logger = structlog.get_logger(__name__)


def _video(title: str, video_id: str) -> dict:
    return {
        "title": title,
        "type": "video",
        "content": f"https://www.youtube.com/embed/{video_id}",
    }


SAMPLE_COURSES = [
    {
        "id": "web-dev",
        "title": "Web Development for Beginners",
        "description": (
            "Learn the fundamentals of web development with HTML, CSS, and JavaScript"
        ),
        "image": "Images/web-dev.jpg",
        "duration": "12 weeks",
        "price": 0,
        "instructor": "John Smith",
        "totalStudents": 1500,
        "modules": [
            {
                "title": "Module 1: HTML Fundamentals",
                "lessons": [
                    _video("Introduction to HTML", "qz0aGYrrlhU"),
                    _video("HTML Elements and Tags", "UB1O30fR-EE"),
                    _video("HTML Forms and Input", "fNcJuPIZ2WE"),
                ],
            },
            {
                "title": "Module 2: CSS Styling",
                "lessons": [
                    _video("CSS Basics", "1PnVor36_40"),
                    _video("CSS Layout and Flexbox", "JJSoEo8JSnc"),
                    _video("Responsive Design", "srvUrASNj0s"),
                ],
            },
        ],
    },
    {
        "id": "app-dev",
        "title": "App Development with Flutter",
        "description": "Build cross-platform mobile apps with Flutter and Dart",
        "image": "Images/app-dev.jpg",
        "duration": "10 weeks",
        "price": 0,
        "instructor": "Sarah Johnson",
        "totalStudents": 1200,
        "modules": [
            {
                "title": "Module 1: Flutter Basics",
                "lessons": [
                    _video("Introduction to Flutter", "pTJJsmejUOQ"),
                    _video("Dart Programming Language", "Ej_Pcr4uC2Q"),
                ],
            },
        ],
    },
    {
        "id": "full-stack",
        "title": "Full Stack Development",
        "description": "Master both frontend and backend development",
        "image": "Images/Full_Stack.png",
        "duration": "24 weeks",
        "price": 0,
        "instructor": "Mike Johnson",
        "totalStudents": 800,
        "modules": [],
    },
    {
        "id": "data-science",
        "title": "Data Science for Beginners",
        "description": "Learn data analysis and machine learning with Python",
        "image": "Images/data-science.jpg",
        "duration": "14 weeks",
        "price": 0,
        "instructor": "Michael Chen",
        "totalStudents": 900,
        "modules": [
            {
                "title": "Module 1: Python Basics",
                "lessons": [
                    _video("Introduction to Python", "_uQrJ0TkZlc"),
                    _video("Data Types and Variables", "khKv-8q7YmY"),
                ],
            },
        ],
    },
]


async def seed_courses(store: DocumentStore) -> int:
    """Replace the catalog with the sample courses.

    Returns:
        Number of courses created
    """
    deleted = await store.delete_all(COURSES_COLLECTION)
    logger.info("courses_cleared", deleted=deleted)

    course_service = CourseService(store)
    for data in SAMPLE_COURSES:
        await course_service.create_course(CreateCourseRequest.model_validate(data))

    logger.info("courses_seeded", count=len(SAMPLE_COURSES))
    return len(SAMPLE_COURSES)


async def run_seed() -> None:
    settings = get_settings()
    configure_structlog(settings, log_dir=Path(settings.log_dir))

    with RequestContext(request_id="seed-courses"):
        store = await init_mongo()
        try:
            await seed_courses(store)
        finally:
            await shutdown_mongo()


if __name__ == "__main__":
    asyncio.run(run_seed())
