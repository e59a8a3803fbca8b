"""Shared fixtures: services over an in-memory store and an API client."""

import os
import tempfile


os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="elearning-logs-"))

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from src.auth.service import AuthService  # noqa: E402
from src.contact.service import ContactService  # noqa: E402
from src.courses.service import CourseService  # noqa: E402
from src.enrollments.service import EnrollmentService  # noqa: E402
from src.progress.service import ProgressService  # noqa: E402
from tests.fakes import InMemoryDocumentStore  # noqa: E402


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def auth_service(store: InMemoryDocumentStore) -> AuthService:
    return AuthService(store)


@pytest.fixture
def course_service(store: InMemoryDocumentStore) -> CourseService:
    return CourseService(store)


@pytest.fixture
def enrollment_service(
    store: InMemoryDocumentStore, course_service: CourseService
) -> EnrollmentService:
    return EnrollmentService(store, course_service)


@pytest.fixture
def progress_service(course_service: CourseService) -> ProgressService:
    return ProgressService(course_service)


@pytest.fixture
def contact_service(store: InMemoryDocumentStore) -> ContactService:
    return ContactService(store)


@pytest.fixture
def app(
    store: InMemoryDocumentStore,
    auth_service: AuthService,
    course_service: CourseService,
    enrollment_service: EnrollmentService,
    progress_service: ProgressService,
    contact_service: ContactService,
) -> FastAPI:
    """Application wired to the in-memory store (lifespan is not run)."""
    from src.main import create_app

    application = create_app()
    application.state.store = store
    application.state.auth_service = auth_service
    application.state.course_service = course_service
    application.state.enrollment_service = enrollment_service
    application.state.progress_service = progress_service
    application.state.contact_service = contact_service
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def course_payload() -> dict:
    """Course with modules of 3 and 2 lessons."""
    return {
        "id": "web-dev",
        "title": "Web Development for Beginners",
        "description": "HTML, CSS and JavaScript",
        "image": "Images/web-dev.jpg",
        "duration": "12 weeks",
        "price": 0,
        "instructor": "John Smith",
        "totalStudents": 1500,
        "modules": [
            {
                "title": "Module 1: HTML Fundamentals",
                "lessons": [
                    {"title": "Introduction to HTML", "content": "https://v/1"},
                    {"title": "HTML Elements and Tags", "content": "https://v/2"},
                    {"title": "HTML Forms and Input", "content": "https://v/3"},
                ],
            },
            {
                "title": "Module 2: CSS Styling",
                "lessons": [
                    {"title": "CSS Basics", "content": "https://v/4"},
                    {"title": "Responsive Design", "content": "https://v/5"},
                ],
            },
        ],
    }


@pytest.fixture
def seeded_client(client: TestClient, course_payload: dict) -> TestClient:
    """Client whose store already holds the ``web-dev`` course."""
    response = client.post("/api/courses", json=course_payload)
    assert response.status_code == 201
    return client
