"""Course catalog API endpoints."""

from fastapi import APIRouter, status

from src.core.exceptions import AppError, http_error
from src.courses.dependencies import CourseServiceDep
from src.courses.schemas import (
    CourseDetailResponse,
    CourseListResponse,
    CourseResponse,
    CreateCourseRequest,
    CreateCourseResponse,
)


router = APIRouter(prefix="/api/courses", tags=["courses"])


@router.get(
    "",
    response_model=CourseListResponse,
    response_model_exclude_none=True,
    summary="List courses",
)
async def list_courses(course_service: CourseServiceDep) -> CourseListResponse:
    try:
        courses = await course_service.list_courses()
    except AppError as e:
        raise http_error(e) from e
    return CourseListResponse(courses=[CourseResponse.from_entity(c) for c in courses])


@router.post(
    "",
    response_model=CreateCourseResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Add a course",
    responses={400: {"description": "Course id already exists"}},
)
async def create_course(
    data: CreateCourseRequest,
    course_service: CourseServiceDep,
) -> CreateCourseResponse:
    """Add a course with its modules and lessons."""
    try:
        course = await course_service.create_course(data)
    except AppError as e:
        raise http_error(e) from e
    return CreateCourseResponse(
        message="Course added successfully", course_id=course.external_id
    )


@router.get(
    "/{course_id}",
    response_model=CourseDetailResponse,
    response_model_exclude_none=True,
    summary="Get course details",
    responses={404: {"description": "Course not found"}},
)
async def get_course(
    course_id: str,
    course_service: CourseServiceDep,
) -> CourseDetailResponse:
    try:
        course = await course_service.get_course(course_id)
    except AppError as e:
        raise http_error(e) from e
    return CourseDetailResponse.from_entity(course)
