"""Course progress API endpoints.

Provides routes for:
- Lesson completion by position (module/lesson indices)
- Lesson completion by stable lesson id
- Course progress queries
"""

from fastapi import APIRouter

from src.core.exceptions import AppError, http_error
from src.core.schemas import ApiResponse

from .dependencies import ProgressServiceDep
from .schemas import CourseProgressResponse, SetLessonCompletionRequest


router = APIRouter(prefix="/api/courses", tags=["progress"])


@router.put(
    "/{course_id}/modules/{module_index}/lessons/{lesson_index}",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    summary="Set lesson completion by position",
    responses={404: {"description": "Course, module or lesson not found"}},
)
async def set_lesson_completion(
    course_id: str,
    module_index: int,
    lesson_index: int,
    data: SetLessonCompletionRequest,
    progress_service: ProgressServiceDep,
) -> ApiResponse:
    """Mark a lesson complete or incomplete.

    Indices are zero-based positions and change if modules or lessons are
    reordered; prefer the lesson id route for stored references.
    """
    try:
        await progress_service.set_lesson_completion(
            course_id, module_index, lesson_index, data.completed
        )
    except AppError as e:
        raise http_error(e) from e
    return ApiResponse(message="Lesson status updated successfully")


@router.put(
    "/{course_id}/lessons/{lesson_id}",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    summary="Set lesson completion by lesson id",
    responses={404: {"description": "Course or lesson not found"}},
)
async def set_lesson_completion_by_id(
    course_id: str,
    lesson_id: str,
    data: SetLessonCompletionRequest,
    progress_service: ProgressServiceDep,
) -> ApiResponse:
    try:
        await progress_service.set_lesson_completion_by_id(
            course_id, lesson_id, data.completed
        )
    except AppError as e:
        raise http_error(e) from e
    return ApiResponse(message="Lesson status updated successfully")


@router.get(
    "/{course_id}/progress",
    response_model=CourseProgressResponse,
    response_model_exclude_none=True,
    summary="Get course progress",
    responses={404: {"description": "Course not found"}},
)
async def get_course_progress(
    course_id: str,
    progress_service: ProgressServiceDep,
) -> CourseProgressResponse:
    """Completion ratio over all lessons of the course."""
    try:
        progress = await progress_service.get_progress(course_id)
    except AppError as e:
        raise http_error(e) from e
    return CourseProgressResponse(progress=progress)
