"""Pydantic schemas for course progress tracking."""

from pydantic import Field

from src.core.schemas import ApiModel, ApiResponse


class SetLessonCompletionRequest(ApiModel):
    """Request to set a lesson's completion flag."""

    completed: bool = Field(..., description="New completion flag")


class CourseProgress(ApiModel):
    """Derived completion ratio of a course (never stored)."""

    total_lessons: int = Field(ge=0)
    completed_lessons: int = Field(ge=0)
    percentage: float = Field(ge=0, le=100, description="0-100, 0 for empty courses")


class CourseProgressResponse(ApiResponse):
    progress: CourseProgress
