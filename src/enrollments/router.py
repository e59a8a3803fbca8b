"""Enrollment ledger API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from src.core.exceptions import AppError, http_error
from src.enrollments.dependencies import EnrollmentServiceDep
from src.enrollments.schemas import (
    CheckEnrollmentResponse,
    EnrollmentListResponse,
    EnrollmentResponse,
    EnrollRequest,
    EnrollResponse,
)


router = APIRouter(prefix="/api", tags=["enrollments"])


@router.get(
    "/check-enrollment",
    response_model=CheckEnrollmentResponse,
    response_model_exclude_none=True,
    summary="Check enrollment status",
    responses={400: {"description": "Email and courseId are required"}},
)
async def check_enrollment(
    enrollment_service: EnrollmentServiceDep,
    email: Annotated[str | None, Query()] = None,
    course_id: Annotated[str | None, Query(alias="courseId")] = None,
) -> CheckEnrollmentResponse:
    try:
        enrolled = await enrollment_service.check_enrolled(email, course_id)
    except AppError as e:
        raise http_error(e) from e
    return CheckEnrollmentResponse(enrolled=enrolled)


@router.post(
    "/enroll",
    response_model=EnrollResponse,
    response_model_exclude_none=True,
    summary="Enroll in a course",
    responses={
        400: {"description": "Missing field or already enrolled"},
        404: {"description": "Course not found"},
    },
)
async def enroll(
    data: EnrollRequest,
    enrollment_service: EnrollmentServiceDep,
) -> EnrollResponse:
    """Enroll a student. Every course is free, so payment is marked completed."""
    try:
        enrollment = await enrollment_service.enroll(
            course_id=data.course_id,
            student_name=data.student_name,
            email=data.email,
            phone=data.phone,
        )
    except AppError as e:
        raise http_error(e) from e
    return EnrollResponse(
        message="Successfully enrolled in the course!",
        enrollment_id=enrollment.id,
    )


@router.get(
    "/enrollments",
    response_model=EnrollmentListResponse,
    response_model_exclude_none=True,
    summary="List a student's enrollments",
)
async def list_enrollments(
    enrollment_service: EnrollmentServiceDep,
    email: Annotated[str | None, Query()] = None,
) -> EnrollmentListResponse:
    try:
        enrollments = await enrollment_service.list_enrollments(email)
    except AppError as e:
        raise http_error(e) from e
    return EnrollmentListResponse(
        enrollments=[EnrollmentResponse.from_entity(item) for item in enrollments]
    )
