"""Contact form endpoint."""

from fastapi import APIRouter

from src.contact.dependencies import ContactServiceDep
from src.contact.schemas import ContactRequest
from src.core.exceptions import AppError, http_error
from src.core.schemas import ApiResponse


router = APIRouter(tags=["contact"])


@router.post(
    "/contact",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    summary="Submit a contact message",
    responses={400: {"description": "Missing field"}},
)
async def submit_contact(
    data: ContactRequest,
    contact_service: ContactServiceDep,
) -> ApiResponse:
    try:
        await contact_service.submit(data.name, data.email, data.message)
    except AppError as e:
        raise http_error(e) from e
    return ApiResponse(message="Message submitted successfully!")
