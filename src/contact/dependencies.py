"""FastAPI dependencies for the contact form."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from src.contact.service import ContactService


async def get_contact_service(request: Request) -> ContactService:
    """Get contact service from app state."""
    service = getattr(request.app.state, "contact_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Contact service unavailable",
        )
    return service


ContactServiceDep = Annotated[ContactService, Depends(get_contact_service)]
