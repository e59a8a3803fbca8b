"""Pydantic schemas for authentication.

Request fields are optional at the schema level so that missing values
reach the service and are reported with the uniform "All fields are
required" message.
"""

from datetime import datetime

from pydantic import EmailStr, Field

from src.auth.models import User
from src.core.schemas import ApiModel, ApiResponse


# ==============================================================================
# Request Schemas
# ==============================================================================


class SignupRequest(ApiModel):
    """User signup request."""

    name: str | None = Field(None, max_length=100, description="Full name")
    email: EmailStr | None = Field(None, description="Email address")
    password: str | None = Field(None, description="Password")


class LoginRequest(ApiModel):
    """User login request."""

    email: EmailStr | None = Field(None, description="Email address")
    password: str | None = Field(None, description="Password")


# ==============================================================================
# Response Schemas
# ==============================================================================


class UserSummary(ApiModel):
    """Non-secret user view."""

    id: str
    name: str
    email: str
    created_at: datetime | None = None
    last_login: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(
            id=user.id or "",
            name=user.name,
            email=user.email,
            created_at=user.created_at,
            last_login=user.last_login,
        )


class SignupResponse(ApiResponse):
    user_id: str


class LoginResponse(ApiResponse):
    user: UserSummary


class UserListResponse(ApiResponse):
    users: list[UserSummary]
