"""Authentication API endpoints.

Provides routes for:
- Signup and login (password check only, no session token is issued)
- User listing
"""

from fastapi import APIRouter, status

from src.auth.dependencies import AuthServiceDep
from src.auth.schemas import (
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
    UserListResponse,
    UserSummary,
)
from src.core.exceptions import AppError, http_error


router = APIRouter(tags=["auth"])
users_router = APIRouter(prefix="/api/users", tags=["users"])


@router.post(
    "/signup",
    response_model=SignupResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    responses={400: {"description": "Missing field or email already registered"}},
)
async def signup(data: SignupRequest, auth_service: AuthServiceDep) -> SignupResponse:
    """Register a new user account."""
    try:
        user = await auth_service.signup(data.name, data.email, data.password)
    except AppError as e:
        raise http_error(e) from e
    return SignupResponse(message="User registered successfully", user_id=user.id)


@router.post(
    "/login",
    response_model=LoginResponse,
    response_model_exclude_none=True,
    summary="User login",
    responses={400: {"description": "Missing field or invalid credentials"}},
)
async def login(data: LoginRequest, auth_service: AuthServiceDep) -> LoginResponse:
    """Check credentials and return a non-secret user summary.

    No token is issued: clients re-authenticate for privileged actions.
    """
    try:
        user = await auth_service.login(data.email, data.password)
    except AppError as e:
        raise http_error(e) from e
    return LoginResponse(message="Login successful", user=UserSummary.from_user(user))


@users_router.get(
    "",
    response_model=UserListResponse,
    response_model_exclude_none=True,
    summary="List users",
)
async def list_users(auth_service: AuthServiceDep) -> UserListResponse:
    """List all users without password hashes."""
    try:
        users = await auth_service.list_users()
    except AppError as e:
        raise http_error(e) from e
    return UserListResponse(users=[UserSummary.from_user(u) for u in users])
