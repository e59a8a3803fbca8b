"""Authentication service layer.

Business logic for:
- User signup (unique email, Argon2id hash)
- Login (password check, last_login tracking)
- User listing
"""

from datetime import UTC, datetime

import structlog

from src.auth.models import USERS_COLLECTION, User, normalize_email
from src.auth.security import hash_password, verify_password
from src.core.context import set_user_id
from src.core.database import DocumentStore, DuplicateDocumentError, to_object_id
from src.core.exceptions import AuthError, ConflictError, require_fields


logger = structlog.get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class UserExistsError(ConflictError):
    """Email already registered."""

    code = "user_exists"

    def __init__(self, message: str = "User already exists with this email"):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Unknown email or wrong password."""

    code = "invalid_credentials"

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


# ==============================================================================
# Auth Service
# ==============================================================================


class AuthService:
    """Credential store: signup, login and user queries."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def get_user_by_email(self, email: str) -> User | None:
        """Find user by email address."""
        doc = await self.store.find_one(
            USERS_COLLECTION, {"email": normalize_email(email)}
        )
        return User.from_document(doc) if doc else None

    async def signup(
        self, name: str | None, email: str | None, password: str | None
    ) -> User:
        """Register a new user.

        Returns:
            Created User instance (with its storage id)

        Raises:
            ValidationError: If any field is missing
            UserExistsError: If the email is already registered
        """
        require_fields(name, email, password)

        if await self.get_user_by_email(email):
            logger.info("signup_rejected_email_exists", email=email)
            raise UserExistsError

        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
        )

        try:
            user.id = await self.store.insert_one(USERS_COLLECTION, user.to_document())
        except DuplicateDocumentError as e:
            # Lost a race with a concurrent signup for the same email
            raise UserExistsError from e

        logger.info("user_registered", user_id=user.id, email=user.email)
        return user

    async def login(self, email: str | None, password: str | None) -> User:
        """Authenticate user with email and password.

        On success ``last_login`` is updated (and the hash upgraded when its
        parameters changed). Nothing is written on failure.

        Raises:
            ValidationError: If email or password is missing
            InvalidCredentialsError: If email is unknown or password is wrong
        """
        require_fields(email, password, message="Email and password are required")

        user = await self.get_user_by_email(email)
        if not user:
            logger.info("login_failed_unknown_email", email=email)
            raise InvalidCredentialsError

        is_valid, new_hash = verify_password(password, user.password_hash)
        if not is_valid:
            logger.info("login_failed_invalid_password", user_id=user.id)
            raise InvalidCredentialsError

        now = datetime.now(UTC)
        fields: dict[str, object] = {"last_login": now}
        if new_hash:
            fields["password_hash"] = new_hash

        await self.store.update_one(
            USERS_COLLECTION, {"_id": to_object_id(user.id)}, fields
        )
        user.last_login = now
        if new_hash:
            user.password_hash = new_hash

        set_user_id(user.id)
        logger.info("login_succeeded", user_id=user.id, rehashed=bool(new_hash))
        return user

    async def list_users(self) -> list[User]:
        """List all users (password hashes are never projected)."""
        docs = await self.store.find_all(
            USERS_COLLECTION,
            projection={"password_hash": 0},
            sort=[("created_at", -1)],
        )
        return [User.from_document(doc) for doc in docs]
