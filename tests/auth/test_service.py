"""Tests for AuthService over the in-memory store."""

import pytest
from argon2 import PasswordHasher

from src.auth.service import AuthService, InvalidCredentialsError, UserExistsError
from src.core.exceptions import ValidationError
from tests.fakes import InMemoryDocumentStore


class TestSignup:
    async def test_signup_stores_hash_not_password(
        self, auth_service: AuthService, store: InMemoryDocumentStore
    ) -> None:
        user = await auth_service.signup("Ana Silva", "Ana@Example.com", "s3cret!")

        assert user.id is not None
        [doc] = store.documents("users")
        assert doc["email"] == "ana@example.com"
        assert doc["password_hash"] != "s3cret!"
        assert doc["password_hash"].startswith("$argon2id$")
        assert doc["last_login"] is None

    @pytest.mark.parametrize(
        ("name", "email", "password"),
        [
            (None, "a@example.com", "pw"),
            ("Ana", None, "pw"),
            ("Ana", "a@example.com", None),
            ("   ", "a@example.com", "pw"),
        ],
    )
    async def test_signup_missing_field(
        self,
        auth_service: AuthService,
        store: InMemoryDocumentStore,
        name: str | None,
        email: str | None,
        password: str | None,
    ) -> None:
        with pytest.raises(ValidationError, match="All fields are required"):
            await auth_service.signup(name, email, password)
        assert store.documents("users") == []

    async def test_signup_duplicate_email(
        self, auth_service: AuthService, store: InMemoryDocumentStore
    ) -> None:
        await auth_service.signup("Ana", "ana@example.com", "pw1")

        with pytest.raises(UserExistsError, match="User already exists"):
            await auth_service.signup("Other", "ANA@example.com", "pw2")
        assert len(store.documents("users")) == 1

    async def test_signup_lost_race_maps_to_user_exists(
        self, auth_service: AuthService, store: InMemoryDocumentStore, monkeypatch
    ) -> None:
        """A duplicate key on insert is reported like the pre-check."""
        await auth_service.signup("Ana", "ana@example.com", "pw1")

        async def no_user(email: str) -> None:
            return None

        monkeypatch.setattr(auth_service, "get_user_by_email", no_user)
        with pytest.raises(UserExistsError):
            await auth_service.signup("Ana", "ana@example.com", "pw2")


class TestLogin:
    async def test_login_success_sets_last_login(
        self, auth_service: AuthService, store: InMemoryDocumentStore
    ) -> None:
        await auth_service.signup("Ana", "ana@example.com", "pw")

        user = await auth_service.login("ANA@example.com", "pw")

        assert user.email == "ana@example.com"
        assert user.last_login is not None
        assert store.documents("users")[0]["last_login"] == user.last_login

    async def test_login_wrong_password_writes_nothing(
        self, auth_service: AuthService, store: InMemoryDocumentStore
    ) -> None:
        await auth_service.signup("Ana", "ana@example.com", "pw")
        before = dict(store.documents("users")[0])

        with pytest.raises(InvalidCredentialsError, match="Invalid email or password"):
            await auth_service.login("ana@example.com", "nope")

        assert store.documents("users")[0] == before
        assert ("update_one", "users") not in store.calls

    async def test_login_unknown_email(self, auth_service: AuthService) -> None:
        with pytest.raises(InvalidCredentialsError, match="Invalid email or password"):
            await auth_service.login("ghost@example.com", "pw")

    async def test_login_missing_field(self, auth_service: AuthService) -> None:
        with pytest.raises(ValidationError, match="Email and password are required"):
            await auth_service.login("ana@example.com", "")

    async def test_login_upgrades_outdated_hash(
        self, auth_service: AuthService, store: InMemoryDocumentStore
    ) -> None:
        weak_hash = PasswordHasher(
            time_cost=1, memory_cost=8, parallelism=1
        ).hash("pw")
        await store.insert_one(
            "users",
            {
                "name": "Ana",
                "email": "ana@example.com",
                "password_hash": weak_hash,
                "created_at": None,
                "last_login": None,
            },
        )

        await auth_service.login("ana@example.com", "pw")

        stored = store.documents("users")[0]["password_hash"]
        assert stored != weak_hash
        assert stored.startswith("$argon2id$")


async def test_list_users_excludes_password_hash(
    auth_service: AuthService,
) -> None:
    await auth_service.signup("Ana", "ana@example.com", "pw")
    await auth_service.signup("Bruno", "bruno@example.com", "pw")

    users = await auth_service.list_users()

    assert {u.email for u in users} == {"ana@example.com", "bruno@example.com"}
    assert all(u.password_hash == "" for u in users)
