"""Global test configuration for the AHSAS portal functions."""

import os
from typing import Any
from uuid import UUID, uuid4

import pytest
from supabase import AuthError

from ahsas_portal.config import Settings
from ahsas_portal.models.identity import Identity
from ahsas_portal.models.member import Profile, Role, RoleAssignment


@pytest.fixture(autouse=True, scope="session")
def _set_test_env_vars():
    """Set dummy environment variables for Settings validation.

    This ensures tests don't require a real .env file or exported env vars.
    Only sets values that aren't already present, so real env vars take
    precedence (useful for integration tests).
    """
    defaults = {
        "SUPABASE_URL": "https://test.supabase.co",
        "SUPABASE_SERVICE_ROLE_KEY": "test-service-role-key",
        "SETUP_KEY": "test-setup-key",
        "ADMIN_PASSWORD": "test-admin-password",
    }
    originals = {}
    for key, value in defaults.items():
        if key not in os.environ:
            os.environ[key] = value
            originals[key] = None
        else:
            originals[key] = os.environ[key]

    # Clear the lru_cache on get_settings so it picks up the new env vars
    from ahsas_portal.config import get_settings
    get_settings.cache_clear()

    yield

    # Restore original env state
    for key, original in originals.items():
        if original is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# In-memory stand-ins for the store and the identity service
# ---------------------------------------------------------------------------

class FakeAuthError(AuthError):
    """AuthError with a stable constructor across supabase releases."""

    def __init__(self, message: str) -> None:
        Exception.__init__(self, message)
        self.message = message


class FakeDatabase:
    """Mirrors DatabaseClient over two lists of rows."""

    def __init__(self) -> None:
        self.profiles: list[dict[str, Any]] = []
        self.roles: list[dict[str, Any]] = []
        self.calls: list[str] = []
        self.fail_on: dict[str, Exception] = {}

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise self.fail_on[name]

    def add_profile(self, **fields: Any) -> dict[str, Any]:
        row = {"id": str(uuid4()), "user_id": None, **fields}
        self.profiles.append(row)
        return row

    def roles_for(self, user_id: UUID | str) -> list[dict[str, Any]]:
        return [r for r in self.roles if r["user_id"] == str(user_id)]

    async def get_profile_by_member_id(self, member_id: str) -> Profile | None:
        self._enter("get_profile_by_member_id")
        for row in self.profiles:
            if row.get("member_id") == member_id:
                return Profile(**row)
        return None

    async def update_profile_by_user_id(
        self, user_id: UUID, fields: dict[str, Any]
    ) -> list[Profile]:
        self._enter("update_profile_by_user_id")
        updated = []
        for row in self.profiles:
            if row.get("user_id") == str(user_id):
                row.update(fields)
                updated.append(Profile(**row))
        return updated

    async def update_profile(self, profile_id: UUID, fields: dict[str, Any]) -> None:
        self._enter("update_profile")
        for row in self.profiles:
            if row["id"] == str(profile_id):
                row.update(fields)

    async def insert_profile(self, fields: dict[str, Any]) -> Profile:
        self._enter("insert_profile")
        row = {"id": str(uuid4()), **fields}
        self.profiles.append(row)
        return Profile(**row)

    async def get_role(self, user_id: UUID) -> RoleAssignment | None:
        self._enter("get_role")
        rows = self.roles_for(user_id)
        return RoleAssignment(**rows[0]) if rows else None

    async def insert_role(self, user_id: UUID, role: Role) -> RoleAssignment:
        self._enter("insert_role")
        row = {"id": str(uuid4()), "user_id": str(user_id), "role": role.value}
        self.roles.append(row)
        return RoleAssignment(**row)

    async def update_role(self, user_id: UUID, role: Role) -> None:
        self._enter("update_role")
        for row in self.roles_for(user_id):
            row["role"] = role.value

    async def reassign_role(self, from_user_id: UUID, to_user_id: UUID) -> int:
        self._enter("reassign_role")
        rows = self.roles_for(from_user_id)
        for row in rows:
            row["user_id"] = str(to_user_id)
        return len(rows)


class FakeDirectory:
    """Mirrors IdentityDirectory.

    When given a database, new identities get a bare profile row, the way the
    hosted service's signup trigger provisions one.
    """

    def __init__(self, db: FakeDatabase | None = None) -> None:
        self.db = db
        self.provisioned_fields: dict[str, Any] = {}
        self.users: list[Identity] = []
        self.passwords: dict[UUID, str] = {}
        self.tokens: dict[str, UUID] = {}
        self.list_calls: list[int] = []

    def add_user(self, email: str, password: str = "secret", token: str | None = None) -> Identity:
        identity = Identity(id=uuid4(), email=email)
        self.users.append(identity)
        self.passwords[identity.id] = password
        if token:
            self.tokens[token] = identity.id
        return identity

    async def get_user_by_token(self, token: str) -> Identity | None:
        user_id = self.tokens.get(token)
        if user_id is None:
            raise FakeAuthError("invalid JWT")
        return next(u for u in self.users if u.id == user_id)

    async def create_user(self, email: str, password: str, full_name: str) -> Identity:
        if any(u.email and u.email.lower() == email.lower() for u in self.users):
            raise FakeAuthError("A user with this email address has already been registered")
        identity = Identity(id=uuid4(), email=email, user_metadata={"full_name": full_name})
        self.users.append(identity)
        self.passwords[identity.id] = password
        if self.db is not None:
            self.db.profiles.append({
                "id": str(uuid4()),
                "user_id": str(identity.id),
                "email": email,
                "full_name": full_name,
                **self.provisioned_fields,
            })
        return identity

    async def update_user_password(self, user_id: UUID, password: str) -> None:
        if user_id not in self.passwords:
            raise FakeAuthError("User not found")
        self.passwords[user_id] = password

    async def list_users(self, page: int, per_page: int) -> list[Identity]:
        self.list_calls.append(page)
        start = (page - 1) * per_page
        return self.users[start:start + per_page]


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def fake_directory(fake_db: FakeDatabase) -> FakeDirectory:
    return FakeDirectory(db=fake_db)


@pytest.fixture
def settings() -> Settings:
    """Settings with small pagination bounds so paging is exercised."""
    return Settings(
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="test-service-role-key",
        setup_key="test-setup-key",
        admin_member_id="540",
        admin_password="Admin@123",
        identity_page_size=2,
        identity_max_pages=5,
    )
