"""Identity models for accounts held by the hosted auth service."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from ahsas_portal.models.member import Role


class Identity(BaseModel):
    """An authenticatable account owned by the identity service."""

    id: UUID
    email: str | None = None
    user_metadata: dict = Field(default_factory=dict)
    email_confirmed_at: datetime | None = None

    @property
    def full_name(self) -> str | None:
        return self.user_metadata.get("full_name")


class Caller(BaseModel):
    """Authenticated caller of an admin-only function."""

    identity: Identity
    role: Role | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
