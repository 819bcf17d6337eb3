"""Member profile and role rows stored in the relational store."""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel


class Role(str, Enum):
    """Permission level granted to an identity."""

    ADMIN = "admin"
    MEMBER = "member"


class Profile(BaseModel):
    """One row of the ``profiles`` table.

    ``user_id`` links the profile to an identity. The link can go stale when the
    identity is recreated out of band; the admin setup function repairs it.
    """

    id: UUID
    user_id: UUID | None = None
    member_id: str | None = None
    email: str | None = None
    full_name: str | None = None
    phone: str | None = None
    department: str | None = None
    password_plaintext: str | None = None


class RoleAssignment(BaseModel):
    """One row of the ``user_roles`` table."""

    id: UUID | None = None
    user_id: UUID
    role: Role
