"""Request and response bodies of the portal functions."""

from uuid import UUID

from pydantic import BaseModel


class LookupEmailRequest(BaseModel):
    """Body of ``lookup-email``."""

    member_id: str | None = None


class LookupEmailResponse(BaseModel):
    """Resolved email, or ``None`` when no profile matches."""

    email: str | None


class CreateMemberRequest(BaseModel):
    """Body of ``create-member``. Presence of required fields is checked by the service."""

    email: str | None = None
    password: str | None = None
    full_name: str | None = None
    member_id: str | None = None
    phone: str | None = None
    department: str | None = None


class CreatedUser(BaseModel):
    id: UUID
    email: str | None = None


class CreateMemberResponse(BaseModel):
    success: bool = True
    user: CreatedUser


class SetupAdminRequest(BaseModel):
    """Body of ``setup-admin``."""

    setup_key: str | None = None


class AdminCredentials(BaseModel):
    admission_number: str
    password: str
    email: str


class SetupAdminResponse(BaseModel):
    success: bool = True
    message: str
    credentials: AdminCredentials


class ResetPasswordRequest(BaseModel):
    """Body of ``reset-password``."""

    email: str | None = None
    new_password: str | None = None


class ResetPasswordResponse(BaseModel):
    success: bool = True
    message: str
