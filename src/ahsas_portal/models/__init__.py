"""Pydantic models for the AHSAS portal - the contracts."""

from ahsas_portal.models.functions import (
    AdminCredentials,
    CreatedUser,
    CreateMemberRequest,
    CreateMemberResponse,
    LookupEmailRequest,
    LookupEmailResponse,
    ResetPasswordRequest,
    ResetPasswordResponse,
    SetupAdminRequest,
    SetupAdminResponse,
)
from ahsas_portal.models.identity import Caller, Identity
from ahsas_portal.models.member import Profile, Role, RoleAssignment

__all__ = [
    "AdminCredentials",
    "Caller",
    "CreatedUser",
    "CreateMemberRequest",
    "CreateMemberResponse",
    "Identity",
    "LookupEmailRequest",
    "LookupEmailResponse",
    "Profile",
    "ResetPasswordRequest",
    "ResetPasswordResponse",
    "Role",
    "RoleAssignment",
    "SetupAdminRequest",
    "SetupAdminResponse",
]
