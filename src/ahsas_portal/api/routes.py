"""FastAPI routes for the portal functions."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from ahsas_portal import __version__
from ahsas_portal.api.auth import AdminCaller, get_db_client, get_directory
from ahsas_portal.config import Settings, get_settings
from ahsas_portal.db.client import DatabaseClient
from ahsas_portal.db.directory import IdentityDirectory
from ahsas_portal.models.functions import (
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
from ahsas_portal.services.admin_setup import AdminSetup
from ahsas_portal.services.members import MemberService

logger = logging.getLogger(__name__)

FUNCTIONS_PREFIX = "/functions/v1"

router = APIRouter(prefix=FUNCTIONS_PREFIX)


def get_member_service(
    db: Annotated[DatabaseClient, Depends(get_db_client)],
    directory: Annotated[IdentityDirectory, Depends(get_directory)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MemberService:
    return MemberService(db=db, directory=directory, settings=settings)


def get_admin_setup(
    db: Annotated[DatabaseClient, Depends(get_db_client)],
    directory: Annotated[IdentityDirectory, Depends(get_directory)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AdminSetup:
    return AdminSetup(db=db, directory=directory, settings=settings)


@router.get("/health")
async def health() -> dict:
    """Liveness check."""
    return {"status": "ok", "service": "ahsas-portal", "version": __version__}


@router.post("/lookup-email", response_model=LookupEmailResponse)
async def lookup_email(
    members: Annotated[MemberService, Depends(get_member_service)],
    body: LookupEmailRequest | None = None,
) -> LookupEmailResponse:
    """Resolve an admission number to the email used for sign-in.

    No authentication is required. A null email means no member has that
    admission number; the login form reports it as invalid.
    """
    email = await members.lookup_email(body or LookupEmailRequest())
    return LookupEmailResponse(email=email)


@router.post("/create-member", response_model=CreateMemberResponse)
async def create_member(
    caller: AdminCaller,
    members: Annotated[MemberService, Depends(get_member_service)],
    body: CreateMemberRequest | None = None,
) -> CreateMemberResponse:
    """Create a member account. Admin only.

    Args:
        caller: The admin making the request
        members: The member service
        body: The new member's details

    Returns:
        CreateMemberResponse with the new identity's id and email
    """
    identity = await members.create_member(body or CreateMemberRequest())
    logger.info(f"Admin {caller.identity.id} created member {identity.id}")
    return CreateMemberResponse(user=CreatedUser(id=identity.id, email=identity.email))


@router.post("/reset-password", response_model=ResetPasswordResponse)
async def reset_password(
    caller: AdminCaller,
    members: Annotated[MemberService, Depends(get_member_service)],
    body: ResetPasswordRequest | None = None,
) -> ResetPasswordResponse:
    """Set a new password for a member. Admin only."""
    await members.reset_password(body or ResetPasswordRequest())
    return ResetPasswordResponse(message="Password updated successfully")


@router.post("/setup-admin", response_model=SetupAdminResponse)
async def setup_admin(
    setup: Annotated[AdminSetup, Depends(get_admin_setup)],
    body: SetupAdminRequest | None = None,
) -> SetupAdminResponse:
    """Create or repair the designated admin account.

    Guarded by the shared setup key rather than a bearer token. The response
    carries the admin credentials so the operator can sign in.
    """
    return await setup.run((body or SetupAdminRequest()).setup_key)
