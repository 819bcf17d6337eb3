"""Bearer-token authentication for admin-only functions."""

import logging
from typing import Annotated

from fastapi import Depends, Header
from supabase import AuthError, PostgrestAPIError

from ahsas_portal.db.client import DatabaseClient
from ahsas_portal.db.directory import IdentityDirectory
from ahsas_portal.exceptions import ForbiddenError, UnauthenticatedError
from ahsas_portal.models.identity import Caller
from ahsas_portal.services.directory_search import get_caller_role

logger = logging.getLogger(__name__)

_db_client: DatabaseClient | None = None
_directory: IdentityDirectory | None = None


def get_db_client() -> DatabaseClient:
    """Get or create database client instance."""
    global _db_client
    if _db_client is None:
        _db_client = DatabaseClient()
    return _db_client


def get_directory() -> IdentityDirectory:
    """Get or create identity service client instance."""
    global _directory
    if _directory is None:
        _directory = IdentityDirectory()
    return _directory


def _bearer_token(authorization: str) -> str:
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer":
        return token.strip()
    return authorization.strip()


async def get_caller(
    directory: Annotated[IdentityDirectory, Depends(get_directory)],
    db: Annotated[DatabaseClient, Depends(get_db_client)],
    authorization: Annotated[str | None, Header()] = None,
) -> Caller:
    """Resolve the bearer token to an identity and its role.

    Args:
        directory: The identity service client
        db: The database client
        authorization: The Authorization header

    Returns:
        Caller with identity and role (None when no role row exists)

    Raises:
        UnauthenticatedError: If the header is missing or the token is invalid
    """
    if not authorization:
        raise UnauthenticatedError("No authorization header")

    token = _bearer_token(authorization)
    identity = None
    if token:
        try:
            identity = await directory.get_user_by_token(token)
        except AuthError as e:
            logger.warning(f"Token rejected by identity service: {e}")

    if identity is None:
        raise UnauthenticatedError("Invalid token")

    try:
        role = await get_caller_role(db, identity.id)
    except PostgrestAPIError as e:
        logger.error(f"Role lookup failed for {identity.id}: {e}")
        role = None

    return Caller(identity=identity, role=role)


async def require_admin(caller: Annotated[Caller, Depends(get_caller)]) -> Caller:
    """Allow only callers holding the admin role.

    The role is read from the store on every request.

    Raises:
        ForbiddenError: If the caller is not an admin
    """
    if not caller.is_admin:
        logger.warning(f"Non-admin caller {caller.identity.id} refused")
        raise ForbiddenError("Unauthorized - Admin access required")
    return caller


# Type aliases for dependency injection
AdminCaller = Annotated[Caller, Depends(require_admin)]
