"""Lookups shared by the portal functions."""

import logging
from uuid import UUID

from ahsas_portal.db.client import DatabaseClient
from ahsas_portal.db.directory import IdentityDirectory
from ahsas_portal.models.identity import Identity
from ahsas_portal.models.member import Role

logger = logging.getLogger(__name__)


async def find_identity_by_email(
    directory: IdentityDirectory,
    email: str,
    page_size: int,
    max_pages: int,
) -> Identity | None:
    """Scan the identity service page by page for an email address.

    Matching is case-insensitive. Pages are fetched in order and scanning stops
    at the first match, at a short page (end of data), or after ``max_pages``.

    Args:
        directory: The identity service client
        email: Address to look for
        page_size: Identities requested per page
        max_pages: Upper bound on pages fetched

    Returns:
        The matching identity, or None if none was found within the bound
    """
    target = email.strip().lower()

    for page in range(1, max_pages + 1):
        users = await directory.list_users(page=page, per_page=page_size)
        for user in users:
            if user.email and user.email.lower() == target:
                logger.debug(f"Found identity {user.id} on page {page}")
                return user
        if len(users) < page_size:
            return None

    logger.warning(f"Identity search stopped after {max_pages} pages without a match")
    return None


async def get_caller_role(db: DatabaseClient, user_id: UUID) -> Role | None:
    """Return the role granted to an identity, if any."""
    assignment = await db.get_role(user_id)
    return assignment.role if assignment else None
