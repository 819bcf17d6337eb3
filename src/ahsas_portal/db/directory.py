"""Admin client for the hosted identity service (Supabase Auth)."""

import logging
from typing import Any
from uuid import UUID

from supabase import Client

from ahsas_portal.db.client import create_admin_client
from ahsas_portal.models.identity import Identity

logger = logging.getLogger(__name__)


def _to_identity(user: Any) -> Identity:
    return Identity(
        id=user.id,
        email=user.email,
        user_metadata=user.user_metadata or {},
        email_confirmed_at=user.email_confirmed_at,
    )


class IdentityDirectory:
    """User-management operations that need the service role.

    Failures from the identity service propagate as ``AuthError``.
    """

    def __init__(self, client: Client | None = None) -> None:
        self.client: Client = client or create_admin_client()

    async def get_user_by_token(self, token: str) -> Identity | None:
        """Resolve an access token to the identity it was issued for.

        Args:
            token: A bearer access token

        Returns:
            Identity if the token is valid, None otherwise
        """
        response = self.client.auth.get_user(token)
        if response is None or response.user is None:
            return None
        return _to_identity(response.user)

    async def create_user(
        self,
        email: str,
        password: str,
        full_name: str,
    ) -> Identity:
        """Create a pre-confirmed identity.

        Args:
            email: Login email
            password: Initial password
            full_name: Display name, stored as user metadata

        Returns:
            The created identity
        """
        response = self.client.auth.admin.create_user({
            "email": email,
            "password": password,
            "email_confirm": True,
            "user_metadata": {"full_name": full_name},
        })
        logger.debug(f"Created identity {response.user.id}")
        return _to_identity(response.user)

    async def update_user_password(self, user_id: UUID, password: str) -> None:
        """Set a new password on an identity."""
        self.client.auth.admin.update_user_by_id(
            str(user_id),
            {"password": password},
        )
        logger.debug(f"Updated password of identity {user_id}")

    async def list_users(self, page: int, per_page: int) -> list[Identity]:
        """List one page of identities.

        Args:
            page: 1-based page number
            per_page: Page size

        Returns:
            The identities on that page; fewer than ``per_page`` means the last page
        """
        users = self.client.auth.admin.list_users(page=page, per_page=per_page)
        return [_to_identity(user) for user in users]
