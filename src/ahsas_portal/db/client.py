"""Supabase database client for member profiles and role assignments."""

import logging
from typing import Any
from uuid import UUID

from supabase import Client, ClientOptions, create_client

from ahsas_portal.config import get_settings
from ahsas_portal.models.member import Profile, Role, RoleAssignment

logger = logging.getLogger(__name__)

PROFILES_TABLE = "profiles"
ROLES_TABLE = "user_roles"


def create_admin_client() -> Client:
    """Create a service-role Supabase client.

    The client acts on behalf of the functions, not a browser session, so it
    neither persists nor refreshes auth tokens.
    """
    settings = get_settings()
    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )


class DatabaseClient:
    """Client for the ``profiles`` and ``user_roles`` tables.

    Errors from the store propagate as ``PostgrestAPIError``; callers decide
    whether they are fatal.
    """

    def __init__(self, client: Client | None = None) -> None:
        self.client: Client = client or create_admin_client()

    # -------------------------------------------------------------------------
    # Profile methods
    # -------------------------------------------------------------------------

    async def get_profile_by_member_id(self, member_id: str) -> Profile | None:
        """Look up a profile by its member identifier.

        Args:
            member_id: The member identifier, matched exactly

        Returns:
            Profile if found, None otherwise
        """
        result = (
            self.client.table(PROFILES_TABLE)
            .select("*")
            .eq("member_id", member_id)
            .limit(1)
            .execute()
        )
        if result.data and len(result.data) > 0:
            return Profile(**result.data[0])
        return None

    async def update_profile_by_user_id(
        self,
        user_id: UUID,
        fields: dict[str, Any],
    ) -> list[Profile]:
        """Update every profile linked to an identity.

        Args:
            user_id: The identity ID
            fields: Column values to write

        Returns:
            The updated profiles (empty when no row is linked yet)
        """
        result = (
            self.client.table(PROFILES_TABLE)
            .update(fields)
            .eq("user_id", str(user_id))
            .execute()
        )
        logger.debug(f"Updated {len(result.data)} profile(s) for user {user_id}")
        return [Profile(**row) for row in result.data]

    async def update_profile(self, profile_id: UUID, fields: dict[str, Any]) -> None:
        """Update a profile by its row ID.

        Args:
            profile_id: The profile row ID
            fields: Column values to write
        """
        self.client.table(PROFILES_TABLE).update(fields).eq(
            "id", str(profile_id)
        ).execute()
        logger.debug(f"Updated profile {profile_id}")

    async def insert_profile(self, fields: dict[str, Any]) -> Profile:
        """Insert a new profile row.

        Args:
            fields: Column values, including ``user_id`` and ``email``

        Returns:
            The created profile
        """
        result = self.client.table(PROFILES_TABLE).insert(fields).execute()
        return Profile(**result.data[0])

    # -------------------------------------------------------------------------
    # Role methods
    # -------------------------------------------------------------------------

    async def get_role(self, user_id: UUID) -> RoleAssignment | None:
        """Get the role row of an identity.

        At most one row per identity is expected; the first one wins.

        Args:
            user_id: The identity ID

        Returns:
            RoleAssignment if the identity has one, None otherwise
        """
        result = (
            self.client.table(ROLES_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if result.data and len(result.data) > 0:
            return RoleAssignment(**result.data[0])
        return None

    async def insert_role(self, user_id: UUID, role: Role) -> RoleAssignment:
        """Grant a role to an identity that has none."""
        result = (
            self.client.table(ROLES_TABLE)
            .insert({"user_id": str(user_id), "role": role.value})
            .execute()
        )
        logger.debug(f"Granted role {role.value} to user {user_id}")
        return RoleAssignment(**result.data[0])

    async def update_role(self, user_id: UUID, role: Role) -> None:
        """Change the role of an identity in place."""
        self.client.table(ROLES_TABLE).update({"role": role.value}).eq(
            "user_id", str(user_id)
        ).execute()
        logger.debug(f"Changed role of user {user_id} to {role.value}")

    async def reassign_role(self, from_user_id: UUID, to_user_id: UUID) -> int:
        """Move the role rows of one identity onto another.

        Args:
            from_user_id: The superseded identity
            to_user_id: The identity that takes over its role

        Returns:
            Number of rows moved
        """
        result = (
            self.client.table(ROLES_TABLE)
            .update({"user_id": str(to_user_id)})
            .eq("user_id", str(from_user_id))
            .execute()
        )
        logger.debug(
            f"Moved {len(result.data)} role row(s) from {from_user_id} to {to_user_id}"
        )
        return len(result.data)
