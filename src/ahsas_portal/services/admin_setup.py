"""Bootstrap and repair of the designated admin account.

The admin profile is seeded ahead of time under a fixed member identifier.
``AdminSetup.run`` makes sure that profile has a working identity, points at
it, and that the identity holds the admin role. Each step re-reads the state
it depends on, so a run that stops half way is completed by the next one.
"""

import hmac
import logging

from supabase import AuthError, PostgrestAPIError

from ahsas_portal.config import Settings
from ahsas_portal.db.client import DatabaseClient
from ahsas_portal.db.directory import IdentityDirectory
from ahsas_portal.exceptions import (
    CreateFailedError,
    ForbiddenError,
    LookupFailedError,
    NotFoundError,
    UpdateFailedError,
)
from ahsas_portal.models.functions import AdminCredentials, SetupAdminResponse
from ahsas_portal.models.identity import Identity
from ahsas_portal.models.member import Profile, Role
from ahsas_portal.services.directory_search import find_identity_by_email

logger = logging.getLogger(__name__)

MESSAGE_CREATED = "Admin created successfully"
MESSAGE_UPDATED = "Admin password updated"


class AdminSetup:
    """Idempotent admin bootstrap."""

    def __init__(
        self,
        db: DatabaseClient,
        directory: IdentityDirectory,
        settings: Settings,
    ) -> None:
        self.db = db
        self.directory = directory
        self.settings = settings

    def check_key(self, setup_key: str | None) -> None:
        """Reject any key other than the configured one.

        Raises:
            ForbiddenError: If the key does not match exactly
        """
        supplied = (setup_key or "").encode()
        if not setup_key or not hmac.compare_digest(
            supplied, self.settings.setup_key.encode()
        ):
            logger.warning("setup-admin: invalid setup key")
            raise ForbiddenError("Invalid setup key")

    async def run(self, setup_key: str | None) -> SetupAdminResponse:
        """Ensure the admin identity, profile link and role exist.

        Args:
            setup_key: Shared secret supplied by the operator

        Returns:
            The admin credentials

        Raises:
            ForbiddenError: If the setup key is wrong
            NotFoundError: If the admin profile or its email is missing
            LookupFailedError: If the profile or identity lookup fails
            CreateFailedError: If the admin identity cannot be created
            UpdateFailedError: If the password, link or role cannot be written
        """
        self.check_key(setup_key)

        profile = await self._load_profile()
        identity, created = await self._resolve_identity(profile)
        await self._link_profile(profile, identity)
        await self._ensure_admin_role(identity)

        logger.info(
            f"setup-admin: admin {identity.id} "
            f"{'created' if created else 'password updated'}"
        )
        return SetupAdminResponse(
            message=MESSAGE_CREATED if created else MESSAGE_UPDATED,
            credentials=AdminCredentials(
                admission_number=self.settings.admin_member_id,
                password=self.settings.admin_password,
                email=profile.email,
            ),
        )

    async def _load_profile(self) -> Profile:
        member_id = self.settings.admin_member_id
        try:
            profile = await self.db.get_profile_by_member_id(member_id)
        except PostgrestAPIError as e:
            logger.error(f"setup-admin: profile lookup failed: {e}")
            raise LookupFailedError("Failed to look up admin profile") from e

        if profile is None:
            raise NotFoundError(f"No profile found for admission number {member_id}")
        if not profile.email:
            raise NotFoundError(f"Profile {member_id} has no email")
        return profile

    async def _resolve_identity(self, profile: Profile) -> tuple[Identity, bool]:
        """Find the admin identity by email and reset its password, or create it.

        Returns:
            The identity and whether it was newly created
        """
        password = self.settings.admin_password

        try:
            identity = await find_identity_by_email(
                self.directory,
                profile.email,
                page_size=self.settings.identity_page_size,
                max_pages=self.settings.identity_max_pages,
            )
        except AuthError as e:
            logger.error(f"setup-admin: identity search failed: {e}")
            raise LookupFailedError("Failed to search users") from e

        if identity is not None:
            try:
                await self.directory.update_user_password(identity.id, password)
            except AuthError as e:
                logger.error(f"setup-admin: password update failed: {e}")
                raise UpdateFailedError(str(e)) from e
            return identity, False

        try:
            identity = await self.directory.create_user(
                email=profile.email,
                password=password,
                full_name=profile.full_name or self.settings.admin_default_name,
            )
        except AuthError as e:
            logger.error(f"setup-admin: error creating admin: {e}")
            raise CreateFailedError(str(e)) from e
        return identity, True

    async def _link_profile(self, profile: Profile, identity: Identity) -> None:
        """Point the profile at the identity and carry over the old role row."""
        if profile.user_id == identity.id:
            return

        previous = profile.user_id
        try:
            await self.db.update_profile(
                profile.id,
                {
                    "user_id": str(identity.id),
                    "password_plaintext": self.settings.admin_password,
                },
            )
        except PostgrestAPIError as e:
            logger.error(f"setup-admin: relinking profile {profile.id} failed: {e}")
            raise UpdateFailedError("Failed to link admin profile") from e

        logger.info(f"setup-admin: profile {profile.id} linked {previous} -> {identity.id}")

        if previous is None:
            return

        try:
            if await self.db.get_role(identity.id) is None:
                await self.db.reassign_role(previous, identity.id)
        except PostgrestAPIError as e:
            logger.warning(f"setup-admin: could not move role from {previous}: {e}")

    async def _ensure_admin_role(self, identity: Identity) -> None:
        try:
            assignment = await self.db.get_role(identity.id)
            if assignment is None:
                await self.db.insert_role(identity.id, Role.ADMIN)
            elif assignment.role != Role.ADMIN:
                await self.db.update_role(identity.id, Role.ADMIN)
        except PostgrestAPIError as e:
            logger.error(f"setup-admin: granting admin role failed: {e}")
            raise UpdateFailedError("Failed to grant admin role") from e
