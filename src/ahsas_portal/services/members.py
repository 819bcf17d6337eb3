"""Member lookup, provisioning and password reset."""

import logging

from supabase import AuthError, PostgrestAPIError

from ahsas_portal.config import Settings
from ahsas_portal.db.client import DatabaseClient
from ahsas_portal.db.directory import IdentityDirectory
from ahsas_portal.exceptions import (
    CreateFailedError,
    InvalidInputError,
    LookupFailedError,
    NotFoundError,
    UpdateFailedError,
)
from ahsas_portal.models.functions import (
    CreateMemberRequest,
    LookupEmailRequest,
    ResetPasswordRequest,
)
from ahsas_portal.models.identity import Identity
from ahsas_portal.services.directory_search import find_identity_by_email

logger = logging.getLogger(__name__)

OPTIONAL_PROFILE_FIELDS = {"member_id", "phone", "department"}


class MemberService:
    """Operations on member accounts.

    ``lookup_email`` is a low-privilege read used by the login form. The other
    operations assume the caller has already been checked for the admin role.
    """

    def __init__(
        self,
        db: DatabaseClient,
        directory: IdentityDirectory,
        settings: Settings,
    ) -> None:
        self.db = db
        self.directory = directory
        self.settings = settings

    async def lookup_email(self, request: LookupEmailRequest) -> str | None:
        """Resolve a member identifier to the email used to sign in.

        Args:
            request: Body carrying ``member_id``

        Returns:
            The profile's email, or None when no profile has that identifier

        Raises:
            InvalidInputError: If ``member_id`` is missing or empty
            LookupFailedError: If the store query fails
        """
        if not request.member_id:
            raise InvalidInputError("member_id is required")

        member_id = request.member_id.strip()

        try:
            profile = await self.db.get_profile_by_member_id(member_id)
        except PostgrestAPIError as e:
            logger.error(f"lookup-email: db error: {e}")
            raise LookupFailedError("Lookup failed") from e

        return profile.email if profile else None

    async def create_member(self, request: CreateMemberRequest) -> Identity:
        """Provision an identity and fill in its profile.

        The identity service inserts a bare profile row for every new identity.
        That row is updated here; if it is missing, one is inserted instead.
        The password is copied into ``password_plaintext`` so admins can see it.

        Args:
            request: The new member's details

        Returns:
            The created identity

        Raises:
            InvalidInputError: If email, password or full name is missing
            CreateFailedError: If the identity service rejects the account
            UpdateFailedError: If the profile cannot be written
        """
        if not request.email or not request.password or not request.full_name:
            raise InvalidInputError("Email, password, and full name are required")

        try:
            identity = await self.directory.create_user(
                email=request.email,
                password=request.password,
                full_name=request.full_name,
            )
        except AuthError as e:
            logger.error(f"create-member: identity creation failed: {e}")
            raise CreateFailedError(str(e)) from e

        # Optional columns are written only when the caller sent them
        fields = request.model_dump(include=OPTIONAL_PROFILE_FIELDS, exclude_unset=True)
        if isinstance(fields.get("member_id"), str):
            fields["member_id"] = fields["member_id"].strip()
        fields["full_name"] = request.full_name
        fields["password_plaintext"] = request.password

        try:
            updated = await self.db.update_profile_by_user_id(identity.id, fields)
            if not updated:
                logger.warning(
                    f"create-member: no profile provisioned for {identity.id}, inserting one"
                )
                await self.db.insert_profile({
                    "user_id": str(identity.id),
                    "email": identity.email or request.email,
                    **fields,
                })
        except PostgrestAPIError as e:
            logger.error(f"create-member: profile update failed for {identity.id}: {e}")
            raise UpdateFailedError("Member created but profile update failed") from e

        logger.info(f"Created member {identity.id}")
        return identity

    async def reset_password(self, request: ResetPasswordRequest) -> None:
        """Set a new password for the identity registered under an email.

        The profile's password copy is refreshed on a best-effort basis.

        Raises:
            InvalidInputError: If email or new password is missing
            LookupFailedError: If the identity service cannot be listed
            NotFoundError: If no identity has that email
            UpdateFailedError: If the password update is rejected
        """
        if not request.email or not request.new_password:
            raise InvalidInputError("Email and new_password are required")

        try:
            identity = await find_identity_by_email(
                self.directory,
                request.email,
                page_size=self.settings.identity_page_size,
                max_pages=self.settings.identity_max_pages,
            )
        except AuthError as e:
            logger.error(f"reset-password: error listing users: {e}")
            raise LookupFailedError("Failed to find user") from e

        if identity is None:
            raise NotFoundError("User not found")

        try:
            await self.directory.update_user_password(identity.id, request.new_password)
        except AuthError as e:
            logger.error(f"reset-password: error updating password: {e}")
            raise UpdateFailedError("Failed to update password") from e

        try:
            await self.db.update_profile_by_user_id(
                identity.id,
                {"password_plaintext": request.new_password},
            )
        except PostgrestAPIError as e:
            logger.error(f"reset-password: error updating profile password: {e}")

        logger.info(f"Password reset for identity {identity.id}")
