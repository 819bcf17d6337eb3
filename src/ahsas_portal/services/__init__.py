"""Admin-privileged operations behind the portal functions."""

from ahsas_portal.services.admin_setup import AdminSetup
from ahsas_portal.services.directory_search import find_identity_by_email, get_caller_role
from ahsas_portal.services.members import MemberService

__all__ = ["AdminSetup", "MemberService", "find_identity_by_email", "get_caller_role"]
