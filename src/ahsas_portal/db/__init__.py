"""Supabase access for profiles, roles and identities."""

from ahsas_portal.db.client import DatabaseClient, create_admin_client
from ahsas_portal.db.directory import IdentityDirectory

__all__ = ["DatabaseClient", "IdentityDirectory", "create_admin_client"]
