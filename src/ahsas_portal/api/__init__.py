"""FastAPI routes for the AHSAS portal functions."""

from ahsas_portal.api.auth import AdminCaller
from ahsas_portal.api.routes import router

__all__ = ["AdminCaller", "router"]
