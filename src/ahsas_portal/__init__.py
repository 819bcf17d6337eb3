"""AHSAS Portal - admin functions for the member portal."""

__version__ = "0.1.0"

from ahsas_portal.exceptions import PortalError

__all__ = ["__version__", "PortalError"]
