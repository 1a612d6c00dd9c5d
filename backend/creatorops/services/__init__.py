"""
Business logic services.
"""
from .auth_service import AuthService, get_auth_service
from .import_session import ImportSession, ImportState

__all__ = ["AuthService", "get_auth_service", "ImportSession", "ImportState"]
