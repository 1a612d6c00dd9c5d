"""
Request dependencies: bearer-token authentication and role gates.
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from .database import get_db
from .models.user import User, UserRole, MANAGER_ROLES
from .services.auth_service import get_auth_service

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    Resolve the caller from the ``Authorization: Bearer`` access token.

    401 when the token is missing, invalid, expired or a refresh token;
    403 when the account has been deactivated.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    auth_service = get_auth_service()
    payload = auth_service.verify_access_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise _unauthorized("Could not validate credentials")

    user = auth_service.get_user_by_id(db, payload["sub"])
    if user is None:
        raise _unauthorized("Could not validate credentials")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is deactivated")

    return user


def require_roles(*roles: str):
    """Dependency factory limiting an endpoint to ``roles``. The 403 names the caller's role."""
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            logger.info(f"{current_user.email} ({current_user.role}) refused: needs {', '.join(roles)}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Only {' and '.join(roles)} can perform this action. Your role: {current_user.role}"
            )
        return current_user

    return checker


require_manager = require_roles(*MANAGER_ROLES)
require_admin = require_roles(UserRole.ADMIN.value)
