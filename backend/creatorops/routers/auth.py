"""
Account endpoints: register, login, token refresh, profile and team roles.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Response, Cookie
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_user, require_admin
from ..services.auth_service import get_auth_service
from ..models.user import User
from ..schemas.auth import (
    UserRegister,
    UserLogin,
    TokenRefresh,
    Token,
    UserResponse,
    UserUpdate,
    RoleUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

REFRESH_COOKIE = "refresh_token"


def _issue_tokens(user: User, response: Optional[Response] = None) -> Token:
    """Build a token pair, mirroring the refresh token into an HTTP-only cookie."""
    auth_service = get_auth_service()
    access_token, refresh_token = auth_service.create_tokens(user)
    if response is not None:
        response.set_cookie(
            key=REFRESH_COOKIE,
            value=refresh_token,
            httponly=True,
            secure=True,
            samesite="lax",
            max_age=auth_service.refresh_cookie_max_age,
        )
    return Token(access_token=access_token, refresh_token=refresh_token)


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """
    Create an account and sign it in.

    The first account on a fresh install is made admin; everyone after that
    joins as an associate until an admin promotes them.
    """
    auth_service = get_auth_service()
    if auth_service.get_user_by_email(db, user_data.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    user = auth_service.create_user(
        db, email=user_data.email, password=user_data.password, name=user_data.name
    )
    logger.info(f"Registered {user.email} as {user.role}")
    return _issue_tokens(user)


@router.post("/login", response_model=Token)
def login(user_data: UserLogin, response: Response, db: Session = Depends(get_db)):
    """Exchange email and password for a token pair."""
    user = get_auth_service().authenticate_user(db, user_data.email, user_data.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")

    logger.info(f"{user.email} logged in")
    return _issue_tokens(user, response)


@router.post("/refresh", response_model=Token)
def refresh_token(
    token_data: Optional[TokenRefresh] = None,
    refresh_token: Optional[str] = Cookie(None),
    db: Session = Depends(get_db)
):
    """Trade a refresh token (request body or cookie) for a new pair."""
    token = token_data.refresh_token if token_data else refresh_token
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Refresh token required")

    auth_service = get_auth_service()
    claims = auth_service.verify_refresh_token(token)
    if not claims:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired refresh token")

    user = auth_service.get_user_by_id(db, claims.get("sub"))
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")

    return _issue_tokens(user)


@router.post("/logout")
def logout(response: Response):
    """Clear the refresh cookie. Issued access tokens live until they expire."""
    response.delete_cookie(key=REFRESH_COOKIE)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/me", response_model=UserResponse)
def update_current_user(
    user_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the caller's display name."""
    if user_data.name is not None:
        current_user.name = user_data.name
        db.commit()
        db.refresh(current_user)
    return current_user


@router.get("/users", response_model=List[UserResponse])
def list_users(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Team directory used for assignee pickers. Associates only see themselves."""
    query = db.query(User)
    if not current_user.is_manager:
        query = query.filter(User.id == current_user.id)
    return query.order_by(User.name).all()


@router.patch("/users/{user_id}/role", response_model=UserResponse)
def update_user_role(
    user_id: str,
    update: RoleUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Promote or demote a team member (admin only)."""
    user = get_auth_service().get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    previous = user.role
    user.role = update.role.value
    db.commit()
    db.refresh(user)

    logger.info(f"{current_user.email} changed {user.email} from {previous} to {user.role}")
    return user
