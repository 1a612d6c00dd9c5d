"""
Password hashing and JWT issuing for team member accounts.

Access tokens authenticate API calls; refresh tokens only mint new pairs.
Both carry the user id in ``sub`` and are told apart by their ``type`` claim.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from ..config import get_settings
from ..models.user import User, UserRole

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS = "access"
REFRESH = "refresh"


class AuthService:

    def __init__(self):
        settings = get_settings()
        self.secret_key = settings.jwt_secret_key
        self.algorithm = settings.jwt_algorithm
        self.lifetimes = {
            ACCESS: timedelta(minutes=settings.access_token_expire_minutes),
            REFRESH: timedelta(days=settings.refresh_token_expire_days),
        }

    @property
    def refresh_cookie_max_age(self) -> int:
        return int(self.lifetimes[REFRESH].total_seconds())

    def hash_password(self, password: str) -> str:
        return pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        return pwd_context.verify(plain_password, hashed_password)

    def _encode(self, user_id: str, email: str, token_type: str) -> str:
        claims = {
            "sub": user_id,
            "email": email,
            "type": token_type,
            "exp": datetime.now(timezone.utc) + self.lifetimes[token_type],
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def create_access_token(self, user_id: str, email: str) -> str:
        return self._encode(user_id, email, ACCESS)

    def create_tokens(self, user: User) -> Tuple[str, str]:
        """Return a fresh (access, refresh) pair for ``user``."""
        return self._encode(user.id, user.email, ACCESS), self._encode(user.id, user.email, REFRESH)

    def decode_token(self, token: str, token_type: str) -> Optional[dict]:
        """Claims of a valid, unexpired token of the given type, else None."""
        try:
            claims = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"Rejected {token_type} token: {e}")
            return None
        if claims.get("type") != token_type:
            logger.warning(f"Expected {token_type} token, got {claims.get('type')}")
            return None
        return claims

    def verify_access_token(self, token: str) -> Optional[dict]:
        return self.decode_token(token, ACCESS)

    def verify_refresh_token(self, token: str) -> Optional[dict]:
        return self.decode_token(token, REFRESH)

    def authenticate_user(self, db: Session, email: str, password: str) -> Optional[User]:
        """The user owning ``email`` if ``password`` matches, else None."""
        user = self.get_user_by_email(db, email)
        if user and self.verify_password(password, user.hashed_password):
            return user
        return None

    def create_user(
        self,
        db: Session,
        email: str,
        password: str,
        name: Optional[str] = None,
        role: Optional[str] = None,
    ) -> User:
        """
        Create an account. Without an explicit role the very first account
        becomes admin (so someone can hand out roles) and every later one
        starts as associate.
        """
        if role is None:
            is_first = db.query(User.id).first() is None
            role = UserRole.ADMIN.value if is_first else UserRole.ASSOCIATE.value

        user = User(
            email=email.lower(),
            hashed_password=self.hash_password(password),
            name=name,
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    def get_user_by_id(self, db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.lower()).first()


_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Process-wide AuthService, built on first use."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
