"""
Authentication Service

Verifies identity-provider session tokens and builds the per-request
context that is handed explicitly to every service call.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from storefront.models import User, Role
from storefront.config import get_settings
from storefront.schemas.shipping import UserCountry
from storefront.services.country import default_user_country
from storefront.services.errors import Unauthorized, Forbidden

SESSION_TOKEN_EXPIRE_MINUTES = 60


def create_session_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a session token signed like the identity provider's (local tooling and tests)."""
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=SESSION_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": user_id, "exp": expire}
    return jwt.encode(to_encode, settings.identity_jwt_secret, algorithm=settings.identity_jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and validate a session token."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.identity_jwt_secret, algorithms=[settings.identity_jwt_algorithm])
    except JWTError:
        return None


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email address."""
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
    """Get a user by ID."""
    return db.query(User).filter(User.id == user_id).first()


def get_current_user_from_token(db: Session, token: str) -> Optional[User]:
    """Get the current user from a session token."""
    payload = decode_token(token)
    if payload is None:
        return None

    sub = payload.get("sub")
    if not sub:
        return None

    return get_user_by_id(db, str(sub))


@dataclass
class RequestContext:
    """Who is asking, and from which country."""
    user: Optional[User] = None
    country: UserCountry = field(default_factory=default_user_country)

    def require_user(self) -> User:
        if self.user is None:
            raise Unauthorized("Unauthenticated")
        return self.user

    def require_role(self, role: Role) -> User:
        user = self.require_user()
        if user.role != role:
            raise Forbidden(
                f"Unauthorized Access: {role.value.title()} Privileges Required for Entry.",
                required_role=role.value,
            )
        return user
