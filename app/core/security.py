from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Header
from jose import JWTError, jwt
from sqlalchemy.orm import Session
import logging

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthError
from app.models.user import User

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def create_access_token(user_id: int, email: str) -> str:
    # short-lived token sent on every request
    payload = {
        "user_id": user_id,
        "email": email,
        "exp": datetime.utcnow() + timedelta(minutes=settings.JWT_EXPIRE_MIN),
        "type": "access"
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def create_refresh_token(user_id: int, email: str) -> str:
    payload = {
        "user_id": user_id,
        "email": email,
        "exp": datetime.utcnow() + timedelta(minutes=settings.JWT_REFRESH_EXPIRE_MIN),
        "type": "refresh"
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except JWTError:
        return None


def decode_token(token: str) -> Optional[int]:
    """Return the user id of a valid access token, None otherwise."""
    payload = verify_token(token)
    if payload is None or payload.get("type") != "access":
        return None
    return payload.get("user_id")


class IdentityProvider:
    """Turns the raw Authorization header of a request into an owner id."""

    def authenticate(self, authorization: Optional[str]) -> int:
        raise NotImplementedError


class BearerTokenProvider(IdentityProvider):
    """Accepts ``Authorization: Bearer <access token>`` headers."""

    def authenticate(self, authorization: Optional[str]) -> int:
        if not authorization:
            raise AuthError("Missing token")

        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token:
            raise AuthError("Invalid token")

        user_id = decode_token(token.strip())
        if not user_id:
            logger.debug("Rejected bearer token")
            raise AuthError("Invalid token")
        return user_id


_bearer_provider = BearerTokenProvider()


def get_identity_provider() -> IdentityProvider:
    return _bearer_provider


def get_current_user(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(None),
    provider: IdentityProvider = Depends(get_identity_provider)
) -> User:
    owner_id = provider.authenticate(authorization)

    user = db.query(User).filter(User.id == owner_id).first()
    if not user:
        # deleted account with a still-valid token
        raise AuthError("Invalid token")
    return user
