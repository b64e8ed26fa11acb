"""Bearer-token authentication: resolves the calling user's id at the boundary."""

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from bookreview.config import settings
from bookreview.domain.errors import AccessDeniedError

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: UUID, expires_minutes: Optional[int] = None) -> str:
    """Issue a signed token whose ``sub`` claim is the user id."""
    minutes = expires_minutes or settings.access_token_expire_minutes
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    return jwt.encode(
        {"sub": str(user_id), "exp": expire},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str) -> Optional[UUID]:
    """Return the user id carried by a valid token, or None."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return UUID(payload["sub"])
    except (JWTError, KeyError, ValueError):
        return None


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> UUID:
    """FastAPI dependency: the authenticated user's id, or 401."""
    if credentials is None:
        raise AccessDeniedError("User must be authenticated to get recommendations")
    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise AccessDeniedError("Invalid or expired token")
    return user_id
