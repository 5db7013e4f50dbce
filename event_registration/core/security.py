"""
Password hashing, JWT issuance and the auth dependencies used by the routes.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from event_registration.core.config import get_settings
from event_registration.core.exceptions import AdminRequiredError, InvalidCredentialsError
from event_registration.core.logging import get_logger
from event_registration.db.session import get_db
from event_registration.models.user import User, UserRole

logger = get_logger(__name__)
settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Encode `data` as an HS256 JWT. `sub` is expected to hold the user id."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode["exp"] = expire
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token to a stored user. Raises 401 otherwise."""
    credentials_error = InvalidCredentialsError("Could not validate credentials")
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        user_id = uuid.UUID(payload.get("sub") or "")
    except (JWTError, ValueError) as e:
        logger.warning("token_rejected", error=str(e))
        raise credentials_error

    user = await db.get(User, user_id)
    if user is None:
        logger.warning("token_user_missing", user_id=str(user_id))
        raise credentials_error
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.ADMIN.value:
        logger.warning("admin_required", user_id=str(current_user.id))
        raise AdminRequiredError()
    return current_user
