"""
Authentication service handling user signup and login.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from event_registration.models.user import User, UserRole
from event_registration.schemas.user import UserCreate, UserLogin
from event_registration.core.config import get_settings
from event_registration.core.exceptions import EmailAlreadyRegisteredError, InvalidCredentialsError
from event_registration.core.security import hash_password, verify_password, create_access_token
from event_registration.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()


def _role_for(email: str) -> str:
    admins = {e.lower() for e in settings.ADMIN_EMAILS}
    return UserRole.ADMIN.value if email.lower() in admins else UserRole.USER.value


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Register a new user with hashed password.
    Raises 409 if the email already exists.
    """
    result = await db.execute(select(User).where(User.email == user_data.email))
    if result.scalar_one_or_none():
        logger.warning("signup_failed", reason="email_exists", email=user_data.email)
        raise EmailAlreadyRegisteredError()

    user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
        role=_role_for(user_data.email),
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.info("user_signed_up", user_id=str(user.id), role=user.role)
    return user


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> str:
    """
    Authenticate user and return JWT access token.
    Raises 401 if credentials are invalid.
    """
    result = await db.execute(select(User).where(User.email == login_data.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning("login_failed", email=login_data.email)
        raise InvalidCredentialsError()

    token = create_access_token(data={"sub": str(user.id), "role": user.role})
    logger.info("user_logged_in", user_id=str(user.id))
    return token
