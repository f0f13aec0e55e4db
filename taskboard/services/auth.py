"""
Authentication service.
"""

from datetime import datetime, timedelta, timezone
from dataclasses import dataclass
from typing import Any

import structlog
from passlib.context import CryptContext
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.config import settings
from taskboard.core.exceptions import ConflictError, UnauthenticatedError
from taskboard.models.user import User, LegacyRole
from taskboard.repositories.user import UserRepository, is_email_conflict

logger = structlog.get_logger()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS = "access"
REFRESH = "refresh"


def hash_password(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain, hashed)


@dataclass
class TokenPair:
    """Access and refresh token pair."""
    access_token: str
    refresh_token: str


def _encode(user_id: int, roles: Any, token_type: str, expires: timedelta, secret: str) -> str:
    payload = {
        "sub": str(user_id),
        "user_id": user_id,
        "roles": roles,
        "type": token_type,
        "exp": datetime.now(timezone.utc) + expires,
    }
    return jwt.encode(payload, secret, algorithm=settings.auth.algorithm)


def create_access_token(user_id: int, roles: Any) -> str:
    """Create JWT access token carrying the legacy role claim."""
    return _encode(
        user_id,
        roles,
        ACCESS,
        timedelta(minutes=settings.auth.access_token_expire_minutes),
        settings.auth.secret_key,
    )


def create_refresh_token(user_id: int, roles: Any) -> str:
    """Create JWT refresh token (separate secret, longer expiry)."""
    return _encode(
        user_id,
        roles,
        REFRESH,
        timedelta(days=settings.auth.refresh_token_expire_days),
        settings.auth.refresh_secret_key,
    )


def decode_token(token: str, token_type: str = ACCESS) -> dict[str, Any]:
    """
    Verify and decode a token of the given type.

    Raises:
        UnauthenticatedError: bad signature, expired, wrong type or no user id
    """
    secret = settings.auth.secret_key if token_type == ACCESS else settings.auth.refresh_secret_key
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.auth.algorithm])
    except JWTError:
        raise UnauthenticatedError("Invalid token")

    if payload.get("type") != token_type:
        raise UnauthenticatedError("Invalid token type")

    payload["user_id"] = token_user_id(payload)
    return payload


def token_user_id(payload: dict[str, Any]) -> int:
    """Positive integer user id from the "user_id" or "sub" claim."""
    raw = payload.get("user_id", payload.get("sub"))
    if isinstance(raw, bool):
        raise UnauthenticatedError("Invalid token")
    try:
        user_id = int(raw)
    except (TypeError, ValueError):
        raise UnauthenticatedError("Invalid token")
    if user_id <= 0:
        raise UnauthenticatedError("Invalid token")
    return user_id


class AuthService:
    """Authentication service."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)

    def create_tokens(self, user: User) -> TokenPair:
        """Create access and refresh token pair."""
        roles = user.role or LegacyRole.USER
        return TokenPair(
            access_token=create_access_token(user.id, roles),
            refresh_token=create_refresh_token(user.id, roles),
        )

    async def register(
        self,
        email: str,
        password: str,
        name: str | None = None,
    ) -> tuple[User, TokenPair]:
        """Register a new user with the default legacy role."""
        if await self.users.get_by_email(email):
            raise ConflictError("Email already exists")

        try:
            user = await self.users.create(
                email=email,
                password_hash=hash_password(password),
                name=name,
                role=LegacyRole.USER,
            )
        except IntegrityError as e:
            if is_email_conflict(e):
                raise ConflictError("Email already exists") from e
            raise

        logger.info("auth.registered", user_id=user.id)
        return user, self.create_tokens(user)

    async def login(self, email: str, password: str) -> tuple[User, TokenPair]:
        """Authenticate user and return tokens."""
        user = await self.users.get_by_email(email)

        if not user or not verify_password(password, user.password_hash):
            logger.info("auth.failed", email=email)
            raise UnauthenticatedError("Invalid credentials")

        logger.info("auth.login", user_id=user.id)
        return user, self.create_tokens(user)

    async def refresh(self, refresh_token: str) -> str:
        """
        Issue a new access token from a refresh token.

        By default the roles claim of the refresh token is re-signed as is.
        With AUTH_REFRESH_RERESOLVE_ROLES the legacy role is read from the
        store and refresh fails for users that no longer exist.
        """
        try:
            payload = decode_token(refresh_token, REFRESH)
        except UnauthenticatedError:
            raise UnauthenticatedError("Invalid refresh token")

        user_id = payload["user_id"]
        roles = payload.get("roles")

        if settings.auth.refresh_reresolve_roles:
            user = await self.users.get_by_id(user_id)
            if user is None:
                raise UnauthenticatedError("Invalid refresh token")
            roles = user.role

        return create_access_token(user_id, roles)

    async def logout(self, user_id: int) -> None:
        """Tokens are stateless; the client drops them."""
        logger.info("auth.logout", user_id=user_id)

    def forgot_password(self, email: str) -> str:
        # Same answer whether or not the address is registered
        logger.info("auth.forgot_password_requested")
        return f"If email {email} exists, a reset link will be sent."
