"""Authentication and authorization.

A login issues a signed JWT whose ``jti`` is stored in the ``user_sessions``
table. A request is authenticated only while that session row is live, so
logout takes effect immediately. The token may arrive as the session cookie
or as an ``Authorization: Bearer`` header.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional, Tuple

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import Settings
from .dependencies import get_app_settings, get_storage
from .exceptions import AuthError, PermissionDeniedError
from .. import models
from ..schemas import UserRole
from ..storage import Storage

logger = logging.getLogger(__name__)

# JWT Bearer scheme
bearer_scheme = HTTPBearer(auto_error=False)

BCRYPT_MAX_BYTES = 72


@lru_cache(maxsize=None)
def _password_context(rounds: int) -> CryptContext:
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__default_rounds=rounds,
        bcrypt__default_ident="2b",
    )


def _truncate(password: str) -> str:
    # bcrypt only looks at the first 72 bytes
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")


def get_password_hash(password: str, rounds: int = 12) -> str:
    """Hash a password using bcrypt."""
    return _password_context(rounds).hash(_truncate(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return _password_context(12).verify(_truncate(plain_password), hashed_password)
    except (ValueError, TypeError):
        # Malformed or unknown hash format
        return False


def generate_temporary_password() -> str:
    return secrets.token_urlsafe(12)


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str, settings: Settings) -> Optional[dict]:
    """Verify and decode a JWT token."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return payload
    except JWTError:
        return None


def get_client_ip(request: Request) -> str:
    """Extract client IP from request headers."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"


def issue_session(
    storage: Storage,
    user: models.User,
    settings: Settings,
    request: Optional[Request] = None,
) -> Tuple[str, datetime]:
    """Create a server-side session for ``user`` and return its signed token."""
    token_id = secrets.token_urlsafe(24)
    lifetime = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expires_at = datetime.now(timezone.utc) + lifetime
    storage.create_session(
        user_id=user.id,
        token_id=token_id,
        expires_at=expires_at,
        user_agent=request.headers.get("user-agent") if request else None,
        ip_address=get_client_ip(request) if request else None,
    )
    token = create_access_token({"sub": str(user.id), "jti": token_id}, settings, expires_delta=lifetime)
    return token, expires_at


def extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
    settings: Settings,
) -> Optional[str]:
    if credentials and credentials.scheme.lower() == "bearer" and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
    storage: Storage = Depends(get_storage),
) -> models.User:
    """Dependency to get the current authenticated user."""
    token = extract_token(request, credentials, settings)
    if not token:
        raise AuthError(AuthError.UNAUTHENTICATED)

    payload = verify_token(token, settings)
    if not payload or not payload.get("jti"):
        raise AuthError(AuthError.UNAUTHENTICATED, "Could not validate credentials: Invalid token")

    session = storage.get_active_session(payload["jti"])
    if not session or str(session.user_id) != str(payload.get("sub")):
        raise AuthError(AuthError.UNAUTHENTICATED, "Session expired or revoked")

    user = storage.get_user(session.user_id)
    if not user or not user.is_active:
        raise AuthError(AuthError.UNAUTHENTICATED, "User not found or inactive")

    storage.touch_user_activity(user.id, min_interval_seconds=settings.ACTIVITY_TOUCH_INTERVAL_SECONDS)
    request.state.session_token_id = payload["jti"]
    return user


async def get_company_user(user: models.User = Depends(get_current_user)) -> models.User:
    """Dependency for tenant-scoped endpoints: the principal must belong to a company."""
    if user.company_id is None:
        raise AuthError(AuthError.NO_COMPANY)
    return user


async def require_editor(user: models.User = Depends(get_company_user)) -> models.User:
    """Viewers may read tenant data but not change it."""
    if user.role == UserRole.VIEWER.value:
        raise PermissionDeniedError("Viewers cannot modify company data")
    return user


async def require_admin(user: models.User = Depends(get_company_user)) -> models.User:
    """Dependency to require admin privileges within the company."""
    if user.role != UserRole.ADMIN.value:
        raise PermissionDeniedError("Admin privileges required")
    return user
