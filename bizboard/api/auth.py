"""Authentication endpoints: registration, login, logout and the current principal."""

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from ..core.config import Settings
from ..core.dependencies import get_app_settings, get_storage
from ..core.exceptions import AuthError, ConflictError
from ..core.security import (
    get_current_user,
    get_password_hash,
    issue_session,
    verify_password,
)
from ..storage import Storage
from .. import models, schemas

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Authentication"])


def _set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    response: Response,
    user_in: schemas.RegisterRequest,
    settings: Settings = Depends(get_app_settings),
    storage: Storage = Depends(get_storage),
) -> schemas.AuthResponse:
    """
    Register a new account.

    Creates a company for the new user and makes them its admin, then signs
    them in.
    """
    if storage.get_user_by_email(user_in.email):
        raise ConflictError("email")

    company_name = user_in.company_name or f"{user_in.first_name} {user_in.last_name}'s Company"
    user = storage.create_company_with_admin(
        schemas.CompanyInsert(name=company_name),
        schemas.UserInsert(
            email=user_in.email,
            password=get_password_hash(user_in.password, settings.BCRYPT_ROUNDS),
            first_name=user_in.first_name,
            last_name=user_in.last_name,
            job_title=user_in.job_title,
            role=schemas.UserRole.ADMIN,
        ),
    )
    logger.info(f"Registered user {user.id} with company {user.company_id}")

    token, _ = issue_session(storage, user, settings, request)
    _set_session_cookie(response, token, settings)
    return schemas.AuthResponse(user=schemas.UserResponse.model_validate(user), access_token=token)


@router.post("/login", response_model=schemas.AuthResponse)
async def login(
    request: Request,
    response: Response,
    credentials: schemas.LoginRequest,
    settings: Settings = Depends(get_app_settings),
    storage: Storage = Depends(get_storage),
) -> schemas.AuthResponse:
    """Authenticate with email and password and open a session."""
    user = storage.get_user_by_email(credentials.email)
    if not user or not verify_password(credentials.password, user.password):
        logger.info(f"Failed login attempt for {credentials.email}")
        raise AuthError(AuthError.UNAUTHENTICATED, "Invalid email or password")
    if not user.is_active:
        raise AuthError(AuthError.UNAUTHENTICATED, "Account is disabled")

    storage.touch_user_activity(user.id)
    token, _ = issue_session(storage, user, settings, request)
    _set_session_cookie(response, token, settings)
    logger.info(f"User {user.id} logged in")

    user = storage.get_user(user.id)
    return schemas.AuthResponse(user=schemas.UserResponse.model_validate(user), access_token=token)


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    current_user: models.User = Depends(get_current_user),
    settings: Settings = Depends(get_app_settings),
    storage: Storage = Depends(get_storage),
) -> dict:
    """Revoke the current session and clear the cookie."""
    storage.revoke_session(request.state.session_token_id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    logger.info(f"User {current_user.id} logged out")
    return {"success": True}


@router.get("/user", response_model=schemas.UserResponse)
async def read_current_user(current_user: models.User = Depends(get_current_user)) -> models.User:
    return current_user
