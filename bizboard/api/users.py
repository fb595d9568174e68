"""Self-service profile endpoints."""

from fastapi import APIRouter, Depends

from ..core.config import Settings
from ..core.dependencies import get_app_settings, get_storage
from ..core.exceptions import ConflictError, NotFoundError
from ..core.security import get_current_user, get_password_hash
from ..core.security_decorators import log_sensitive_operations
from ..storage import Storage
from .. import models, schemas

router = APIRouter(prefix="/api/user", tags=["User Profile"])


@router.patch("/profile", response_model=schemas.UserResponse)
@log_sensitive_operations("profile_update")
async def update_profile(
    profile: schemas.UserProfileUpdate,
    current_user: models.User = Depends(get_current_user),
    settings: Settings = Depends(get_app_settings),
    storage: Storage = Depends(get_storage),
) -> models.User:
    """
    Update the caller's own profile.

    Changing the email to one held by another account is a conflict; a new
    password is hashed before it is stored.
    """
    updates = schemas.partial_updates(profile, nullable=("job_title",))

    if "email" in updates:
        existing = storage.get_user_by_email(updates["email"])
        if existing and existing.id != current_user.id:
            raise ConflictError("email")
    if "password" in updates:
        updates["password"] = get_password_hash(updates["password"], settings.BCRYPT_ROUNDS)

    user = storage.update_user(current_user.id, updates)
    if not user:
        raise NotFoundError("User")
    return user
