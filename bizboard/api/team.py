"""Team management endpoints for the caller's company."""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from ..core.config import Settings
from ..core.dependencies import get_app_settings, get_storage
from ..core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from ..core.security import (
    generate_temporary_password,
    get_company_user,
    get_password_hash,
    require_admin,
)
from ..core.security_decorators import log_sensitive_operations
from ..storage import Storage
from ..models import MAX_ID
from .. import models, schemas

router = APIRouter(prefix="/api/team", tags=["Team"])


@router.get("", response_model=List[schemas.UserResponse])
async def list_team_members(
    current_user: models.User = Depends(get_company_user),
    storage: Storage = Depends(get_storage),
) -> List[models.User]:
    """List every user attached to the caller's company."""
    return storage.list_company_users(current_user.company_id)


@router.post("", response_model=schemas.TeamMemberCreateResponse, status_code=status.HTTP_201_CREATED)
@log_sensitive_operations("team_member_create")
async def add_team_member(
    member: schemas.TeamMemberCreate,
    current_user: models.User = Depends(require_admin),
    settings: Settings = Depends(get_app_settings),
    storage: Storage = Depends(get_storage),
) -> schemas.TeamMemberCreateResponse:
    """Create a user in the caller's company.

    When no password is supplied a temporary one is generated and returned
    once in the response.
    """
    if storage.get_user_by_email(member.email):
        raise ConflictError("email")

    temporary_password = None
    password = member.password
    if not password:
        temporary_password = password = generate_temporary_password()

    user = storage.create_user(
        schemas.UserInsert(
            email=member.email,
            password=get_password_hash(password, settings.BCRYPT_ROUNDS),
            first_name=member.first_name,
            last_name=member.last_name,
            job_title=member.job_title,
            role=member.role,
            company_id=current_user.company_id,
        )
    )
    storage.create_activity(
        schemas.ActivityInsert(
            company_id=current_user.company_id,
            user_id=current_user.id,
            type=schemas.ActivityType.MEMBER_ADDED.value,
            description=f"Added {user.first_name} {user.last_name} to the team",
            source="Team",
            metadata={"memberId": user.id},
        )
    )
    return schemas.TeamMemberCreateResponse(
        user=schemas.UserResponse.model_validate(user),
        temporary_password=temporary_password,
    )


@router.patch("/{user_id}", response_model=schemas.UserResponse)
@log_sensitive_operations("team_member_update")
async def update_team_member(
    user_id: int = Path(..., ge=1, le=MAX_ID, description="ID of the team member"),
    member: schemas.TeamMemberUpdate = ...,
    current_user: models.User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
) -> models.User:
    """Change a member's role, active flag or job title."""
    updates = schemas.partial_updates(member, nullable=("job_title",))
    if user_id == current_user.id and (
        updates.get("is_active") is False
        or updates.get("role", schemas.UserRole.ADMIN.value) != schemas.UserRole.ADMIN.value
    ):
        raise PermissionDeniedError("Admins cannot demote or deactivate themselves")

    updated = storage.update_user(user_id, updates, company_id=current_user.company_id)
    if not updated:
        raise NotFoundError("User")
    return updated
