"""Company activity feed endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Query, status

from ..core.dependencies import get_storage
from ..core.security import get_company_user, require_editor
from ..storage import Storage
from .. import models, schemas

router = APIRouter(prefix="/api/activities", tags=["Activities"])


@router.get("", response_model=List[schemas.ActivityResponse])
async def list_activities(
    limit: int = Query(10, ge=1, le=100, description="Maximum number of entries"),
    current_user: models.User = Depends(get_company_user),
    storage: Storage = Depends(get_storage),
) -> List[models.Activity]:
    """Most recent activities for the caller's company, newest first."""
    return storage.list_company_activities(current_user.company_id, limit=limit)


@router.post("", response_model=schemas.ActivityResponse, status_code=status.HTTP_201_CREATED)
async def create_activity(
    activity: schemas.ActivityCreate,
    current_user: models.User = Depends(require_editor),
    storage: Storage = Depends(get_storage),
) -> models.Activity:
    activity_in = schemas.ActivityInsert(
        **activity.model_dump(),
        company_id=current_user.company_id,
        user_id=current_user.id,
    )
    return storage.create_activity(activity_in)
