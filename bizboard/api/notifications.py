"""Per-user notification endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from ..core.dependencies import get_storage
from ..core.exceptions import NotFoundError
from ..core.security import get_current_user
from ..storage import Storage
from ..models import MAX_ID
from .. import models, schemas

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=List[schemas.NotificationResponse])
async def list_notifications(
    current_user: models.User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> List[models.Notification]:
    """The caller's notifications, newest first."""
    return storage.list_user_notifications(current_user.id)


@router.post("", response_model=schemas.NotificationResponse, status_code=status.HTTP_201_CREATED)
async def create_notification(
    notification: schemas.NotificationCreate,
    current_user: models.User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> models.Notification:
    """
    Create a notification for the caller, or for another user of the caller's
    company. Any other recipient is reported as not found.
    """
    recipient_id = notification.user_id or current_user.id
    if recipient_id != current_user.id:
        recipient = storage.get_user(recipient_id)
        if (
            not recipient
            or current_user.company_id is None
            or recipient.company_id != current_user.company_id
        ):
            raise NotFoundError("User")

    values = notification.model_dump(exclude={"user_id"})
    return storage.create_notification(schemas.NotificationInsert(**values, user_id=recipient_id))


@router.get("/unread-count", response_model=schemas.UnreadCountResponse)
async def unread_count(
    current_user: models.User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> schemas.UnreadCountResponse:
    return schemas.UnreadCountResponse(count=storage.count_unread_notifications(current_user.id))


@router.patch("/read-all", response_model=schemas.BulkReadResponse)
async def mark_all_read(
    current_user: models.User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> schemas.BulkReadResponse:
    """Mark every unread notification of the caller as read."""
    return schemas.BulkReadResponse(updated=storage.mark_all_notifications_read(current_user.id))


@router.patch("/{notification_id}/read", response_model=schemas.MarkReadResponse)
async def mark_read(
    notification_id: int = Path(..., ge=1, le=MAX_ID, description="ID of the notification"),
    current_user: models.User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> schemas.MarkReadResponse:
    """Mark one notification read. Repeating the call is harmless."""
    if not storage.mark_notification_read(notification_id, user_id=current_user.id):
        raise NotFoundError("Notification")
    return schemas.MarkReadResponse(success=True)
