"""Notification CRUD operations. Notifications are scoped by user, not company."""

from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models import Notification, utcnow
from .. import schemas
from .common import is_valid_id, to_column_values


def list_user_notifications(db: Session, user_id: int) -> List[Notification]:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .all()
    )


def create_notification(db: Session, notification_in: schemas.NotificationInsert) -> Notification:
    db_notification = Notification(**to_column_values(notification_in.model_dump()))
    if db_notification.is_read:
        db_notification.read_at = utcnow()
    db.add(db_notification)
    db.commit()
    db.refresh(db_notification)
    return db_notification


def mark_notification_read(
    db: Session, notification_id: int, user_id: Optional[int] = None
) -> bool:
    """Mark a notification read.

    Idempotent: an already-read notification still returns True and keeps its
    original read_at.
    """
    if not is_valid_id(notification_id):
        return False
    query = db.query(Notification).filter(Notification.id == notification_id)
    if user_id is not None:
        query = query.filter(Notification.user_id == user_id)
    notification = query.first()
    if not notification:
        return False
    if not notification.is_read or notification.read_at is None:
        notification.is_read = True
        notification.read_at = utcnow()
        db.commit()
    return True


def mark_all_notifications_read(db: Session, user_id: int) -> int:
    """Mark every unread notification of a user read. Returns how many changed."""
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .update(
            {Notification.is_read: True, Notification.read_at: utcnow()},
            synchronize_session=False,
        )
    )
    db.commit()
    return updated


def count_unread_notifications(db: Session, user_id: int) -> int:
    count = (
        db.query(func.count(Notification.id))
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .scalar()
    )
    return count or 0
