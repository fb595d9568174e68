"""User-related CRUD operations."""

from datetime import timedelta
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models import User, utcnow
from .. import schemas
from .common import apply_updates, is_valid_id, to_column_values


def get_user(db: Session, user_id: int) -> Optional[User]:
    """Get a user by ID."""
    if not is_valid_id(user_id):
        return None
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email (case-insensitive)."""
    return db.query(User).filter(
        func.lower(User.email) == func.lower(email)
    ).first()


def create_user(db: Session, user_in: schemas.UserInsert) -> User:
    """Create a new user. The password must already be hashed."""
    values = to_column_values(user_in.model_dump())
    values["email"] = values["email"].lower()
    db_user = User(**values)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_user(
    db: Session,
    user_id: int,
    updates: dict,
    company_id: Optional[int] = None,
) -> Optional[User]:
    """Apply a partial update. With ``company_id`` the user must belong to that company."""
    if not is_valid_id(user_id):
        return None
    query = db.query(User).filter(User.id == user_id)
    if company_id is not None:
        query = query.filter(User.company_id == company_id)
    user = query.first()
    if not user:
        return None
    if updates.get("email"):
        updates = {**updates, "email": updates["email"].lower()}
    apply_updates(user, updates)
    db.commit()
    db.refresh(user)
    return user


def touch_user_activity(db: Session, user_id: int, min_interval_seconds: int = 0) -> None:
    """Stamp last_active_at, skipping the write if it was stamped recently."""
    now = utcnow()
    query = db.query(User).filter(User.id == user_id)
    if min_interval_seconds > 0:
        cutoff = now - timedelta(seconds=min_interval_seconds)
        query = query.filter((User.last_active_at.is_(None)) | (User.last_active_at < cutoff))
    query.update({User.last_active_at: now}, synchronize_session=False)
    db.commit()


def list_company_users(db: Session, company_id: int) -> List[User]:
    """Get every user attached to a company."""
    return (
        db.query(User)
        .filter(User.company_id == company_id)
        .order_by(User.id)
        .all()
    )
