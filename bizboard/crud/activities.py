"""Activity feed CRUD operations."""

from typing import List
from sqlalchemy.orm import Session

from ..models import Activity
from .. import schemas
from .common import to_column_values


def list_company_activities(db: Session, company_id: int, limit: int = 10) -> List[Activity]:
    """Newest activities first, at most ``limit`` of them."""
    return (
        db.query(Activity)
        .filter(Activity.company_id == company_id)
        .order_by(Activity.created_at.desc(), Activity.id.desc())
        .limit(limit)
        .all()
    )


def create_activity(db: Session, activity_in: schemas.ActivityInsert) -> Activity:
    db_activity = Activity(**to_column_values(activity_in.model_dump()))
    db.add(db_activity)
    db.commit()
    db.refresh(db_activity)
    return db_activity
