"""Integration-related CRUD operations."""

from typing import List, Optional
from sqlalchemy.orm import Session

from ..models import Integration
from .. import schemas
from .common import apply_updates, as_utc, is_valid_id


def _scoped(db: Session, integration_id: int, company_id: Optional[int]):
    query = db.query(Integration).filter(Integration.id == integration_id)
    if company_id is not None:
        query = query.filter(Integration.company_id == company_id)
    return query


def list_company_integrations(db: Session, company_id: int) -> List[Integration]:
    """Get all integrations for a company."""
    return (
        db.query(Integration)
        .filter(Integration.company_id == company_id)
        .order_by(Integration.id)
        .all()
    )


def get_integration(
    db: Session, integration_id: int, company_id: Optional[int] = None
) -> Optional[Integration]:
    if not is_valid_id(integration_id):
        return None
    return _scoped(db, integration_id, company_id).first()


def create_integration(db: Session, integration_in: schemas.IntegrationInsert) -> Integration:
    db_integration = Integration(**integration_in.model_dump())
    db.add(db_integration)
    db.commit()
    db.refresh(db_integration)
    return db_integration


def update_integration(
    db: Session,
    integration_id: int,
    updates: dict,
    company_id: Optional[int] = None,
) -> Optional[Integration]:
    if not is_valid_id(integration_id):
        return None
    integration = _scoped(db, integration_id, company_id).first()
    if not integration:
        return None
    if updates.get("last_sync_at") is not None:
        updates = {**updates, "last_sync_at": as_utc(updates["last_sync_at"])}
    apply_updates(integration, updates)
    db.commit()
    db.refresh(integration)
    return integration


def delete_integration(
    db: Session, integration_id: int, company_id: Optional[int] = None
) -> bool:
    """Delete an integration. Returns True only if a row was removed."""
    if not is_valid_id(integration_id):
        return False
    deleted = _scoped(db, integration_id, company_id).delete(synchronize_session=False)
    db.commit()
    return deleted > 0
