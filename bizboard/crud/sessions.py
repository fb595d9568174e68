"""Server-side session store operations."""

from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from ..models import UserSession, utcnow


def create_session(
    db: Session,
    user_id: int,
    token_id: str,
    expires_at: datetime,
    user_agent: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> UserSession:
    """Record a newly issued session token."""
    db_session = UserSession(
        user_id=user_id,
        token_id=token_id,
        expires_at=expires_at,
        user_agent=(user_agent or "")[:255] or None,
        ip_address=ip_address,
    )
    db.add(db_session)
    db.commit()
    db.refresh(db_session)
    return db_session


def get_active_session(db: Session, token_id: str) -> Optional[UserSession]:
    """Get a session that is neither revoked nor expired."""
    return (
        db.query(UserSession)
        .filter(
            UserSession.token_id == token_id,
            UserSession.revoked_at.is_(None),
            UserSession.expires_at > utcnow(),
        )
        .first()
    )


def revoke_session(db: Session, token_id: str) -> bool:
    """Revoke a session. Returns False if no live session had this token."""
    updated = (
        db.query(UserSession)
        .filter(UserSession.token_id == token_id, UserSession.revoked_at.is_(None))
        .update({UserSession.revoked_at: utcnow()}, synchronize_session=False)
    )
    db.commit()
    return updated > 0
