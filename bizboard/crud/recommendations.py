"""AI recommendation CRUD operations."""

from typing import List, Optional
from sqlalchemy.orm import Session

from ..models import AiRecommendation, utcnow
from .. import schemas
from .common import apply_updates, is_valid_id


def list_company_recommendations(db: Session, company_id: int) -> List[AiRecommendation]:
    """Highest confidence first; ties go to the most recent recommendation."""
    return (
        db.query(AiRecommendation)
        .filter(AiRecommendation.company_id == company_id)
        .order_by(
            AiRecommendation.confidence.desc(),
            AiRecommendation.created_at.desc(),
            AiRecommendation.id.desc(),
        )
        .all()
    )


def get_recommendation(
    db: Session, recommendation_id: int, company_id: Optional[int] = None
) -> Optional[AiRecommendation]:
    if not is_valid_id(recommendation_id):
        return None
    query = db.query(AiRecommendation).filter(AiRecommendation.id == recommendation_id)
    if company_id is not None:
        query = query.filter(AiRecommendation.company_id == company_id)
    return query.first()


def create_recommendation(
    db: Session, recommendation_in: schemas.RecommendationInsert
) -> AiRecommendation:
    values = recommendation_in.model_dump()
    db_recommendation = AiRecommendation(**values)
    if db_recommendation.is_implemented:
        db_recommendation.implemented_at = utcnow()
    db.add(db_recommendation)
    db.commit()
    db.refresh(db_recommendation)
    return db_recommendation


def update_recommendation(
    db: Session,
    recommendation_id: int,
    updates: dict,
    company_id: Optional[int] = None,
) -> Optional[AiRecommendation]:
    """Apply a partial update.

    Flipping ``is_implemented`` on stamps ``implemented_at`` in the same commit.
    An existing stamp is never overwritten or cleared.
    """
    recommendation = get_recommendation(db, recommendation_id, company_id=company_id)
    if not recommendation:
        return None
    apply_updates(recommendation, updates)
    if recommendation.is_implemented and recommendation.implemented_at is None:
        recommendation.implemented_at = utcnow()
    db.commit()
    db.refresh(recommendation)
    return recommendation
