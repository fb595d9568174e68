"""AI recommendation endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from ..core.dependencies import get_storage
from ..core.exceptions import NotFoundError
from ..core.security import get_company_user, require_editor
from ..storage import Storage
from ..models import MAX_ID
from .. import models, schemas

router = APIRouter(prefix="/api/ai-recommendations", tags=["AI Recommendations"])


@router.get("", response_model=List[schemas.RecommendationResponse])
async def list_recommendations(
    current_user: models.User = Depends(get_company_user),
    storage: Storage = Depends(get_storage),
) -> List[models.AiRecommendation]:
    """Recommendations for the caller's company, most confident first."""
    return storage.list_company_recommendations(current_user.company_id)


@router.post("", response_model=schemas.RecommendationResponse, status_code=status.HTTP_201_CREATED)
async def create_recommendation(
    recommendation: schemas.RecommendationCreate,
    current_user: models.User = Depends(require_editor),
    storage: Storage = Depends(get_storage),
) -> models.AiRecommendation:
    recommendation_in = schemas.RecommendationInsert(
        **recommendation.model_dump(), company_id=current_user.company_id
    )
    return storage.create_recommendation(recommendation_in)


@router.patch("/{recommendation_id}", response_model=schemas.RecommendationResponse)
async def update_recommendation(
    recommendation_id: int = Path(..., ge=1, le=MAX_ID, description="ID of the recommendation"),
    recommendation: schemas.RecommendationUpdate = ...,
    current_user: models.User = Depends(require_editor),
    storage: Storage = Depends(get_storage),
) -> models.AiRecommendation:
    """
    Partially update a recommendation.

    Marking it implemented stamps ``implementedAt`` once and records an
    activity in the company feed.
    """
    existing = storage.get_recommendation(recommendation_id, company_id=current_user.company_id)
    if not existing:
        raise NotFoundError("Recommendation")

    updates = schemas.partial_updates(recommendation)
    updated = storage.update_recommendation(
        recommendation_id, updates, company_id=current_user.company_id
    )
    if not updated:
        raise NotFoundError("Recommendation")

    if updated.is_implemented and not existing.is_implemented:
        storage.create_activity(
            schemas.ActivityInsert(
                company_id=current_user.company_id,
                user_id=current_user.id,
                type=schemas.ActivityType.RECOMMENDATION_IMPLEMENTED.value,
                description=f"Implemented recommendation: {updated.title}",
                source="AI Recommendations",
                metadata={"recommendationId": updated.id},
            )
        )
    return updated
