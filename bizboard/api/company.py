"""Company profile endpoints."""

from fastapi import APIRouter, Depends

from ..core.dependencies import get_storage
from ..core.exceptions import NotFoundError
from ..core.security import get_company_user, require_admin
from ..core.security_decorators import log_sensitive_operations
from ..storage import Storage
from .. import models, schemas

router = APIRouter(prefix="/api/company", tags=["Company"])


@router.get("", response_model=schemas.CompanyResponse)
async def get_company(
    current_user: models.User = Depends(get_company_user),
    storage: Storage = Depends(get_storage),
) -> models.Company:
    company = storage.get_company(current_user.company_id)
    if not company:
        raise NotFoundError("Company")
    return company


@router.patch("", response_model=schemas.CompanyResponse)
@log_sensitive_operations("company_update")
async def update_company(
    company_in: schemas.CompanyUpdate,
    current_user: models.User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
) -> models.Company:
    """Update the caller's company profile (admins only)."""
    updates = schemas.partial_updates(
        company_in, nullable=("industry", "website", "description", "logo")
    )
    company = storage.update_company(current_user.company_id, updates)
    if not company:
        raise NotFoundError("Company")

    storage.create_activity(
        schemas.ActivityInsert(
            company_id=company.id,
            user_id=current_user.id,
            type=schemas.ActivityType.COMPANY_UPDATED.value,
            description="Updated company profile",
            source="Company",
            metadata={"fields": sorted(updates)},
        )
    )
    return company
