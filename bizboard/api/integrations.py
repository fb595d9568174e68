"""Third-party integration endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Path, Response, status

from ..core.dependencies import get_storage
from ..core.exceptions import NotFoundError
from ..core.security import get_company_user, require_editor
from ..core.security_decorators import log_sensitive_operations
from ..models import MAX_ID, utcnow
from ..storage import Storage
from .. import models, schemas

router = APIRouter(prefix="/api/integrations", tags=["Integrations"])


def _record_activity(
    storage: Storage,
    user: models.User,
    activity_type: schemas.ActivityType,
    description: str,
    integration_id: int,
) -> None:
    storage.create_activity(
        schemas.ActivityInsert(
            company_id=user.company_id,
            user_id=user.id,
            type=activity_type.value,
            description=description,
            source="Integrations",
            metadata={"integrationId": integration_id},
        )
    )


@router.get("", response_model=List[schemas.IntegrationResponse])
async def list_integrations(
    current_user: models.User = Depends(get_company_user),
    storage: Storage = Depends(get_storage),
) -> List[models.Integration]:
    """Get all integrations for the caller's company."""
    return storage.list_company_integrations(current_user.company_id)


@router.post("", response_model=schemas.IntegrationResponse, status_code=status.HTTP_201_CREATED)
async def create_integration(
    integration: schemas.IntegrationCreate,
    current_user: models.User = Depends(require_editor),
    storage: Storage = Depends(get_storage),
) -> models.Integration:
    """
    Connect a new integration.

    The company always comes from the session, never from the body. An
    ``integration_added`` activity is recorded for the company feed.
    """
    integration_in = schemas.IntegrationInsert(
        **integration.model_dump(), company_id=current_user.company_id
    )
    created = storage.create_integration(integration_in)
    _record_activity(
        storage,
        current_user,
        schemas.ActivityType.INTEGRATION_ADDED,
        f"{created.name} integration was added",
        created.id,
    )
    return created


@router.get("/{integration_id}", response_model=schemas.IntegrationResponse)
async def get_integration(
    integration_id: int = Path(..., ge=1, le=MAX_ID, description="ID of the integration"),
    current_user: models.User = Depends(get_company_user),
    storage: Storage = Depends(get_storage),
) -> models.Integration:
    integration = storage.get_integration(integration_id, company_id=current_user.company_id)
    if not integration:
        raise NotFoundError("Integration")
    return integration


@router.patch("/{integration_id}", response_model=schemas.IntegrationResponse)
async def update_integration(
    integration_id: int = Path(..., ge=1, le=MAX_ID, description="ID of the integration"),
    integration: schemas.IntegrationUpdate = ...,
    current_user: models.User = Depends(require_editor),
    storage: Storage = Depends(get_storage),
) -> models.Integration:
    updates = schemas.partial_updates(integration, nullable=("last_sync_at",))
    updated = storage.update_integration(integration_id, updates, company_id=current_user.company_id)
    if not updated:
        raise NotFoundError("Integration")
    return updated


@router.delete("/{integration_id}", status_code=status.HTTP_204_NO_CONTENT)
@log_sensitive_operations("integration_delete")
async def delete_integration(
    integration_id: int = Path(..., ge=1, le=MAX_ID, description="ID of the integration"),
    current_user: models.User = Depends(require_editor),
    storage: Storage = Depends(get_storage),
) -> Response:
    """Remove an integration; 404 if the caller's company has no such integration."""
    integration = storage.get_integration(integration_id, company_id=current_user.company_id)
    if not integration or not storage.delete_integration(integration_id, company_id=current_user.company_id):
        raise NotFoundError("Integration")

    _record_activity(
        storage,
        current_user,
        schemas.ActivityType.INTEGRATION_REMOVED,
        f"{integration.name} integration was removed",
        integration_id,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{integration_id}/sync", response_model=schemas.IntegrationResponse)
async def sync_integration(
    integration_id: int = Path(..., ge=1, le=MAX_ID, description="ID of the integration"),
    current_user: models.User = Depends(require_editor),
    storage: Storage = Depends(get_storage),
) -> models.Integration:
    """Mark an integration as connected and stamp its last sync time."""
    updated = storage.update_integration(
        integration_id,
        {
            "status": schemas.IntegrationStatus.CONNECTED.value,
            "last_sync_at": utcnow(),
        },
        company_id=current_user.company_id,
    )
    if not updated:
        raise NotFoundError("Integration")

    _record_activity(
        storage,
        current_user,
        schemas.ActivityType.INTEGRATION_SYNCED,
        f"{updated.name} integration was synced",
        updated.id,
    )
    return updated
