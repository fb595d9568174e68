"""Dashboard endpoints: KPI tiles and chart series for the caller's company."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ..core.dependencies import get_storage
from ..core.exceptions import NotFoundError
from ..core.security import get_company_user, require_editor
from ..storage import Storage
from ..models import MAX_ID
from .. import models, schemas

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


# --- KPI metrics ---

@router.get("/kpi-metrics", response_model=List[schemas.KpiMetricResponse])
async def list_kpi_metrics(
    current_user: models.User = Depends(get_company_user),
    storage: Storage = Depends(get_storage),
) -> List[models.KpiMetric]:
    """Get all KPI metrics for the caller's company."""
    return storage.list_company_kpi_metrics(current_user.company_id)


@router.post("/kpi-metrics", response_model=schemas.KpiMetricResponse, status_code=status.HTTP_201_CREATED)
async def create_kpi_metric(
    metric: schemas.KpiMetricCreate,
    current_user: models.User = Depends(require_editor),
    storage: Storage = Depends(get_storage),
) -> models.KpiMetric:
    metric_in = schemas.KpiMetricInsert(**metric.model_dump(), company_id=current_user.company_id)
    return storage.create_kpi_metric(metric_in)


@router.patch("/kpi-metrics/{metric_id}", response_model=schemas.KpiMetricResponse)
async def update_kpi_metric(
    metric_id: int = Path(..., ge=1, le=MAX_ID, description="ID of the KPI metric"),
    metric: schemas.KpiMetricUpdate = ...,
    current_user: models.User = Depends(require_editor),
    storage: Storage = Depends(get_storage),
) -> models.KpiMetric:
    updates = schemas.partial_updates(metric, nullable=("previous_value", "change_percentage"))
    updated = storage.update_kpi_metric(metric_id, updates, company_id=current_user.company_id)
    if not updated:
        raise NotFoundError("KPI metric")
    return updated


# --- Chart series ---

@router.get("/chart-data", response_model=List[schemas.ChartDataPointResponse])
async def list_chart_data(
    chart_type: Optional[str] = Query(None, alias="type", description="Only points of this series"),
    current_user: models.User = Depends(get_company_user),
    storage: Storage = Depends(get_storage),
) -> List[models.ChartDataPoint]:
    """Get chart points for the caller's company, oldest first."""
    return storage.list_company_chart_data(current_user.company_id, chart_type=chart_type)


@router.post("/chart-data", response_model=schemas.ChartDataPointResponse, status_code=status.HTTP_201_CREATED)
async def create_chart_data_point(
    point: schemas.ChartDataPointCreate,
    current_user: models.User = Depends(require_editor),
    storage: Storage = Depends(get_storage),
) -> models.ChartDataPoint:
    point_in = schemas.ChartDataPointInsert(**point.model_dump(), company_id=current_user.company_id)
    return storage.create_chart_data_point(point_in)


@router.get("/revenue-chart", response_model=List[schemas.ChartDataPointResponse])
async def revenue_chart(
    days: int = Query(30, ge=1, le=365, description="Size of the trailing window in days"),
    current_user: models.User = Depends(get_company_user),
    storage: Storage = Depends(get_storage),
) -> List[models.ChartDataPoint]:
    """Revenue points dated within the last ``days`` days."""
    return storage.get_revenue_series(current_user.company_id, window_days=days)


@router.get("/user-chart", response_model=List[schemas.ChartDataPointResponse])
async def user_chart(
    current_user: models.User = Depends(get_company_user),
    storage: Storage = Depends(get_storage),
) -> List[models.ChartDataPoint]:
    return storage.get_user_series(current_user.company_id)
