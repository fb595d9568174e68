"""KPI metric and chart series CRUD operations."""

from datetime import timedelta
from typing import List, Optional
from sqlalchemy.orm import Session

from ..models import KpiMetric, ChartDataPoint, utcnow
from .. import schemas
from .common import apply_updates, as_utc, is_valid_id, to_column_values

REVENUE_CHART = "revenue"
USERS_CHART = "users"


def list_company_kpi_metrics(db: Session, company_id: int) -> List[KpiMetric]:
    return (
        db.query(KpiMetric)
        .filter(KpiMetric.company_id == company_id)
        .order_by(KpiMetric.id)
        .all()
    )


def create_kpi_metric(db: Session, metric_in: schemas.KpiMetricInsert) -> KpiMetric:
    db_metric = KpiMetric(**metric_in.model_dump())
    db.add(db_metric)
    db.commit()
    db.refresh(db_metric)
    return db_metric


def update_kpi_metric(
    db: Session,
    metric_id: int,
    updates: dict,
    company_id: Optional[int] = None,
) -> Optional[KpiMetric]:
    if not is_valid_id(metric_id):
        return None
    query = db.query(KpiMetric).filter(KpiMetric.id == metric_id)
    if company_id is not None:
        query = query.filter(KpiMetric.company_id == company_id)
    metric = query.first()
    if not metric:
        return None
    apply_updates(metric, updates)
    db.commit()
    db.refresh(metric)
    return metric


def list_company_chart_data(
    db: Session, company_id: int, chart_type: Optional[str] = None
) -> List[ChartDataPoint]:
    """Get a company's chart points, oldest observation first."""
    query = db.query(ChartDataPoint).filter(ChartDataPoint.company_id == company_id)
    if chart_type:
        query = query.filter(ChartDataPoint.chart_type == chart_type)
    return query.order_by(ChartDataPoint.date.asc(), ChartDataPoint.id.asc()).all()


def create_chart_data_point(
    db: Session, point_in: schemas.ChartDataPointInsert
) -> ChartDataPoint:
    values = to_column_values(point_in.model_dump())
    values["date"] = as_utc(values["date"])
    db_point = ChartDataPoint(**values)
    db.add(db_point)
    db.commit()
    db.refresh(db_point)
    return db_point


def get_revenue_series(
    db: Session, company_id: int, window_days: int = 30
) -> List[ChartDataPoint]:
    """Revenue points observed within the last ``window_days`` days, oldest first."""
    cutoff = utcnow() - timedelta(days=window_days)
    return (
        db.query(ChartDataPoint)
        .filter(
            ChartDataPoint.company_id == company_id,
            ChartDataPoint.chart_type == REVENUE_CHART,
            ChartDataPoint.date >= cutoff,
        )
        .order_by(ChartDataPoint.date.asc(), ChartDataPoint.id.asc())
        .all()
    )


def get_user_series(db: Session, company_id: int) -> List[ChartDataPoint]:
    return list_company_chart_data(db, company_id, chart_type=USERS_CHART)
