"""Data access layer.

``Storage`` is the single seam through which every entity is read or written.
``SQLAlchemyStorage`` is the only implementation; ``create_storage`` picks it
from configuration at startup. Each call opens its own session through
``Database.session()``, so a connection is always released and database
errors surface as ``StorageError``/``ConflictError``.

Reads and updates of a missing id return ``None``; deletes return ``False``.
Passing ``company_id`` (or ``user_id`` for notifications) adds the tenant to
the lookup, so rows of another tenant look exactly like missing rows.
"""

import abc
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from . import crud, models, schemas
from .core.config import Settings
from .core.database import Database

logger = logging.getLogger(__name__)


class Storage(abc.ABC):
    """Typed CRUD/query operations for every entity."""

    # --- Users ---
    @abc.abstractmethod
    def get_user(self, user_id: int) -> Optional[models.User]: ...

    @abc.abstractmethod
    def get_user_by_email(self, email: str) -> Optional[models.User]: ...

    @abc.abstractmethod
    def create_user(self, user_in: schemas.UserInsert) -> models.User:
        """Create a user; raises ``ConflictError`` if the email is taken."""

    @abc.abstractmethod
    def update_user(
        self, user_id: int, updates: Dict[str, Any], company_id: Optional[int] = None
    ) -> Optional[models.User]: ...

    @abc.abstractmethod
    def touch_user_activity(self, user_id: int, min_interval_seconds: int = 0) -> None: ...

    # --- Companies ---
    @abc.abstractmethod
    def get_company(self, company_id: int) -> Optional[models.Company]: ...

    @abc.abstractmethod
    def create_company(self, company_in: schemas.CompanyInsert) -> models.Company: ...

    @abc.abstractmethod
    def create_company_with_admin(
        self, company_in: schemas.CompanyInsert, user_in: schemas.UserInsert
    ) -> models.User:
        """Create a company and its first user atomically; raises ``ConflictError`` on a taken email."""

    @abc.abstractmethod
    def update_company(self, company_id: int, updates: Dict[str, Any]) -> Optional[models.Company]: ...

    @abc.abstractmethod
    def list_company_users(self, company_id: int) -> List[models.User]: ...

    # --- Sessions ---
    @abc.abstractmethod
    def create_session(
        self,
        user_id: int,
        token_id: str,
        expires_at: datetime,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> models.UserSession: ...

    @abc.abstractmethod
    def get_active_session(self, token_id: str) -> Optional[models.UserSession]: ...

    @abc.abstractmethod
    def revoke_session(self, token_id: str) -> bool: ...

    # --- Integrations ---
    @abc.abstractmethod
    def list_company_integrations(self, company_id: int) -> List[models.Integration]: ...

    @abc.abstractmethod
    def get_integration(
        self, integration_id: int, company_id: Optional[int] = None
    ) -> Optional[models.Integration]: ...

    @abc.abstractmethod
    def create_integration(self, integration_in: schemas.IntegrationInsert) -> models.Integration: ...

    @abc.abstractmethod
    def update_integration(
        self, integration_id: int, updates: Dict[str, Any], company_id: Optional[int] = None
    ) -> Optional[models.Integration]: ...

    @abc.abstractmethod
    def delete_integration(self, integration_id: int, company_id: Optional[int] = None) -> bool:
        """Return True iff a row existed and was removed."""

    # --- KPI metrics ---
    @abc.abstractmethod
    def list_company_kpi_metrics(self, company_id: int) -> List[models.KpiMetric]: ...

    @abc.abstractmethod
    def create_kpi_metric(self, metric_in: schemas.KpiMetricInsert) -> models.KpiMetric: ...

    @abc.abstractmethod
    def update_kpi_metric(
        self, metric_id: int, updates: Dict[str, Any], company_id: Optional[int] = None
    ) -> Optional[models.KpiMetric]: ...

    # --- Chart series ---
    @abc.abstractmethod
    def list_company_chart_data(
        self, company_id: int, chart_type: Optional[str] = None
    ) -> List[models.ChartDataPoint]:
        """Points ordered by observation date, oldest first."""

    @abc.abstractmethod
    def create_chart_data_point(self, point_in: schemas.ChartDataPointInsert) -> models.ChartDataPoint: ...

    @abc.abstractmethod
    def get_revenue_series(self, company_id: int, window_days: int = 30) -> List[models.ChartDataPoint]: ...

    @abc.abstractmethod
    def get_user_series(self, company_id: int) -> List[models.ChartDataPoint]: ...

    # --- AI recommendations ---
    @abc.abstractmethod
    def list_company_recommendations(self, company_id: int) -> List[models.AiRecommendation]:
        """Ordered by confidence descending, ties broken most-recent-first."""

    @abc.abstractmethod
    def get_recommendation(
        self, recommendation_id: int, company_id: Optional[int] = None
    ) -> Optional[models.AiRecommendation]: ...

    @abc.abstractmethod
    def create_recommendation(
        self, recommendation_in: schemas.RecommendationInsert
    ) -> models.AiRecommendation: ...

    @abc.abstractmethod
    def update_recommendation(
        self, recommendation_id: int, updates: Dict[str, Any], company_id: Optional[int] = None
    ) -> Optional[models.AiRecommendation]: ...

    # --- Activities ---
    @abc.abstractmethod
    def list_company_activities(self, company_id: int, limit: int = 10) -> List[models.Activity]: ...

    @abc.abstractmethod
    def create_activity(self, activity_in: schemas.ActivityInsert) -> models.Activity: ...

    # --- Notifications ---
    @abc.abstractmethod
    def list_user_notifications(self, user_id: int) -> List[models.Notification]: ...

    @abc.abstractmethod
    def create_notification(self, notification_in: schemas.NotificationInsert) -> models.Notification: ...

    @abc.abstractmethod
    def mark_notification_read(self, notification_id: int, user_id: Optional[int] = None) -> bool: ...

    @abc.abstractmethod
    def mark_all_notifications_read(self, user_id: int) -> int: ...

    @abc.abstractmethod
    def count_unread_notifications(self, user_id: int) -> int: ...

    # --- Lifecycle ---
    @abc.abstractmethod
    def ping(self) -> bool: ...

    @abc.abstractmethod
    def close(self) -> None: ...


class SQLAlchemyStorage(Storage):
    """Relational storage backed by a ``Database`` handed in at construction."""

    def __init__(self, database: Database):
        self.database = database

    # --- Users ---
    def get_user(self, user_id):
        with self.database.session() as db:
            return crud.get_user(db, user_id)

    def get_user_by_email(self, email):
        with self.database.session() as db:
            return crud.get_user_by_email(db, email)

    def create_user(self, user_in):
        with self.database.session() as db:
            return crud.create_user(db, user_in)

    def update_user(self, user_id, updates, company_id=None):
        with self.database.session() as db:
            return crud.update_user(db, user_id, updates, company_id=company_id)

    def touch_user_activity(self, user_id, min_interval_seconds=0):
        with self.database.session() as db:
            crud.touch_user_activity(db, user_id, min_interval_seconds=min_interval_seconds)

    # --- Companies ---
    def get_company(self, company_id):
        with self.database.session() as db:
            return crud.get_company(db, company_id)

    def create_company(self, company_in):
        with self.database.session() as db:
            return crud.create_company(db, company_in)

    def create_company_with_admin(self, company_in, user_in):
        with self.database.session() as db:
            return crud.create_company_with_admin(db, company_in, user_in)

    def update_company(self, company_id, updates):
        with self.database.session() as db:
            return crud.update_company(db, company_id, updates)

    def list_company_users(self, company_id):
        with self.database.session() as db:
            return crud.list_company_users(db, company_id)

    # --- Sessions ---
    def create_session(self, user_id, token_id, expires_at, user_agent=None, ip_address=None):
        with self.database.session() as db:
            return crud.create_session(
                db,
                user_id=user_id,
                token_id=token_id,
                expires_at=expires_at,
                user_agent=user_agent,
                ip_address=ip_address,
            )

    def get_active_session(self, token_id):
        with self.database.session() as db:
            return crud.get_active_session(db, token_id)

    def revoke_session(self, token_id):
        with self.database.session() as db:
            return crud.revoke_session(db, token_id)

    # --- Integrations ---
    def list_company_integrations(self, company_id):
        with self.database.session() as db:
            return crud.list_company_integrations(db, company_id)

    def get_integration(self, integration_id, company_id=None):
        with self.database.session() as db:
            return crud.get_integration(db, integration_id, company_id=company_id)

    def create_integration(self, integration_in):
        with self.database.session() as db:
            return crud.create_integration(db, integration_in)

    def update_integration(self, integration_id, updates, company_id=None):
        with self.database.session() as db:
            return crud.update_integration(db, integration_id, updates, company_id=company_id)

    def delete_integration(self, integration_id, company_id=None):
        with self.database.session() as db:
            return crud.delete_integration(db, integration_id, company_id=company_id)

    # --- KPI metrics ---
    def list_company_kpi_metrics(self, company_id):
        with self.database.session() as db:
            return crud.list_company_kpi_metrics(db, company_id)

    def create_kpi_metric(self, metric_in):
        with self.database.session() as db:
            return crud.create_kpi_metric(db, metric_in)

    def update_kpi_metric(self, metric_id, updates, company_id=None):
        with self.database.session() as db:
            return crud.update_kpi_metric(db, metric_id, updates, company_id=company_id)

    # --- Chart series ---
    def list_company_chart_data(self, company_id, chart_type=None):
        with self.database.session() as db:
            return crud.list_company_chart_data(db, company_id, chart_type=chart_type)

    def create_chart_data_point(self, point_in):
        with self.database.session() as db:
            return crud.create_chart_data_point(db, point_in)

    def get_revenue_series(self, company_id, window_days=30):
        with self.database.session() as db:
            return crud.get_revenue_series(db, company_id, window_days=window_days)

    def get_user_series(self, company_id):
        with self.database.session() as db:
            return crud.get_user_series(db, company_id)

    # --- AI recommendations ---
    def list_company_recommendations(self, company_id):
        with self.database.session() as db:
            return crud.list_company_recommendations(db, company_id)

    def get_recommendation(self, recommendation_id, company_id=None):
        with self.database.session() as db:
            return crud.get_recommendation(db, recommendation_id, company_id=company_id)

    def create_recommendation(self, recommendation_in):
        with self.database.session() as db:
            return crud.create_recommendation(db, recommendation_in)

    def update_recommendation(self, recommendation_id, updates, company_id=None):
        with self.database.session() as db:
            return crud.update_recommendation(db, recommendation_id, updates, company_id=company_id)

    # --- Activities ---
    def list_company_activities(self, company_id, limit=10):
        with self.database.session() as db:
            return crud.list_company_activities(db, company_id, limit=limit)

    def create_activity(self, activity_in):
        with self.database.session() as db:
            return crud.create_activity(db, activity_in)

    # --- Notifications ---
    def list_user_notifications(self, user_id):
        with self.database.session() as db:
            return crud.list_user_notifications(db, user_id)

    def create_notification(self, notification_in):
        with self.database.session() as db:
            return crud.create_notification(db, notification_in)

    def mark_notification_read(self, notification_id, user_id=None):
        with self.database.session() as db:
            return crud.mark_notification_read(db, notification_id, user_id=user_id)

    def mark_all_notifications_read(self, user_id):
        with self.database.session() as db:
            return crud.mark_all_notifications_read(db, user_id)

    def count_unread_notifications(self, user_id):
        with self.database.session() as db:
            return crud.count_unread_notifications(db, user_id)

    # --- Lifecycle ---
    def ping(self):
        return self.database.ping()

    def close(self):
        self.database.dispose()


STORAGE_BACKENDS = {
    "sqlalchemy": SQLAlchemyStorage,
}


def create_storage(settings: Settings, database: Optional[Database] = None) -> Storage:
    """Build the storage implementation named by ``settings.STORAGE_BACKEND``."""
    backend = settings.STORAGE_BACKEND.lower()
    storage_cls = STORAGE_BACKENDS.get(backend)
    if storage_cls is None:
        raise ValueError(f"Unknown storage backend: {settings.STORAGE_BACKEND!r}")
    if database is None:
        database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    logger.info(f"Using {backend} storage backend")
    return storage_cls(database)
