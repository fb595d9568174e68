"""CRUD operations module.

Plain query functions that take an open SQLAlchemy ``Session``. Only
``bizboard.storage`` calls them; it owns the session lifecycle.
"""

from .users import (
    get_user,
    get_user_by_email,
    create_user,
    update_user,
    touch_user_activity,
    list_company_users,
)
from .companies import (
    get_company,
    create_company,
    create_company_with_admin,
    update_company,
)
from .sessions import (
    create_session,
    get_active_session,
    revoke_session,
)
from .integrations import (
    list_company_integrations,
    get_integration,
    create_integration,
    update_integration,
    delete_integration,
)
from .metrics import (
    list_company_kpi_metrics,
    create_kpi_metric,
    update_kpi_metric,
    list_company_chart_data,
    create_chart_data_point,
    get_revenue_series,
    get_user_series,
)
from .recommendations import (
    list_company_recommendations,
    get_recommendation,
    create_recommendation,
    update_recommendation,
)
from .activities import (
    list_company_activities,
    create_activity,
)
from .notifications import (
    list_user_notifications,
    create_notification,
    mark_notification_read,
    mark_all_notifications_read,
    count_unread_notifications,
)


__all__ = [
    # Users
    "get_user",
    "get_user_by_email",
    "create_user",
    "update_user",
    "touch_user_activity",
    "list_company_users",

    # Companies
    "get_company",
    "create_company",
    "create_company_with_admin",
    "update_company",

    # Sessions
    "create_session",
    "get_active_session",
    "revoke_session",

    # Integrations
    "list_company_integrations",
    "get_integration",
    "create_integration",
    "update_integration",
    "delete_integration",

    # KPI metrics and chart series
    "list_company_kpi_metrics",
    "create_kpi_metric",
    "update_kpi_metric",
    "list_company_chart_data",
    "create_chart_data_point",
    "get_revenue_series",
    "get_user_series",

    # AI recommendations
    "list_company_recommendations",
    "get_recommendation",
    "create_recommendation",
    "update_recommendation",

    # Activities
    "list_company_activities",
    "create_activity",

    # Notifications
    "list_user_notifications",
    "create_notification",
    "mark_notification_read",
    "mark_all_notifications_read",
    "count_unread_notifications",
]
