"""API routes module."""

from .auth import router as auth_router
from .users import router as users_router
from .dashboard import router as dashboard_router
from .recommendations import router as recommendations_router
from .integrations import router as integrations_router
from .team import router as team_router
from .company import router as company_router
from .activities import router as activities_router
from .notifications import router as notifications_router
from .system import router as system_router

__all__ = [
    "auth_router",
    "users_router",
    "dashboard_router",
    "recommendations_router",
    "integrations_router",
    "team_router",
    "company_router",
    "activities_router",
    "notifications_router",
    "system_router",
]
