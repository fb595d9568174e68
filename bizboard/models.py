# models.py
# SQLAlchemy table definitions for every persisted entity.
# Every business table except users/notifications/sessions hangs off a
# company (the tenant); notifications and sessions hang off a user.

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, JSON, Float, Index

from .core.database import Base

# Largest value an INTEGER primary key can hold
MAX_ID = 2**31 - 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """created_at/updated_at stamped by the data layer on every write."""

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class Company(TimestampMixin, Base):
    """
    Blueprint for the 'companies' table.
    A company is the tenant root: all dashboard data belongs to exactly one.
    """
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    industry = Column(String(100))
    website = Column(String(255))
    description = Column(Text)
    logo = Column(Text)
    settings = Column(JSON, nullable=False, default=dict)


class User(TimestampMixin, Base):
    """
    Blueprint for the 'users' table.
    These are the people who sign in to the dashboard.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    job_title = Column(String(100))
    role = Column(String(50), nullable=False, default="member")
    is_active = Column(Boolean, nullable=False, default=True)
    last_active_at = Column(DateTime(timezone=True), default=utcnow)

    # Nullable only until the user is attached to a company
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=True, index=True)


class UserSession(TimestampMixin, Base):
    """Server-side session store; a session token is valid only while its row is live."""
    __tablename__ = "user_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_id = Column(String(64), unique=True, index=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True))
    user_agent = Column(String(255))
    ip_address = Column(String(64))


class Integration(TimestampMixin, Base):
    __tablename__ = "integrations"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    type = Column(String(50), nullable=False)
    provider = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default="disconnected")
    config = Column(JSON, nullable=False, default=dict)
    credentials = Column(JSON, nullable=False, default=dict)
    last_sync_at = Column(DateTime(timezone=True))
    data_points = Column(Integer, nullable=False, default=0)


class KpiMetric(TimestampMixin, Base):
    __tablename__ = "kpi_metrics"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    value = Column(String(50), nullable=False)
    previous_value = Column(String(50))
    change_percentage = Column(String(20))
    period = Column(String(50), nullable=False)
    icon = Column(String(50), nullable=False)
    color = Column(String(20), nullable=False)


class ChartDataPoint(TimestampMixin, Base):
    """One observation of a company time series ('revenue', 'users', ...)."""
    __tablename__ = "chart_data"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    chart_type = Column(String(50), nullable=False)
    label = Column(String(100), nullable=False)
    value = Column(Float, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSON, nullable=False, default=dict)

    __table_args__ = (
        Index("ix_chart_data_company_type_date", "company_id", "chart_type", "date"),
    )


class AiRecommendation(TimestampMixin, Base):
    __tablename__ = "ai_recommendations"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)
    priority = Column(String(20), nullable=False)
    confidence = Column(Integer, nullable=False)
    is_implemented = Column(Boolean, nullable=False, default=False)
    implemented_at = Column(DateTime(timezone=True))
    estimated_impact = Column(String(100), nullable=False)
    required_actions = Column(JSON, nullable=False, default=list)


class Activity(TimestampMixin, Base):
    """Append-only audit/feed entry for a company."""
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    description = Column(Text, nullable=False)
    source = Column(String(100))
    meta = Column("metadata", JSON, nullable=False, default=dict)


class Notification(TimestampMixin, Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(50), nullable=False, default="info")
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True))
    meta = Column("metadata", JSON, nullable=False, default=dict)

    __table_args__ = (
        Index("ix_notifications_user_read", "user_id", "is_read"),
    )
