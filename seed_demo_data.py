#!/usr/bin/env python3
"""Seed a demo tenant: company, admin user, KPIs, chart series, recommendations and notifications."""

import random
import sys
from datetime import timedelta

from bizboard.core.config import settings
from bizboard.core.database import Database
from bizboard.core.exceptions import ConflictError
from bizboard.core.security import get_password_hash
from bizboard.models import utcnow
from bizboard.storage import create_storage
from bizboard import schemas

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo-password"


def seed_demo_data():
    """Create the demo tenant. Refuses to run twice against the same database."""
    database = Database(settings.DATABASE_URL)
    database.create_all()
    storage = create_storage(settings, database)

    try:
        if storage.get_user_by_email(DEMO_EMAIL):
            print(f"⚠️  Demo user {DEMO_EMAIL} already exists, nothing to do")
            return

        print("🔧 Creating demo company...")
        company = storage.create_company(
            schemas.CompanyInsert(name="Acme Analytics", industry="Retail", website="https://acme.example")
        )
        admin = storage.create_user(
            schemas.UserInsert(
                email=DEMO_EMAIL,
                password=get_password_hash(DEMO_PASSWORD, settings.BCRYPT_ROUNDS),
                first_name="Demo",
                last_name="Admin",
                job_title="Head of Growth",
                role=schemas.UserRole.ADMIN,
                company_id=company.id,
            )
        )

        print("📊 Creating KPI metrics...")
        kpis = [
            ("Total Revenue", "$48,250", "$42,100", "+14.6%", "DollarSign", "green"),
            ("Active Users", "2,340", "2,180", "+7.3%", "Users", "blue"),
            ("Conversion Rate", "3.2%", "3.5%", "-0.3%", "TrendingUp", "orange"),
            ("Avg. Order Value", "$86", "$81", "+6.2%", "ShoppingCart", "purple"),
        ]
        for name, value, previous, change, icon, color in kpis:
            storage.create_kpi_metric(
                schemas.KpiMetricInsert(
                    company_id=company.id,
                    name=name,
                    value=value,
                    previous_value=previous,
                    change_percentage=change,
                    period="Last 30 days",
                    icon=icon,
                    color=color,
                )
            )

        print("📈 Creating chart series...")
        today = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
        users = 1800
        for days_ago in range(60, -1, -1):
            day = today - timedelta(days=days_ago)
            label = day.strftime("%b %d")
            storage.create_chart_data_point(
                schemas.ChartDataPointInsert(
                    company_id=company.id,
                    chart_type="revenue",
                    label=label,
                    value=round(random.uniform(1200, 2200), 2),
                    date=day,
                )
            )
            users += random.randint(-5, 20)
            storage.create_chart_data_point(
                schemas.ChartDataPointInsert(
                    company_id=company.id,
                    chart_type="users",
                    label=label,
                    value=users,
                    date=day,
                )
            )

        print("🤖 Creating AI recommendations...")
        storage.create_recommendation(
            schemas.RecommendationInsert(
                company_id=company.id,
                title="Re-engage lapsed customers",
                description="Customers inactive for 60 days respond well to a discount campaign.",
                category="Marketing",
                priority="high",
                confidence=87,
                estimated_impact="+$4,000/month",
                required_actions=["Segment lapsed customers", "Launch email campaign"],
            )
        )
        storage.create_recommendation(
            schemas.RecommendationInsert(
                company_id=company.id,
                title="Raise free shipping threshold",
                description="Most orders land just under the current threshold.",
                category="Pricing",
                priority="medium",
                confidence=72,
                estimated_impact="+5% AOV",
                required_actions=["Update checkout rules"],
            )
        )

        print("🔔 Creating notifications...")
        storage.create_notification(
            schemas.NotificationInsert(
                user_id=admin.id,
                title="Welcome to Bizboard",
                message="Connect an integration to start syncing data.",
                type=schemas.NotificationType.INFO,
            )
        )
        storage.create_notification(
            schemas.NotificationInsert(
                user_id=admin.id,
                title="Revenue is up",
                message="Revenue grew 14.6% over the previous period.",
                type=schemas.NotificationType.SUCCESS,
            )
        )

        print(f"✅ Demo data created. Sign in as {DEMO_EMAIL} / {DEMO_PASSWORD}")
    except ConflictError as e:
        print(f"❌ Demo data conflicts with existing rows: {e}")
        sys.exit(1)
    finally:
        storage.close()


if __name__ == "__main__":
    seed_demo_data()
