"""Tests for insert-schema validation and partial update handling."""

import pytest

from bizboard.core.exceptions import ValidationError
from bizboard import schemas


class TestValidateInsert:
    def test_valid_payload_is_normalized(self):
        integration = schemas.validate_insert(
            schemas.IntegrationInsert,
            {"companyId": 1, "name": "HubSpot", "type": "crm", "provider": "hubspot"},
        )
        assert integration.company_id == 1
        assert integration.status == "disconnected"
        assert integration.config == {}
        assert integration.data_points == 0

    def test_snake_case_keys_accepted(self):
        metric = schemas.validate_insert(
            schemas.KpiMetricInsert,
            {
                "company_id": 1,
                "name": "MRR",
                "value": "$10k",
                "period": "Monthly",
                "icon": "Dollar",
                "color": "green",
            },
        )
        assert metric.previous_value is None

    def test_errors_name_every_field(self):
        with pytest.raises(ValidationError) as exc_info:
            schemas.validate_insert(
                schemas.RecommendationInsert,
                {"companyId": 1, "title": "", "confidence": 150},
            )
        fields = set(exc_info.value.fields)
        assert {"title", "confidence", "description", "category", "priority", "estimatedImpact"} <= fields
        assert exc_info.value.status_code == 400

    def test_invalid_status(self):
        with pytest.raises(ValidationError) as exc_info:
            schemas.validate_insert(
                schemas.IntegrationInsert,
                {"companyId": 1, "name": "X", "type": "crm", "provider": "x", "status": "broken"},
            )
        assert exc_info.value.fields == ["status"]

    def test_metadata_must_be_object(self):
        with pytest.raises(ValidationError) as exc_info:
            schemas.validate_insert(
                schemas.ActivityInsert,
                {"companyId": 1, "userId": 1, "type": "note", "description": "d", "metadata": [1, 2]},
            )
        assert exc_info.value.fields == ["metadata"]


class TestPartialUpdates:
    def test_only_sent_fields(self):
        body = schemas.IntegrationUpdate.model_validate({"name": "New"})
        assert schemas.partial_updates(body) == {"name": "New"}

    def test_null_kept_only_for_nullable(self):
        body = schemas.IntegrationUpdate.model_validate({"name": None, "lastSyncAt": None})
        assert schemas.partial_updates(body, nullable=("last_sync_at",)) == {"last_sync_at": None}
