from dataclasses import replace
from datetime import date, datetime, timezone

import pytest
import pytz

from app.errors import WarningValidationError
from app.models.discipline import (
    CategorySeverity,
    DeliveryMethod,
    WarningLevel,
    WarningStatus,
)
from app.services.discipline_assembler import WarningDraft, assemble_warning
from app.services.discipline_catalog import CategoryCatalog, CategoryDefinition
from app.services.discipline_escalation import resolve_escalation

JHB = pytz.timezone("Africa/Johannesburg")
NOW = datetime(2024, 6, 15, 10, 0, tzinfo=timezone.utc)

CATALOG = CategoryCatalog(
    [
        CategoryDefinition(
            id="safety",
            name="Safety Violations",
            severity=CategorySeverity.serious,
            escalation_path=(
                WarningLevel.verbal,
                WarningLevel.first_written,
                WarningLevel.final_written,
            ),
            default_validity_months=12,
        )
    ]
)

DRAFT = WarningDraft(
    employee_id="emp-1",
    category_id="safety",
    level="verbal",
    issue_date=date(2024, 6, 14),
    incident_date=date(2024, 6, 12),
    validity_months=6,
    description="  No hard hat on site  ",
    organization_id="org-1",
)


def _fields(exc_info):
    return [e["field"] for e in exc_info.value.errors]


class TestAssembleWarning:
    def test_builds_issued_record(self) -> None:
        record = assemble_warning(DRAFT, CATALOG, NOW, JHB)
        assert record.level == WarningLevel.verbal
        assert record.status == WarningStatus.issued
        assert record.expiry_date == date(2024, 12, 14)
        assert record.description == "No hard hat on site"
        assert record.delivered_at is None
        assert record.organization_id == "org-1"
        assert record.recommended_level is None

    def test_delivered_draft(self) -> None:
        draft = replace(DRAFT, delivered=True, delivery_method="email")
        record = assemble_warning(draft, CATALOG, NOW, JHB)
        assert record.status == WarningStatus.delivered
        assert record.delivery_method == DeliveryMethod.email
        assert record.delivered_at == NOW

    def test_records_recommendation_snapshot(self) -> None:
        recommendation = resolve_escalation("emp-1", "safety", [], CATALOG, NOW, JHB)
        record = assemble_warning(
            replace(DRAFT, level="final_written"), CATALOG, NOW, JHB, recommendation
        )
        assert record.level == WarningLevel.final_written
        assert record.recommended_level == WarningLevel.verbal
        assert record.escalation_reason == recommendation.reason
        assert record.active_warnings_at_time == 0

    def test_missing_required_fields(self) -> None:
        draft = WarningDraft(employee_id="emp-1", category_id="safety", description=" ")
        with pytest.raises(WarningValidationError) as exc_info:
            assemble_warning(draft, CATALOG, NOW, JHB)
        assert _fields(exc_info) == [
            "level",
            "issue_date",
            "incident_date",
            "validity_months",
            "description",
        ]

    def test_rejects_unsupported_validity(self) -> None:
        with pytest.raises(WarningValidationError) as exc_info:
            assemble_warning(replace(DRAFT, validity_months=9), CATALOG, NOW, JHB)
        assert _fields(exc_info) == ["validity_months"]

    def test_rejects_future_issue_date(self) -> None:
        draft = replace(DRAFT, issue_date=date(2024, 6, 16), incident_date=date(2024, 6, 16))
        with pytest.raises(WarningValidationError) as exc_info:
            assemble_warning(draft, CATALOG, NOW, JHB)
        assert _fields(exc_info) == ["issue_date"]

    def test_issue_date_today_is_allowed(self) -> None:
        draft = replace(DRAFT, issue_date=date(2024, 6, 15))
        assert assemble_warning(draft, CATALOG, NOW, JHB).issue_date == date(2024, 6, 15)

    def test_rejects_incident_after_issue(self) -> None:
        draft = replace(DRAFT, incident_date=date(2024, 6, 15))
        with pytest.raises(WarningValidationError) as exc_info:
            assemble_warning(draft, CATALOG, NOW, JHB)
        assert _fields(exc_info) == ["incident_date"]

    def test_rejects_review_not_after_issue(self) -> None:
        draft = replace(DRAFT, review_date=date(2024, 6, 14))
        with pytest.raises(WarningValidationError) as exc_info:
            assemble_warning(draft, CATALOG, NOW, JHB)
        assert _fields(exc_info) == ["review_date"]

    def test_rejects_level_outside_category_path(self) -> None:
        with pytest.raises(WarningValidationError) as exc_info:
            assemble_warning(replace(DRAFT, level="counselling"), CATALOG, NOW, JHB)
        assert _fields(exc_info) == ["level"]
        assert "Counselling Session" in exc_info.value.errors[0]["message"]

    def test_rejects_unknown_level_and_delivery_method(self) -> None:
        draft = replace(DRAFT, level="stern_look", delivery_method="pigeon")
        with pytest.raises(WarningValidationError) as exc_info:
            assemble_warning(draft, CATALOG, NOW, JHB)
        assert _fields(exc_info) == ["level", "delivery_method"]

    def test_collects_every_problem(self) -> None:
        draft = replace(
            DRAFT,
            validity_months=1,
            issue_date=date(2024, 7, 1),
            review_date=date(2024, 6, 1),
        )
        with pytest.raises(WarningValidationError) as exc_info:
            assemble_warning(draft, CATALOG, NOW, JHB)
        assert _fields(exc_info) == ["validity_months", "issue_date", "review_date"]
