import uuid

import pytest
from fastapi import HTTPException

from app.models.discipline import CategorySeverity
from app.schemas.discipline import WarningCategoryCreate, WarningCategoryUpdate
from app.services.discipline_category import warning_categories


def _create(db_session, organization, **overrides):
    data = {
        "organization_id": organization.id,
        "code": f"cat_{uuid.uuid4().hex[:8]}",
        "name": "Dress Code",
        "severity": "minor",
        "escalation_path": ["counselling", "verbal", "first_written"],
        "default_validity_months": 3,
    }
    data.update(overrides)
    return warning_categories.create(db_session, WarningCategoryCreate(**data))


class TestWarningCategoryCreate:
    def test_create(self, db_session, organization) -> None:
        category = _create(db_session, organization)
        assert category.severity == CategorySeverity.minor
        assert category.escalation_path == ["counselling", "verbal", "first_written"]
        assert category.is_active is True

    def test_empty_path_allowed(self, db_session, organization) -> None:
        category = _create(db_session, organization, escalation_path=[])
        assert category.escalation_path == []

    def test_invalid_severity(self, db_session, organization) -> None:
        with pytest.raises(HTTPException) as exc_info:
            _create(db_session, organization, severity="catastrophic")
        assert exc_info.value.status_code == 400

    def test_invalid_path(self, db_session, organization) -> None:
        with pytest.raises(HTTPException) as exc_info:
            _create(db_session, organization, escalation_path=["verbal", "counselling"])
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail["code"] == "invalid_escalation_path"

    def test_invalid_validity(self, db_session, organization) -> None:
        with pytest.raises(HTTPException) as exc_info:
            _create(db_session, organization, default_validity_months=4)
        assert exc_info.value.status_code == 400

    def test_missing_organization(self, db_session) -> None:
        payload = WarningCategoryCreate(
            organization_id=uuid.uuid4(), code="x", name="X"
        )
        with pytest.raises(HTTPException) as exc_info:
            warning_categories.create(db_session, payload)
        assert exc_info.value.status_code == 404


class TestWarningCategoryQueries:
    def test_get_and_list(self, db_session, organization) -> None:
        minor = _create(db_session, organization, name="A")
        _create(db_session, organization, name="B", severity="serious")

        assert warning_categories.get(db_session, str(minor.id)).name == "A"
        items = warning_categories.list(
            db_session, str(organization.id), "minor", None, "name", "asc", 50, 0
        )
        assert [c.name for c in items] == ["A"]

    def test_list_response_envelope(self, db_session, organization) -> None:
        _create(db_session, organization)
        response = warning_categories.list_response(
            db_session, str(organization.id), None, None, "name", "asc", 10, 0
        )
        assert response["count"] == 1
        assert response["limit"] == 10
        assert response["offset"] == 0

    def test_get_missing(self, db_session) -> None:
        with pytest.raises(HTTPException) as exc_info:
            warning_categories.get(db_session, str(uuid.uuid4()))
        assert exc_info.value.status_code == 404

    def test_invalid_order_by(self, db_session, organization) -> None:
        with pytest.raises(HTTPException) as exc_info:
            warning_categories.list(
                db_session, None, None, None, "severity", "asc", 50, 0
            )
        assert exc_info.value.status_code == 400


class TestWarningCategoryUpdateDelete:
    def test_update(self, db_session, organization) -> None:
        category = _create(db_session, organization)
        updated = warning_categories.update(
            db_session,
            str(category.id),
            WarningCategoryUpdate(escalation_path=["verbal", "final_written"]),
        )
        assert updated.escalation_path == ["verbal", "final_written"]

    def test_update_rejects_bad_path(self, db_session, organization) -> None:
        category = _create(db_session, organization)
        with pytest.raises(HTTPException):
            warning_categories.update(
                db_session,
                str(category.id),
                WarningCategoryUpdate(escalation_path=["dismissal", "dismissal"]),
            )

    def test_soft_delete(self, db_session, organization) -> None:
        category = _create(db_session, organization)
        warning_categories.delete(db_session, str(category.id))
        assert category.is_active is False
        items = warning_categories.list(
            db_session, str(organization.id), None, None, "name", "asc", 50, 0
        )
        assert items == []


class TestSeedDefaults:
    def test_seeds_standard_categories(self, db_session, organization) -> None:
        created = warning_categories.seed_defaults(db_session, str(organization.id))
        assert len(created) == 8
        codes = {c.code for c in created}
        assert "safety_violations" in codes
        assert "harassment_discrimination" in codes

    def test_seeded_categories_keep_legal_guidance(
        self, db_session, organization
    ) -> None:
        created = warning_categories.seed_defaults(db_session, str(organization.id))
        theft = next(c for c in created if c.code == "dishonesty_theft")
        assert theft.lra_section == "Section 188(1)(b) - Misconduct"
        assert theft.schedule8_reference == "Schedule 8, Item 1 - Misconduct procedures"
        assert len(theft.common_examples) == 7
        assert "Ensure fair hearing and right to respond" in theft.procedural_requirements
        assert theft.evidence_required
        assert theft.ccma_factors

    def test_seeding_is_idempotent(self, db_session, organization) -> None:
        warning_categories.seed_defaults(db_session, str(organization.id))
        assert warning_categories.seed_defaults(db_session, str(organization.id)) == []

    def test_skips_existing_codes(self, db_session, organization, category) -> None:
        created = warning_categories.seed_defaults(db_session, str(organization.id))
        assert len(created) == 7
        assert "attendance_punctuality" not in {c.code for c in created}

    def test_unknown_organization(self, db_session) -> None:
        with pytest.raises(HTTPException) as exc_info:
            warning_categories.seed_defaults(db_session, str(uuid.uuid4()))
        assert exc_info.value.status_code == 404
