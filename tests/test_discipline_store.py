import uuid
from datetime import date, datetime, timezone

import pytest

from app.errors import NotFoundError
from app.models.discipline import WarningCategory, WarningLevel, WarningStatus
from app.services.discipline_records import WarningRecord
from app.services.discipline_store import (
    WarningStore,
    category_to_definition,
    warning_to_record,
)


class TestConversions:
    def test_category_to_definition_skips_unknown_levels(
        self, db_session, organization
    ) -> None:
        row = WarningCategory(
            organization_id=organization.id,
            code="legacy",
            name="Legacy",
            escalation_path=["verbal", "caution", "final_written"],
        )
        db_session.add(row)
        db_session.commit()

        definition = category_to_definition(row)
        assert definition.id == str(row.id)
        assert definition.escalation_path == (
            WarningLevel.verbal,
            WarningLevel.final_written,
        )

    def test_category_to_definition_maps_guidance(
        self, db_session, organization
    ) -> None:
        row = WarningCategory(
            organization_id=organization.id,
            code="policy",
            name="Policy Violations",
            lra_section="Section 188(1)(b) - Misconduct",
            common_examples=["Breach of confidentiality or privacy policies"],
            ccma_factors=["Intent behind the violation"],
        )
        db_session.add(row)
        db_session.commit()

        definition = category_to_definition(row)
        assert definition.lra_section == "Section 188(1)(b) - Misconduct"
        assert definition.schedule8_reference == ""
        assert definition.common_examples == (
            "Breach of confidentiality or privacy policies",
        )
        assert definition.ccma_factors == ("Intent behind the violation",)
        assert definition.procedural_requirements == ()

    def test_warning_to_record_makes_instants_aware(
        self, db_session, employee, category, make_warning
    ) -> None:
        row = make_warning(employee, category)
        row.delivered_at = datetime(2024, 5, 1, 8, 0)
        record = warning_to_record(row)
        assert record.delivered_at.tzinfo is timezone.utc
        assert record.id == str(row.id)
        assert record.employee_id == str(employee.id)
        assert isinstance(record.issue_date, date)


class TestWarningStore:
    def test_lookups(self, db_session, organization, employee, category) -> None:
        store = WarningStore(db_session)
        assert store.get_employee(str(employee.id)).id == employee.id
        assert store.get_category(str(category.id)).name == category.name
        assert store.organization_timezone(organization.id) == "Africa/Johannesburg"
        assert len(store.load_catalog(organization.id)) == 1

    def test_missing_records_raise(self, db_session) -> None:
        store = WarningStore(db_session)
        with pytest.raises(NotFoundError):
            store.get_employee(str(uuid.uuid4()))
        with pytest.raises(NotFoundError):
            store.get_category(str(uuid.uuid4()))
        with pytest.raises(NotFoundError):
            store.get_warning(str(uuid.uuid4()))

    def test_history_most_recent_first(
        self, db_session, employee, category, make_warning
    ) -> None:
        make_warning(employee, category, issue_date=date(2024, 1, 1))
        make_warning(employee, category, issue_date=date(2024, 3, 1))
        history = WarningStore(db_session).get_warnings_for_employee(employee.id)
        assert [w.issue_date for w in history] == [date(2024, 3, 1), date(2024, 1, 1)]

    def test_save_and_update(self, db_session, organization, employee, category) -> None:
        store = WarningStore(db_session)
        record = WarningRecord(
            organization_id=str(organization.id),
            employee_id=str(employee.id),
            category_id=str(category.id),
            level=WarningLevel.verbal,
            issue_date=date(2024, 6, 1),
            incident_date=date(2024, 6, 1),
            validity_months=3,
            expiry_date=date(2024, 9, 1),
            status=WarningStatus.issued,
            description="Late again",
        )
        warning_id = store.save_warning(record)
        saved = store.get_warning(warning_id)
        assert saved.level == WarningLevel.verbal
        assert saved.expiry_date == date(2024, 9, 1)

        updated = store.update_warning(warning_id, {"status": WarningStatus.delivered})
        assert updated.status == WarningStatus.delivered

    def test_update_rejects_immutable_fields(
        self, db_session, employee, category, make_warning
    ) -> None:
        row = make_warning(employee, category)
        with pytest.raises(ValueError):
            WarningStore(db_session).update_warning(row.id, {"level": WarningLevel.dismissal})
