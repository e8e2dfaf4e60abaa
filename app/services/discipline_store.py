"""Storage boundary between the ORM and the discipline core.

Rows are normalized into :class:`WarningRecord` and
:class:`CategoryDefinition` values here so the core only ever sees one
shape and one temporal type per field.
"""

import logging
from datetime import date, datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import NotFoundError
from app.models.discipline import (
    DisciplinaryWarning,
    Employee,
    Organization,
    WarningCategory,
    WarningLevel,
)
from app.services.common import coerce_uuid
from app.services.discipline_catalog import (
    CategoryCatalog,
    CategoryDefinition,
    normalize_level,
)
from app.services.discipline_records import WarningRecord

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset(
    {
        "status",
        "delivery_method",
        "delivered_at",
        "review_date",
        "review_outcome",
        "reviewed_at",
        "reviewed_by",
        "review_notes",
        "auto_satisfied_notified_at",
        "additional_notes",
    }
)


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _as_aware(value: datetime | None) -> datetime | None:
    # SQLite drops tzinfo on read; stored instants are always UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _as_level(value) -> WarningLevel:
    if isinstance(value, WarningLevel):
        return value
    return normalize_level(value)


def category_to_definition(row: WarningCategory) -> CategoryDefinition:
    path: list[WarningLevel] = []
    for item in row.escalation_path or []:
        try:
            path.append(WarningLevel(item))
        except ValueError:
            logger.warning(
                "Category %s has unknown level %s in its path; skipping it",
                row.id,
                item,
            )
    return CategoryDefinition(
        id=str(row.id),
        name=row.name,
        description=row.description or "",
        severity=row.severity,
        escalation_path=tuple(path),
        required_documents=tuple(row.required_documents or ()),
        default_validity_months=row.default_validity_months,
        requires_immediate_action=bool(row.requires_immediate_action),
        allows_warning_skipping=bool(row.allows_warning_skipping),
        lra_section=row.lra_section or "",
        schedule8_reference=row.schedule8_reference or "",
        escalation_rationale=row.escalation_rationale or "",
        common_examples=tuple(row.common_examples or ()),
        procedural_requirements=tuple(row.procedural_requirements or ()),
        evidence_required=tuple(row.evidence_required or ()),
        ccma_factors=tuple(row.ccma_factors or ()),
    )


def warning_to_record(row: DisciplinaryWarning) -> WarningRecord:
    return WarningRecord(
        id=str(row.id),
        organization_id=str(row.organization_id),
        employee_id=str(row.employee_id),
        category_id=str(row.category_id),
        level=_as_level(row.level),
        issue_date=_as_date(row.issue_date),
        incident_date=_as_date(row.incident_date),
        incident_time=row.incident_time,
        incident_location=row.incident_location,
        description=row.description,
        additional_notes=row.additional_notes,
        validity_months=row.validity_months,
        expiry_date=_as_date(row.expiry_date),
        status=row.status,
        issued_by=row.issued_by,
        delivery_method=row.delivery_method,
        delivered_at=_as_aware(row.delivered_at),
        review_date=_as_date(row.review_date),
        review_outcome=row.review_outcome,
        reviewed_at=_as_aware(row.reviewed_at),
        reviewed_by=row.reviewed_by,
        review_notes=row.review_notes,
        recommended_level=row.recommended_level,
        escalation_reason=row.escalation_reason,
        active_warnings_at_time=row.active_warnings_at_time,
    )


class WarningStore:
    """Data-store collaborator backed by a SQLAlchemy session.

    Writes are flushed, not committed; the caller owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def organization_timezone(self, organization_id) -> str:
        org = self.db.get(Organization, coerce_uuid(organization_id))
        if not org:
            raise NotFoundError("Organization", organization_id)
        return org.timezone_name or settings.organization_timezone

    def get_employee(self, employee_id) -> Employee:
        employee = self.db.get(Employee, coerce_uuid(employee_id))
        if not employee or not employee.is_active:
            raise NotFoundError("Employee", employee_id)
        return employee

    def get_category(self, category_id) -> CategoryDefinition:
        row = self.db.get(WarningCategory, coerce_uuid(category_id))
        if not row or not row.is_active:
            raise NotFoundError("Category", category_id)
        return category_to_definition(row)

    def load_catalog(self, organization_id) -> CategoryCatalog:
        rows = self.db.scalars(
            select(WarningCategory)
            .where(WarningCategory.organization_id == coerce_uuid(organization_id))
            .where(WarningCategory.is_active.is_(True))
        ).all()
        return CategoryCatalog(category_to_definition(row) for row in rows)

    def get_warnings_for_employee(self, employee_id) -> list[WarningRecord]:
        rows = self.db.scalars(
            select(DisciplinaryWarning)
            .where(DisciplinaryWarning.employee_id == coerce_uuid(employee_id))
            .where(DisciplinaryWarning.is_active.is_(True))
            .order_by(DisciplinaryWarning.issue_date.desc())
        ).all()
        return [warning_to_record(row) for row in rows]

    def get_warning_row(self, warning_id) -> DisciplinaryWarning:
        row = self.db.get(DisciplinaryWarning, coerce_uuid(warning_id))
        if not row or not row.is_active:
            raise NotFoundError("Warning", warning_id)
        return row

    def get_warning(self, warning_id) -> WarningRecord:
        return warning_to_record(self.get_warning_row(warning_id))

    def save_warning(self, record: WarningRecord) -> str:
        row = DisciplinaryWarning(
            organization_id=coerce_uuid(record.organization_id),
            employee_id=coerce_uuid(record.employee_id),
            category_id=coerce_uuid(record.category_id),
            level=record.level,
            issue_date=record.issue_date,
            incident_date=record.incident_date,
            incident_time=record.incident_time,
            incident_location=record.incident_location,
            description=record.description,
            additional_notes=record.additional_notes,
            validity_months=record.validity_months,
            expiry_date=record.expiry_date,
            status=record.status,
            issued_by=record.issued_by,
            delivery_method=record.delivery_method,
            delivered_at=record.delivered_at,
            review_date=record.review_date,
            recommended_level=record.recommended_level,
            escalation_reason=record.escalation_reason,
            active_warnings_at_time=record.active_warnings_at_time,
        )
        self.db.add(row)
        self.db.flush()
        logger.info("Saved warning %s for employee %s", row.id, row.employee_id)
        return str(row.id)

    def update_warning(self, warning_id, fields: dict) -> WarningRecord:
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {', '.join(sorted(unknown))}")
        row = self.get_warning_row(warning_id)
        for key, value in fields.items():
            setattr(row, key, value)
        self.db.flush()
        self.db.refresh(row)
        logger.info("Updated warning %s (%s)", row.id, ", ".join(sorted(fields)))
        return warning_to_record(row)
