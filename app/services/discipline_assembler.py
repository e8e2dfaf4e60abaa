import logging
from dataclasses import dataclass
from datetime import date, datetime

from app.errors import WarningValidationError
from app.models.discipline import DeliveryMethod, WarningLevel, WarningStatus
from app.services.discipline_catalog import CategoryCatalog, get_level_label
from app.services.discipline_escalation import EscalationRecommendation
from app.services.discipline_records import WarningRecord
from app.services.discipline_validity import (
    VALIDITY_PERIODS_MONTHS,
    compute_expiry,
    local_date,
    resolve_timezone,
)

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = (
    "employee_id",
    "category_id",
    "level",
    "issue_date",
    "incident_date",
    "validity_months",
    "description",
)


@dataclass(frozen=True)
class WarningDraft:
    """Form data for a new warning, before validation."""

    employee_id: str | None = None
    category_id: str | None = None
    level: WarningLevel | str | None = None
    issue_date: date | None = None
    incident_date: date | None = None
    validity_months: int | None = None
    description: str | None = None
    organization_id: str | None = None
    incident_time: str | None = None
    incident_location: str | None = None
    additional_notes: str | None = None
    issued_by: str | None = None
    review_date: date | None = None
    delivered: bool = False
    delivery_method: DeliveryMethod | str | None = None


def _missing(value) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _coerce_enum(enum_cls, value, field_name, errors):
    try:
        return enum_cls(value)
    except ValueError:
        errors.append({"field": field_name, "message": f"Invalid value: {value}"})
        return None


def assemble_warning(
    draft: WarningDraft,
    catalog: CategoryCatalog,
    now: datetime,
    tz=None,
    recommendation: EscalationRecommendation | None = None,
) -> WarningRecord:
    """Validate ``draft`` and build the warning record to persist.

    Raises WarningValidationError listing every problem found; nothing is
    silently corrected.
    """
    tz = tz or resolve_timezone()
    errors: list[dict] = []
    for name in _REQUIRED_FIELDS:
        if _missing(getattr(draft, name)):
            errors.append({"field": name, "message": "This field is required"})
    if errors:
        raise WarningValidationError(errors)

    level = _coerce_enum(WarningLevel, draft.level, "level", errors)
    delivery_method = None
    if draft.delivery_method is not None:
        delivery_method = _coerce_enum(
            DeliveryMethod, draft.delivery_method, "delivery_method", errors
        )

    if draft.validity_months not in VALIDITY_PERIODS_MONTHS:
        allowed = ", ".join(str(m) for m in VALIDITY_PERIODS_MONTHS)
        errors.append(
            {
                "field": "validity_months",
                "message": f"Validity period must be one of {allowed} months",
            }
        )

    today = local_date(now, tz)
    if draft.issue_date > today:
        errors.append(
            {"field": "issue_date", "message": "Issue date cannot be in the future"}
        )
    if draft.incident_date > draft.issue_date:
        errors.append(
            {
                "field": "incident_date",
                "message": "Incident date cannot be after the issue date",
            }
        )
    if draft.review_date is not None and draft.review_date <= draft.issue_date:
        errors.append(
            {
                "field": "review_date",
                "message": "Review date must be after the issue date",
            }
        )
    if level is not None and not catalog.is_valid_level_for_category(
        draft.category_id, level
    ):
        errors.append(
            {
                "field": "level",
                "message": (
                    f"{get_level_label(level)} is not part of the escalation path "
                    "for this category"
                ),
            }
        )
    if errors:
        raise WarningValidationError(errors)

    expiry_date = compute_expiry(draft.issue_date, draft.validity_months)
    status = WarningStatus.delivered if draft.delivered else WarningStatus.issued
    record = WarningRecord(
        employee_id=str(draft.employee_id),
        category_id=str(draft.category_id),
        organization_id=(
            str(draft.organization_id) if draft.organization_id is not None else None
        ),
        level=level,
        issue_date=draft.issue_date,
        incident_date=draft.incident_date,
        incident_time=draft.incident_time,
        incident_location=draft.incident_location,
        description=draft.description.strip(),
        additional_notes=draft.additional_notes,
        validity_months=draft.validity_months,
        expiry_date=expiry_date,
        status=status,
        issued_by=draft.issued_by,
        delivery_method=delivery_method,
        delivered_at=now if draft.delivered else None,
        review_date=draft.review_date,
        recommended_level=recommendation.suggested_level if recommendation else None,
        escalation_reason=recommendation.reason if recommendation else None,
        active_warnings_at_time=(
            recommendation.category_warning_count if recommendation else None
        ),
    )
    if recommendation and recommendation.suggested_level != level:
        logger.info(
            "Recommended level %s overridden with %s for employee %s",
            recommendation.suggested_level.value,
            level.value,
            record.employee_id,
        )
    return record
