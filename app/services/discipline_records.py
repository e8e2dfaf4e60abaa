from dataclasses import dataclass
from datetime import date, datetime

from app.models.discipline import (
    DeliveryMethod,
    ReviewOutcome,
    WarningLevel,
    WarningStatus,
)


@dataclass(frozen=True)
class WarningRecord:
    """Canonical in-memory warning used by the discipline core.

    Calendar dates (issue, incident, expiry, review) are ``date`` values in
    the organization's timezone; instants (delivery, review completion) are
    timezone-aware ``datetime`` values. Records are built by the warning
    assembler or by the storage adapter, never by hand elsewhere.
    """

    employee_id: str
    category_id: str
    level: WarningLevel
    issue_date: date
    incident_date: date
    validity_months: int
    expiry_date: date
    status: WarningStatus
    description: str
    id: str | None = None
    organization_id: str | None = None
    incident_time: str | None = None
    incident_location: str | None = None
    additional_notes: str | None = None
    issued_by: str | None = None
    delivery_method: DeliveryMethod | None = None
    delivered_at: datetime | None = None
    review_date: date | None = None
    review_outcome: ReviewOutcome | None = None
    reviewed_at: datetime | None = None
    reviewed_by: str | None = None
    review_notes: str | None = None
    recommended_level: WarningLevel | None = None
    escalation_reason: str | None = None
    active_warnings_at_time: int | None = None
