"""Validity periods, expiry dates and the active-warning rule.

All calendar arithmetic happens on dates in the organization's timezone.
An expiry date means "valid until local midnight at the start of that day".
"""

import math
from datetime import date, datetime, time

import pytz
from dateutil.relativedelta import relativedelta

from app.config import settings
from app.models.discipline import WarningStatus
from app.services.discipline_records import WarningRecord

VALIDITY_PERIODS_MONTHS: tuple[int, ...] = (3, 6, 12)

INACTIVE_STATUSES = frozenset({WarningStatus.expired, WarningStatus.overturned})

_SECONDS_PER_DAY = 86400


def resolve_timezone(name: str | None = None):
    return pytz.timezone(name or settings.organization_timezone)


def _require_aware(moment: datetime) -> None:
    if moment.tzinfo is None or moment.utcoffset() is None:
        raise ValueError("Expected a timezone-aware datetime")


def local_date(moment: datetime, tz=None) -> date:
    """Calendar date of ``moment`` in the organization timezone."""
    _require_aware(moment)
    tz = tz or resolve_timezone()
    return moment.astimezone(tz).date()


def start_of_day(day: date, tz=None) -> datetime:
    tz = tz or resolve_timezone()
    return tz.localize(datetime.combine(day, time.min))


def compute_expiry(issue_date: date, validity_months: int) -> date:
    """Add calendar months, clamping to the last day of a shorter month.

    2024-01-31 + 1 month is 2024-02-29; 2023-01-31 + 1 month is 2023-02-28.
    """
    if validity_months <= 0:
        raise ValueError("validity_months must be positive")
    return issue_date + relativedelta(months=validity_months)


def is_active(warning: WarningRecord, now: datetime, tz=None) -> bool:
    if warning.status in INACTIVE_STATUSES:
        return False
    _require_aware(now)
    return now < start_of_day(warning.expiry_date, tz)


def days_until_expiry(
    issue_date: date, validity_months: int, now: datetime, tz=None
) -> int:
    """Whole days (rounded up) until expiry; negative once expired."""
    _require_aware(now)
    expiry = start_of_day(compute_expiry(issue_date, validity_months), tz)
    return math.ceil((expiry - now).total_seconds() / _SECONDS_PER_DAY)
