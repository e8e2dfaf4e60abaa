from datetime import date, datetime, timezone

import pytest
import pytz

from app.models.discipline import WarningLevel, WarningStatus
from app.services.discipline_records import WarningRecord
from app.services.discipline_validity import (
    compute_expiry,
    days_until_expiry,
    is_active,
    local_date,
    resolve_timezone,
    start_of_day,
)

JHB = pytz.timezone("Africa/Johannesburg")


def _record(expiry_date, status=WarningStatus.delivered):
    return WarningRecord(
        employee_id="emp",
        category_id="cat",
        level=WarningLevel.verbal,
        issue_date=date(2024, 1, 1),
        incident_date=date(2024, 1, 1),
        validity_months=6,
        expiry_date=expiry_date,
        status=status,
        description="Late",
    )


class TestComputeExpiry:
    def test_adds_calendar_months(self) -> None:
        assert compute_expiry(date(2024, 3, 15), 6) == date(2024, 9, 15)

    def test_clamps_to_leap_february(self) -> None:
        assert compute_expiry(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_clamps_to_non_leap_february(self) -> None:
        assert compute_expiry(date(2023, 1, 31), 1) == date(2023, 2, 28)

    def test_crosses_year_boundary(self) -> None:
        assert compute_expiry(date(2024, 11, 30), 3) == date(2025, 2, 28)

    def test_twelve_months(self) -> None:
        assert compute_expiry(date(2024, 2, 29), 12) == date(2025, 2, 28)

    def test_rejects_non_positive_months(self) -> None:
        with pytest.raises(ValueError):
            compute_expiry(date(2024, 1, 1), 0)


class TestLocalDates:
    def test_local_date_uses_timezone(self) -> None:
        # 23:30 UTC is already the next day in Johannesburg.
        moment = datetime(2024, 6, 14, 23, 30, tzinfo=timezone.utc)
        assert local_date(moment, JHB) == date(2024, 6, 15)

    def test_local_date_rejects_naive(self) -> None:
        with pytest.raises(ValueError):
            local_date(datetime(2024, 6, 15, 12, 0), JHB)

    def test_start_of_day(self) -> None:
        start = start_of_day(date(2024, 6, 15), JHB)
        assert start == datetime(2024, 6, 14, 22, 0, tzinfo=timezone.utc)

    def test_resolve_timezone_default(self) -> None:
        assert resolve_timezone().zone == "Africa/Johannesburg"


class TestIsActive:
    def test_active_before_expiry(self) -> None:
        now = datetime(2024, 6, 14, 21, 59, tzinfo=timezone.utc)
        assert is_active(_record(date(2024, 6, 15)), now, JHB)

    def test_inactive_at_local_midnight_of_expiry(self) -> None:
        now = datetime(2024, 6, 14, 22, 0, tzinfo=timezone.utc)
        assert not is_active(_record(date(2024, 6, 15)), now, JHB)

    def test_inactive_statuses(self) -> None:
        now = datetime(2024, 1, 2, tzinfo=timezone.utc)
        for status in (WarningStatus.expired, WarningStatus.overturned):
            assert not is_active(_record(date(2025, 1, 1), status), now, JHB)

    def test_issued_counts_as_active(self) -> None:
        now = datetime(2024, 1, 2, tzinfo=timezone.utc)
        assert is_active(_record(date(2025, 1, 1), WarningStatus.issued), now, JHB)


class TestDaysUntilExpiry:
    def test_rounds_up(self) -> None:
        # Expiry 2024-07-01 local midnight; 12:00 local the day before.
        now = datetime(2024, 6, 30, 10, 0, tzinfo=timezone.utc)
        assert days_until_expiry(date(2024, 1, 1), 6, now, JHB) == 1

    def test_negative_after_expiry(self) -> None:
        now = datetime(2024, 7, 3, 10, 0, tzinfo=timezone.utc)
        assert days_until_expiry(date(2024, 1, 1), 6, now, JHB) == -2
