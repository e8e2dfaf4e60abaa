"""Review follow-up state, derived from a warning's review fields and "now".

The state is never stored: only ``review_date`` and ``review_outcome`` are
persisted, and the state is recomputed on every read.
"""

import enum
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime

from app.config import settings
from app.models.discipline import ReviewOutcome
from app.services.discipline_records import WarningRecord
from app.services.discipline_validity import local_date, resolve_timezone


class ReviewState(enum.Enum):
    pending = "pending"
    overdue = "overdue"
    auto_satisfied = "auto-satisfied"
    completed = "completed"


TERMINAL_REVIEW_STATES = frozenset({ReviewState.completed, ReviewState.auto_satisfied})


@dataclass(frozen=True)
class ReviewFollowUpStatus:
    state: ReviewState
    days_until_review: int | None = None
    days_since_review: int | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_REVIEW_STATES


def review_follow_up_status(
    review_date: date | None,
    review_outcome: ReviewOutcome | None,
    now: datetime,
    tz=None,
    grace_days: int | None = None,
) -> ReviewFollowUpStatus:
    if review_outcome is not None:
        return ReviewFollowUpStatus(ReviewState.completed)
    if review_date is None:
        return ReviewFollowUpStatus(ReviewState.pending)

    if grace_days is None:
        grace_days = settings.review_auto_satisfy_grace_days
    diff_days = (review_date - local_date(now, tz)).days
    if diff_days < -grace_days:
        return ReviewFollowUpStatus(
            ReviewState.auto_satisfied, days_since_review=-diff_days
        )
    if diff_days < 0:
        return ReviewFollowUpStatus(ReviewState.overdue, days_since_review=-diff_days)
    return ReviewFollowUpStatus(ReviewState.pending, days_until_review=diff_days)


def warning_review_status(
    warning: WarningRecord, now: datetime, tz=None, grace_days: int | None = None
) -> ReviewFollowUpStatus:
    return review_follow_up_status(
        warning.review_date, warning.review_outcome, now, tz, grace_days
    )


@dataclass(frozen=True)
class ReviewItem:
    warning: WarningRecord
    status: ReviewFollowUpStatus


@dataclass
class ReviewSummary:
    counts: dict[ReviewState, int] = field(
        default_factory=lambda: {state: 0 for state in ReviewState}
    )
    due_soon: list[ReviewItem] = field(default_factory=list)
    overdue: list[ReviewItem] = field(default_factory=list)
    auto_satisfied: list[ReviewItem] = field(default_factory=list)


def summarize_reviews(
    warnings: Iterable[WarningRecord],
    now: datetime,
    tz=None,
    due_soon_days: int | None = None,
    grace_days: int | None = None,
) -> ReviewSummary:
    """Classify warnings that carry a review date for the follow-up dashboard.

    ``due_soon`` holds pending reviews falling within ``due_soon_days``;
    lists are ordered by review date.
    """
    tz = tz or resolve_timezone()
    if due_soon_days is None:
        due_soon_days = settings.review_due_soon_days
    summary = ReviewSummary()
    with_review = sorted(
        (w for w in warnings if w.review_date is not None),
        key=lambda w: (w.review_date, str(w.id or "")),
    )
    for warning in with_review:
        status = warning_review_status(warning, now, tz, grace_days)
        summary.counts[status.state] += 1
        item = ReviewItem(warning, status)
        if status.state == ReviewState.overdue:
            summary.overdue.append(item)
        elif status.state == ReviewState.auto_satisfied:
            summary.auto_satisfied.append(item)
        elif (
            status.state == ReviewState.pending
            and status.days_until_review is not None
            and status.days_until_review <= due_soon_days
        ):
            summary.due_soon.append(item)
    return summary
