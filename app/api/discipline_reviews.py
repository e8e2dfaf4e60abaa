from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_now
from app.schemas.discipline import ReviewItemRead, ReviewSummaryRead
from app.services import discipline_warning as warning_service
from app.services.discipline_review import ReviewItem

router = APIRouter(prefix="/discipline", tags=["discipline-reviews"])


def _item(item: ReviewItem) -> ReviewItemRead:
    return ReviewItemRead(
        warning_id=item.warning.id,
        employee_id=item.warning.employee_id,
        review_date=item.warning.review_date,
        state=item.status.state.value,
        days_until_review=item.status.days_until_review,
        days_since_review=item.status.days_since_review,
    )


@router.get("/reviews/summary", response_model=ReviewSummaryRead)
def get_review_summary(
    organization_id: str,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> ReviewSummaryRead:
    summary = warning_service.warnings.review_summary(db, organization_id, now)
    return ReviewSummaryRead(
        counts={state.value: count for state, count in summary.counts.items()},
        due_soon=[_item(i) for i in summary.due_soon],
        overdue=[_item(i) for i in summary.overdue],
        auto_satisfied=[_item(i) for i in summary.auto_satisfied],
    )
