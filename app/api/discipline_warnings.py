from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_now
from app.schemas.common import ListResponse
from app.schemas.discipline import (
    DeliverRequest,
    OverturnRequest,
    ReviewRequest,
    ReviewStatusRead,
    WarningIssue,
    WarningRead,
)
from app.services import discipline_warning as warning_service

router = APIRouter(prefix="/discipline", tags=["discipline-warnings"])


@router.post(
    "/warnings",
    response_model=WarningRead,
    status_code=status.HTTP_201_CREATED,
)
def issue_warning(
    payload: WarningIssue,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> WarningRead:
    return warning_service.warnings.issue(db, payload, now)


@router.get("/warnings/{warning_id}", response_model=WarningRead)
def get_warning(warning_id: str, db: Session = Depends(get_db)) -> WarningRead:
    return warning_service.warnings.get(db, warning_id)


@router.get("/warnings", response_model=ListResponse[WarningRead])
def list_warnings(
    organization_id: str | None = None,
    employee_id: str | None = None,
    category_id: str | None = None,
    warning_status: str | None = Query(default=None, alias="status"),
    level: str | None = None,
    order_by: str = Query(default="issue_date"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
) -> dict:
    return warning_service.warnings.list_response(
        db,
        organization_id,
        employee_id,
        category_id,
        warning_status,
        level,
        order_by,
        order_dir,
        limit,
        offset,
    )


@router.post("/warnings/{warning_id}/deliver", response_model=WarningRead)
def deliver_warning(
    warning_id: str,
    payload: DeliverRequest,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> WarningRead:
    return warning_service.warnings.deliver(db, warning_id, payload.delivery_method, now)


@router.post("/warnings/{warning_id}/overturn", response_model=WarningRead)
def overturn_warning(
    warning_id: str,
    payload: OverturnRequest,
    db: Session = Depends(get_db),
) -> WarningRead:
    return warning_service.warnings.overturn(db, warning_id, payload.reason)


@router.post("/warnings/{warning_id}/review", response_model=WarningRead)
def record_review(
    warning_id: str,
    payload: ReviewRequest,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> WarningRead:
    return warning_service.warnings.record_review(db, warning_id, payload, now)


@router.get("/warnings/{warning_id}/review-status", response_model=ReviewStatusRead)
def get_review_status(
    warning_id: str,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> ReviewStatusRead:
    follow_up = warning_service.warnings.review_status(db, warning_id, now)
    return ReviewStatusRead(
        warning_id=warning_id,
        state=follow_up.state.value,
        days_until_review=follow_up.days_until_review,
        days_since_review=follow_up.days_since_review,
    )
