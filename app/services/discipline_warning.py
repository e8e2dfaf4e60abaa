from __future__ import annotations

import logging
from datetime import datetime, timedelta

from fastapi import HTTPException
from prometheus_client import Counter
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import WarningValidationError
from app.models.discipline import (
    DeliveryMethod,
    DisciplinaryWarning,
    Organization,
    ReviewOutcome,
    WarningLevel,
    WarningStatus,
)
from app.schemas.discipline import ReviewRequest, WarningIssue
from app.services.common import apply_ordering, apply_pagination, coerce_uuid
from app.services.discipline_assembler import WarningDraft, assemble_warning
from app.services.discipline_catalog import CategoryCatalog, CategoryDefinition
from app.services.discipline_escalation import (
    EscalationRecommendation,
    fallback_recommendation,
    resolve_escalation,
)
from app.services.discipline_review import (
    ReviewFollowUpStatus,
    ReviewState,
    ReviewSummary,
    summarize_reviews,
    warning_review_status,
)
from app.services.discipline_store import WarningStore, warning_to_record
from app.services.discipline_validity import is_active, resolve_timezone
from app.services.event import EventType, publish_event
from app.services.response import ListResponseMixin

logger = logging.getLogger(__name__)

WARNINGS_ISSUED = Counter(
    "discipline_warnings_issued_total",
    "Warnings issued",
    ["level"],
)
RECOMMENDATION_OVERRIDES = Counter(
    "discipline_recommendation_overrides_total",
    "Warnings issued at a level other than the recommended one",
)

_OPEN_STATUSES = (WarningStatus.issued, WarningStatus.delivered)


def _get_row(db: Session, warning_id: str) -> DisciplinaryWarning:
    warning = db.get(DisciplinaryWarning, coerce_uuid(warning_id))
    if not warning or not warning.is_active:
        raise HTTPException(status_code=404, detail="Warning not found")
    return warning


def _org_timezone(db: Session, organization_id):
    org = db.get(Organization, coerce_uuid(organization_id))
    return resolve_timezone(org.timezone_name if org else None)


def _require_in_catalog(catalog: CategoryCatalog, category: CategoryDefinition) -> None:
    if catalog.get_category_by_id(category.id) is None:
        raise WarningValidationError(
            [
                {
                    "field": "category_id",
                    "message": "Category does not belong to the employee's organization",
                }
            ]
        )


class Warnings(ListResponseMixin):
    @staticmethod
    def recommend(
        db: Session, employee_id: str, category_id: str, now: datetime
    ) -> EscalationRecommendation:
        store = WarningStore(db)
        employee = store.get_employee(employee_id)
        category = store.get_category(category_id)
        catalog = store.load_catalog(employee.organization_id)
        _require_in_catalog(catalog, category)
        tz = resolve_timezone(store.organization_timezone(employee.organization_id))
        history = store.get_warnings_for_employee(employee.id)
        try:
            return resolve_escalation(
                employee.id, category.id, history, catalog, now, tz
            )
        except Exception as e:
            # Advisory only; never block the issuing manager.
            logger.exception(
                "Escalation analysis failed for employee %s: %s", employee.id, e
            )
            return fallback_recommendation(employee.id, category.id, now, tz)

    @staticmethod
    def issue(db: Session, payload: WarningIssue, now: datetime) -> DisciplinaryWarning:
        store = WarningStore(db)
        employee = store.get_employee(payload.employee_id)
        category = store.get_category(payload.category_id)
        catalog = store.load_catalog(employee.organization_id)
        _require_in_catalog(catalog, category)
        tz = resolve_timezone(store.organization_timezone(employee.organization_id))
        history = store.get_warnings_for_employee(employee.id)
        recommendation = resolve_escalation(
            str(employee.id), category.id, history, catalog, now, tz
        )

        data = payload.model_dump()
        data["employee_id"] = str(employee.id)
        data["category_id"] = category.id
        draft = WarningDraft(organization_id=str(employee.organization_id), **data)
        record = assemble_warning(draft, catalog, now, tz, recommendation)

        warning_id = store.save_warning(record)
        warning = store.get_warning_row(warning_id)
        WARNINGS_ISSUED.labels(level=warning.level.value).inc()
        if recommendation.suggested_level != warning.level:
            RECOMMENDATION_OVERRIDES.inc()
        logger.info(
            "Issued %s warning %s to employee %s",
            warning.level.value,
            warning.id,
            warning.employee_id,
        )
        publish_event(
            EventType.warning_issued,
            entity_type="warning",
            entity_id=warning.id,
            employee_id=warning.employee_id,
            payload={
                "level": warning.level.value,
                "recommended_level": recommendation.suggested_level.value,
                "category_id": str(warning.category_id),
            },
        )
        return warning

    @staticmethod
    def get(db: Session, warning_id: str) -> DisciplinaryWarning:
        return _get_row(db, warning_id)

    @staticmethod
    def list(
        db: Session,
        organization_id: str | None,
        employee_id: str | None,
        category_id: str | None,
        status: str | None,
        level: str | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ) -> list[DisciplinaryWarning]:
        stmt = select(DisciplinaryWarning).where(
            DisciplinaryWarning.is_active.is_(True)
        )
        if organization_id is not None:
            stmt = stmt.where(
                DisciplinaryWarning.organization_id == coerce_uuid(organization_id)
            )
        if employee_id is not None:
            stmt = stmt.where(
                DisciplinaryWarning.employee_id == coerce_uuid(employee_id)
            )
        if category_id is not None:
            stmt = stmt.where(
                DisciplinaryWarning.category_id == coerce_uuid(category_id)
            )
        if status is not None:
            try:
                stmt = stmt.where(DisciplinaryWarning.status == WarningStatus(status))
            except ValueError:
                raise HTTPException(status_code=400, detail=f"Invalid status: {status}")
        if level is not None:
            try:
                stmt = stmt.where(DisciplinaryWarning.level == WarningLevel(level))
            except ValueError:
                raise HTTPException(status_code=400, detail=f"Invalid level: {level}")
        stmt = apply_ordering(
            stmt,
            order_by,
            order_dir,
            {
                "issue_date": DisciplinaryWarning.issue_date,
                "expiry_date": DisciplinaryWarning.expiry_date,
                "review_date": DisciplinaryWarning.review_date,
                "created_at": DisciplinaryWarning.created_at,
            },
        )
        return db.scalars(apply_pagination(stmt, limit, offset)).all()

    @staticmethod
    def deliver(
        db: Session, warning_id: str, delivery_method: str, now: datetime
    ) -> DisciplinaryWarning:
        warning = _get_row(db, warning_id)
        try:
            method = DeliveryMethod(delivery_method)
        except ValueError:
            raise HTTPException(
                status_code=400, detail=f"Invalid delivery_method: {delivery_method}"
            )
        if warning.status != WarningStatus.issued:
            raise HTTPException(
                status_code=409,
                detail=f"Cannot deliver a warning in status {warning.status.value}",
            )
        WarningStore(db).update_warning(
            warning.id,
            {
                "status": WarningStatus.delivered,
                "delivery_method": method,
                "delivered_at": now,
            },
        )
        logger.info("Delivered warning %s via %s", warning.id, method.value)
        publish_event(
            EventType.warning_delivered,
            entity_type="warning",
            entity_id=warning.id,
            employee_id=warning.employee_id,
            payload={"delivery_method": method.value},
        )
        return warning

    @staticmethod
    def overturn(
        db: Session, warning_id: str, reason: str | None
    ) -> DisciplinaryWarning:
        warning = _get_row(db, warning_id)
        if warning.status not in _OPEN_STATUSES:
            raise HTTPException(
                status_code=409,
                detail=f"Cannot overturn a warning in status {warning.status.value}",
            )
        fields = {"status": WarningStatus.overturned}
        if reason:
            notes = warning.additional_notes
            line = f"Overturned: {reason}"
            fields["additional_notes"] = f"{notes}\n{line}" if notes else line
        WarningStore(db).update_warning(warning.id, fields)
        logger.info("Overturned warning %s", warning.id)
        publish_event(
            EventType.warning_overturned,
            entity_type="warning",
            entity_id=warning.id,
            employee_id=warning.employee_id,
            payload={"reason": reason} if reason else None,
        )
        return warning

    @staticmethod
    def record_review(
        db: Session, warning_id: str, payload: ReviewRequest, now: datetime
    ) -> DisciplinaryWarning:
        warning = _get_row(db, warning_id)
        try:
            outcome = ReviewOutcome(payload.outcome)
        except ValueError:
            raise HTTPException(
                status_code=400, detail=f"Invalid review outcome: {payload.outcome}"
            )
        if warning.review_outcome is not None:
            raise HTTPException(
                status_code=409, detail="Review outcome has already been recorded"
            )
        WarningStore(db).update_warning(
            warning.id,
            {
                "review_outcome": outcome,
                "reviewed_at": now,
                "reviewed_by": payload.reviewed_by,
                "review_notes": payload.notes,
            },
        )
        logger.info("Recorded %s review for warning %s", outcome.value, warning.id)
        publish_event(
            EventType.review_completed,
            entity_type="warning",
            entity_id=warning.id,
            actor_id=None,
            employee_id=warning.employee_id,
            payload={"outcome": outcome.value, "reviewed_by": payload.reviewed_by},
        )
        return warning

    @staticmethod
    def review_status(
        db: Session, warning_id: str, now: datetime
    ) -> ReviewFollowUpStatus:
        warning = _get_row(db, warning_id)
        tz = _org_timezone(db, warning.organization_id)
        return warning_review_status(warning_to_record(warning), now, tz)

    @staticmethod
    def review_summary(
        db: Session, organization_id: str, now: datetime
    ) -> ReviewSummary:
        store = WarningStore(db)
        tz = resolve_timezone(store.organization_timezone(organization_id))
        rows = db.scalars(
            select(DisciplinaryWarning)
            .where(DisciplinaryWarning.organization_id == coerce_uuid(organization_id))
            .where(DisciplinaryWarning.review_date.is_not(None))
            .where(DisciplinaryWarning.is_active.is_(True))
            .where(DisciplinaryWarning.status != WarningStatus.overturned)
        ).all()
        return summarize_reviews([warning_to_record(r) for r in rows], now, tz)

    @staticmethod
    def expire_lapsed(db: Session, now: datetime) -> list[str]:
        """Mark open warnings whose expiry has passed as expired."""
        # Coarse filter in UTC, exact check in each organization's timezone.
        horizon = now.date() + timedelta(days=1)
        rows = db.scalars(
            select(DisciplinaryWarning)
            .where(DisciplinaryWarning.status.in_(_OPEN_STATUSES))
            .where(DisciplinaryWarning.expiry_date <= horizon)
            .where(DisciplinaryWarning.is_active.is_(True))
        ).all()
        store = WarningStore(db)
        timezones: dict = {}
        expired: list[str] = []
        for row in rows:
            if row.organization_id not in timezones:
                timezones[row.organization_id] = _org_timezone(db, row.organization_id)
            if is_active(warning_to_record(row), now, timezones[row.organization_id]):
                continue
            store.update_warning(row.id, {"status": WarningStatus.expired})
            expired.append(str(row.id))
            publish_event(
                EventType.warning_expired,
                entity_type="warning",
                entity_id=row.id,
                employee_id=row.employee_id,
            )
        logger.info("Expired %d lapsed warnings", len(expired))
        return expired

    @staticmethod
    def follow_up_check(db: Session, now: datetime) -> dict[str, int]:
        """Classify open reviews and publish follow-up events.

        Reviews due within the reminder window and overdue reviews are
        published on every run. The auto-satisfied notice is published once
        per review, whenever the check first sees it past the grace period.
        """
        grace_days = settings.review_auto_satisfy_grace_days
        reminder_days = settings.review_reminder_days
        store = WarningStore(db)
        rows = db.scalars(
            select(DisciplinaryWarning)
            .where(DisciplinaryWarning.review_date.is_not(None))
            .where(DisciplinaryWarning.review_outcome.is_(None))
            .where(DisciplinaryWarning.status != WarningStatus.overturned)
            .where(DisciplinaryWarning.is_active.is_(True))
        ).all()
        timezones: dict = {}
        counts = {state.value: 0 for state in ReviewState}
        for row in rows:
            if row.organization_id not in timezones:
                timezones[row.organization_id] = _org_timezone(db, row.organization_id)
            status = warning_review_status(
                warning_to_record(row), now, timezones[row.organization_id], grace_days
            )
            counts[status.state.value] += 1
            if (
                status.state == ReviewState.pending
                and status.days_until_review <= reminder_days
            ):
                publish_event(
                    EventType.review_due_soon,
                    entity_type="warning",
                    entity_id=row.id,
                    employee_id=row.employee_id,
                    payload={"days_until_review": status.days_until_review},
                )
            elif status.state == ReviewState.overdue:
                publish_event(
                    EventType.review_overdue,
                    entity_type="warning",
                    entity_id=row.id,
                    employee_id=row.employee_id,
                    payload={"days_overdue": status.days_since_review},
                )
            elif (
                status.state == ReviewState.auto_satisfied
                and row.auto_satisfied_notified_at is None
            ):
                store.update_warning(row.id, {"auto_satisfied_notified_at": now})
                publish_event(
                    EventType.review_auto_satisfied,
                    entity_type="warning",
                    entity_id=row.id,
                    employee_id=row.employee_id,
                    payload={"days_overdue": status.days_since_review},
                )
        logger.info("Review follow-up check: %s", counts)
        return counts


warnings = Warnings()
