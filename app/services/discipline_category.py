from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.discipline import CategorySeverity, Organization, WarningCategory
from app.schemas.discipline import WarningCategoryCreate, WarningCategoryUpdate
from app.services.common import apply_ordering, apply_pagination, coerce_uuid
from app.services.discipline_catalog import (
    default_categories,
    validate_escalation_path,
)
from app.services.discipline_validity import VALIDITY_PERIODS_MONTHS
from app.services.event import EventType, publish_event
from app.services.response import ListResponseMixin

logger = logging.getLogger(__name__)


def _validate_severity(severity: str) -> None:
    try:
        CategorySeverity(severity)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid severity: {severity}")


def _validate_path(path: list[str]) -> None:
    # An empty path is allowed and means "use the default path".
    if not path:
        return
    problems = validate_escalation_path(path)
    if problems:
        raise HTTPException(
            status_code=400,
            detail={
                "code": "invalid_escalation_path",
                "message": "Invalid escalation path",
                "details": problems,
            },
        )


def _validate_validity(months: int) -> None:
    if months not in VALIDITY_PERIODS_MONTHS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid default_validity_months: {months}",
        )


class WarningCategories(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload: WarningCategoryCreate) -> WarningCategory:
        if not db.get(Organization, coerce_uuid(payload.organization_id)):
            raise HTTPException(status_code=404, detail="Organization not found")
        _validate_severity(payload.severity)
        _validate_path(payload.escalation_path)
        _validate_validity(payload.default_validity_months)

        data = payload.model_dump()
        data["severity"] = CategorySeverity(data["severity"])
        category = WarningCategory(**data)
        db.add(category)
        db.flush()
        db.refresh(category)
        logger.info("Created warning category %s (%s)", category.id, category.code)
        publish_event(
            EventType.category_created,
            entity_type="warning_category",
            entity_id=category.id,
            payload={"code": category.code},
        )
        return category

    @staticmethod
    def get(db: Session, category_id: str) -> WarningCategory:
        category = db.get(WarningCategory, coerce_uuid(category_id))
        if not category:
            raise HTTPException(status_code=404, detail="Category not found")
        return category

    @staticmethod
    def list(
        db: Session,
        organization_id: str | None,
        severity: str | None,
        is_active: bool | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ) -> list[WarningCategory]:
        stmt = select(WarningCategory)
        if organization_id is not None:
            stmt = stmt.where(
                WarningCategory.organization_id == coerce_uuid(organization_id)
            )
        if severity is not None:
            _validate_severity(severity)
            stmt = stmt.where(WarningCategory.severity == CategorySeverity(severity))
        if is_active is None:
            stmt = stmt.where(WarningCategory.is_active.is_(True))
        else:
            stmt = stmt.where(WarningCategory.is_active == is_active)
        stmt = apply_ordering(
            stmt,
            order_by,
            order_dir,
            {
                "name": WarningCategory.name,
                "code": WarningCategory.code,
                "created_at": WarningCategory.created_at,
            },
        )
        return db.scalars(apply_pagination(stmt, limit, offset)).all()

    @staticmethod
    def update(
        db: Session, category_id: str, payload: WarningCategoryUpdate
    ) -> WarningCategory:
        category = db.get(WarningCategory, coerce_uuid(category_id))
        if not category:
            raise HTTPException(status_code=404, detail="Category not found")
        data = payload.model_dump(exclude_unset=True)
        if "severity" in data:
            _validate_severity(data["severity"])
            data["severity"] = CategorySeverity(data["severity"])
        if "escalation_path" in data:
            _validate_path(data["escalation_path"] or [])
        if "default_validity_months" in data:
            _validate_validity(data["default_validity_months"])
        for key, value in data.items():
            setattr(category, key, value)
        db.flush()
        db.refresh(category)
        logger.info("Updated warning category %s", category.id)
        publish_event(
            EventType.category_updated,
            entity_type="warning_category",
            entity_id=category.id,
            payload={"fields": sorted(data)},
        )
        return category

    @staticmethod
    def delete(db: Session, category_id: str) -> None:
        category = db.get(WarningCategory, coerce_uuid(category_id))
        if not category:
            raise HTTPException(status_code=404, detail="Category not found")
        category.is_active = False
        db.flush()
        logger.info("Soft-deleted warning category %s", category_id)

    @staticmethod
    def seed_defaults(db: Session, organization_id: str) -> list[WarningCategory]:
        """Create the standard categories an organization does not have yet."""
        org_id = coerce_uuid(organization_id)
        if not db.get(Organization, org_id):
            raise HTTPException(status_code=404, detail="Organization not found")
        existing = set(
            db.scalars(
                select(WarningCategory.code).where(
                    WarningCategory.organization_id == org_id
                )
            ).all()
        )
        created = []
        for definition in default_categories():
            if definition.id in existing:
                continue
            category = WarningCategory(
                organization_id=org_id,
                code=definition.id,
                name=definition.name,
                description=definition.description,
                severity=definition.severity,
                escalation_path=[level.value for level in definition.escalation_path],
                required_documents=list(definition.required_documents),
                default_validity_months=definition.default_validity_months,
                requires_immediate_action=definition.requires_immediate_action,
                allows_warning_skipping=definition.allows_warning_skipping,
                lra_section=definition.lra_section,
                schedule8_reference=definition.schedule8_reference,
                escalation_rationale=definition.escalation_rationale,
                common_examples=list(definition.common_examples),
                procedural_requirements=list(definition.procedural_requirements),
                evidence_required=list(definition.evidence_required),
                ccma_factors=list(definition.ccma_factors),
            )
            db.add(category)
            created.append(category)
        db.flush()
        for category in created:
            db.refresh(category)
        logger.info(
            "Seeded %d default categories for organization %s", len(created), org_id
        )
        return created


warning_categories = WarningCategories()
