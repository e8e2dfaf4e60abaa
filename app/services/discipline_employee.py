from __future__ import annotations

import logging

import pytz
from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.discipline import Employee, Organization
from app.schemas.discipline import EmployeeCreate, EmployeeUpdate, OrganizationCreate
from app.services.common import apply_ordering, apply_pagination, coerce_uuid
from app.services.response import ListResponseMixin

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Organizations
# ---------------------------------------------------------------------------


class Organizations:
    @staticmethod
    def create(db: Session, payload: OrganizationCreate) -> Organization:
        if payload.timezone_name not in pytz.all_timezones_set:
            raise HTTPException(
                status_code=400, detail=f"Invalid timezone: {payload.timezone_name}"
            )
        org = Organization(**payload.model_dump())
        db.add(org)
        db.flush()
        db.refresh(org)
        logger.info("Created organization %s", org.id)
        return org

    @staticmethod
    def get(db: Session, organization_id: str) -> Organization:
        org = db.get(Organization, coerce_uuid(organization_id))
        if not org:
            raise HTTPException(status_code=404, detail="Organization not found")
        return org


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------


class Employees(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload: EmployeeCreate) -> Employee:
        if not db.get(Organization, coerce_uuid(payload.organization_id)):
            raise HTTPException(status_code=404, detail="Organization not found")
        employee = Employee(**payload.model_dump())
        db.add(employee)
        db.flush()
        db.refresh(employee)
        logger.info("Created employee %s", employee.id)
        return employee

    @staticmethod
    def get(db: Session, employee_id: str) -> Employee:
        employee = db.get(Employee, coerce_uuid(employee_id))
        if not employee:
            raise HTTPException(status_code=404, detail="Employee not found")
        return employee

    @staticmethod
    def list(
        db: Session,
        organization_id: str | None,
        department: str | None,
        is_active: bool | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ) -> list[Employee]:
        stmt = select(Employee)
        if organization_id is not None:
            stmt = stmt.where(Employee.organization_id == coerce_uuid(organization_id))
        if department is not None:
            stmt = stmt.where(Employee.department == department)
        if is_active is None:
            stmt = stmt.where(Employee.is_active.is_(True))
        else:
            stmt = stmt.where(Employee.is_active == is_active)
        stmt = apply_ordering(
            stmt,
            order_by,
            order_dir,
            {
                "last_name": Employee.last_name,
                "employee_number": Employee.employee_number,
                "created_at": Employee.created_at,
            },
        )
        return db.scalars(apply_pagination(stmt, limit, offset)).all()

    @staticmethod
    def update(db: Session, employee_id: str, payload: EmployeeUpdate) -> Employee:
        employee = db.get(Employee, coerce_uuid(employee_id))
        if not employee:
            raise HTTPException(status_code=404, detail="Employee not found")
        for key, value in payload.model_dump(exclude_unset=True).items():
            setattr(employee, key, value)
        db.flush()
        db.refresh(employee)
        logger.info("Updated employee %s", employee.id)
        return employee

    @staticmethod
    def delete(db: Session, employee_id: str) -> None:
        employee = db.get(Employee, coerce_uuid(employee_id))
        if not employee:
            raise HTTPException(status_code=404, detail="Employee not found")
        employee.is_active = False
        db.flush()
        logger.info("Soft-deleted employee %s", employee_id)


organizations = Organizations()
employees = Employees()
