from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_now
from app.schemas.common import ListResponse
from app.schemas.discipline import (
    EmployeeCreate,
    EmployeeRead,
    EmployeeUpdate,
    EscalationRecommendationRead,
    WarningRead,
)
from app.services import discipline_employee as employee_service
from app.services import discipline_warning as warning_service

router = APIRouter(prefix="/discipline", tags=["discipline-employees"])


@router.post(
    "/employees",
    response_model=EmployeeRead,
    status_code=status.HTTP_201_CREATED,
)
def create_employee(payload: EmployeeCreate, db: Session = Depends(get_db)) -> EmployeeRead:
    return employee_service.employees.create(db, payload)


@router.get("/employees/{employee_id}", response_model=EmployeeRead)
def get_employee(employee_id: str, db: Session = Depends(get_db)) -> EmployeeRead:
    return employee_service.employees.get(db, employee_id)


@router.get("/employees", response_model=ListResponse[EmployeeRead])
def list_employees(
    organization_id: str | None = None,
    department: str | None = None,
    is_active: bool | None = None,
    order_by: str = Query(default="last_name"),
    order_dir: str = Query(default="asc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
) -> dict:
    return employee_service.employees.list_response(
        db,
        organization_id,
        department,
        is_active,
        order_by,
        order_dir,
        limit,
        offset,
    )


@router.patch("/employees/{employee_id}", response_model=EmployeeRead)
def update_employee(
    employee_id: str,
    payload: EmployeeUpdate,
    db: Session = Depends(get_db),
) -> EmployeeRead:
    return employee_service.employees.update(db, employee_id, payload)


@router.delete("/employees/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_employee(employee_id: str, db: Session = Depends(get_db)) -> None:
    employee_service.employees.delete(db, employee_id)


@router.get(
    "/employees/{employee_id}/recommendation",
    response_model=EscalationRecommendationRead,
)
def get_recommendation(
    employee_id: str,
    category_id: str,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> EscalationRecommendationRead:
    recommendation = warning_service.warnings.recommend(db, employee_id, category_id, now)
    return EscalationRecommendationRead.model_validate(recommendation)


@router.get(
    "/employees/{employee_id}/warnings",
    response_model=ListResponse[WarningRead],
)
def list_employee_warnings(
    employee_id: str,
    status: str | None = None,
    order_by: str = Query(default="issue_date"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
) -> dict:
    employee_service.employees.get(db, employee_id)
    return warning_service.warnings.list_response(
        db,
        None,
        employee_id,
        None,
        status,
        None,
        order_by,
        order_dir,
        limit,
        offset,
    )
