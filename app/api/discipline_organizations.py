from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.discipline import OrganizationCreate, OrganizationRead
from app.services import discipline_employee as employee_service

router = APIRouter(prefix="/discipline", tags=["discipline-organizations"])


@router.post(
    "/organizations",
    response_model=OrganizationRead,
    status_code=status.HTTP_201_CREATED,
)
def create_organization(
    payload: OrganizationCreate, db: Session = Depends(get_db)
) -> OrganizationRead:
    return employee_service.organizations.create(db, payload)


@router.get("/organizations/{organization_id}", response_model=OrganizationRead)
def get_organization(
    organization_id: str, db: Session = Depends(get_db)
) -> OrganizationRead:
    return employee_service.organizations.get(db, organization_id)
