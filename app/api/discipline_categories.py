from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.common import ListResponse
from app.schemas.discipline import (
    SeedCategoriesRequest,
    WarningCategoryCreate,
    WarningCategoryRead,
    WarningCategoryUpdate,
)
from app.services import discipline_category as category_service

router = APIRouter(prefix="/discipline", tags=["discipline-categories"])


@router.post(
    "/categories",
    response_model=WarningCategoryRead,
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    payload: WarningCategoryCreate, db: Session = Depends(get_db)
) -> WarningCategoryRead:
    return category_service.warning_categories.create(db, payload)


@router.post(
    "/categories/seed",
    response_model=list[WarningCategoryRead],
    status_code=status.HTTP_201_CREATED,
)
def seed_categories(
    payload: SeedCategoriesRequest, db: Session = Depends(get_db)
) -> list[WarningCategoryRead]:
    return category_service.warning_categories.seed_defaults(
        db, payload.organization_id
    )


@router.get("/categories/{category_id}", response_model=WarningCategoryRead)
def get_category(category_id: str, db: Session = Depends(get_db)) -> WarningCategoryRead:
    return category_service.warning_categories.get(db, category_id)


@router.get("/categories", response_model=ListResponse[WarningCategoryRead])
def list_categories(
    organization_id: str | None = None,
    severity: str | None = None,
    is_active: bool | None = None,
    order_by: str = Query(default="name"),
    order_dir: str = Query(default="asc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
) -> dict:
    return category_service.warning_categories.list_response(
        db,
        organization_id,
        severity,
        is_active,
        order_by,
        order_dir,
        limit,
        offset,
    )


@router.patch("/categories/{category_id}", response_model=WarningCategoryRead)
def update_category(
    category_id: str,
    payload: WarningCategoryUpdate,
    db: Session = Depends(get_db),
) -> WarningCategoryRead:
    return category_service.warning_categories.update(db, category_id, payload)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: str, db: Session = Depends(get_db)) -> None:
    category_service.warning_categories.delete(db, category_id)
