import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")
os.environ.setdefault("ORGANIZATION_TIMEZONE", "Africa/Johannesburg")

from datetime import date, datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.db import Base  # noqa: E402
from app.models.discipline import (  # noqa: E402
    CategorySeverity,
    DisciplinaryWarning,
    Employee,
    Organization,
    WarningCategory,
    WarningLevel,
    WarningStatus,
)
from app.services.discipline_validity import compute_expiry  # noqa: E402

# 12:00 in Johannesburg; local date 2024-06-15.
FIXED_NOW = datetime(2024, 6, 15, 10, 0, tzinfo=timezone.utc)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    yield session
    session.close()


@pytest.fixture()
def now():
    return FIXED_NOW


@pytest.fixture()
def client(db_session):
    from app.api.deps import get_db, get_now
    from app.main import app

    def _override_get_db():
        try:
            yield db_session
            db_session.commit()
        except Exception:
            db_session.rollback()
            raise

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_now] = lambda: FIXED_NOW
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def organization(db_session):
    org = Organization(name="Acme Holdings", timezone_name="Africa/Johannesburg")
    db_session.add(org)
    db_session.commit()
    db_session.refresh(org)
    return org


@pytest.fixture()
def employee(db_session, organization):
    emp = Employee(
        organization_id=organization.id,
        employee_number="E-001",
        first_name="Thandi",
        last_name="Nkosi",
        department="Operations",
    )
    db_session.add(emp)
    db_session.commit()
    db_session.refresh(emp)
    return emp


@pytest.fixture()
def category(db_session, organization):
    cat = WarningCategory(
        organization_id=organization.id,
        code="attendance_punctuality",
        name="Attendance & Punctuality",
        severity=CategorySeverity.minor,
        escalation_path=[
            "counselling",
            "verbal",
            "first_written",
            "second_written",
            "final_written",
        ],
        default_validity_months=6,
    )
    db_session.add(cat)
    db_session.commit()
    db_session.refresh(cat)
    return cat


@pytest.fixture()
def make_warning(db_session):
    """Insert a warning row directly, bypassing validation."""

    def _make(
        employee,
        category,
        *,
        level=WarningLevel.counselling,
        issue_date=date(2024, 5, 1),
        validity_months=6,
        status=WarningStatus.delivered,
        review_date=None,
        review_outcome=None,
    ):
        warning = DisciplinaryWarning(
            organization_id=employee.organization_id,
            employee_id=employee.id,
            category_id=category.id,
            level=level,
            issue_date=issue_date,
            incident_date=issue_date,
            description="Test incident",
            validity_months=validity_months,
            expiry_date=compute_expiry(issue_date, validity_months),
            status=status,
            review_date=review_date,
            review_outcome=review_outcome,
        )
        db_session.add(warning)
        db_session.commit()
        db_session.refresh(warning)
        return warning

    return _make
