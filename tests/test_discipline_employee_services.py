import uuid

import pytest
from fastapi import HTTPException

from app.schemas.discipline import EmployeeCreate, EmployeeUpdate, OrganizationCreate
from app.services.discipline_employee import employees, organizations


class TestOrganizations:
    def test_create(self, db_session) -> None:
        org = organizations.create(
            db_session, OrganizationCreate(name="Cape Works", timezone_name="UTC")
        )
        assert org.timezone_name == "UTC"
        assert organizations.get(db_session, str(org.id)).name == "Cape Works"

    def test_invalid_timezone(self, db_session) -> None:
        with pytest.raises(HTTPException) as exc_info:
            organizations.create(
                db_session, OrganizationCreate(name="Bad", timezone_name="Mars/Base")
            )
        assert exc_info.value.status_code == 400

    def test_get_missing(self, db_session) -> None:
        with pytest.raises(HTTPException) as exc_info:
            organizations.get(db_session, str(uuid.uuid4()))
        assert exc_info.value.status_code == 404


class TestEmployees:
    def _create(self, db_session, organization, number, **overrides):
        data = {
            "organization_id": organization.id,
            "employee_number": number,
            "first_name": "Sipho",
            "last_name": f"Dlamini {number}",
            "department": "Warehouse",
        }
        data.update(overrides)
        return employees.create(db_session, EmployeeCreate(**data))

    def test_create_and_get(self, db_session, organization) -> None:
        emp = self._create(db_session, organization, "E-100")
        assert employees.get(db_session, str(emp.id)).employee_number == "E-100"

    def test_create_unknown_organization(self, db_session) -> None:
        payload = EmployeeCreate(
            organization_id=uuid.uuid4(),
            employee_number="E-1",
            first_name="A",
            last_name="B",
        )
        with pytest.raises(HTTPException) as exc_info:
            employees.create(db_session, payload)
        assert exc_info.value.status_code == 404

    def test_list_by_department(self, db_session, organization) -> None:
        self._create(db_session, organization, "E-1")
        self._create(db_session, organization, "E-2", department="Finance")
        items = employees.list(
            db_session, str(organization.id), "Finance", None, "last_name", "asc", 50, 0
        )
        assert [e.employee_number for e in items] == ["E-2"]

    def test_update(self, db_session, organization) -> None:
        emp = self._create(db_session, organization, "E-3")
        updated = employees.update(
            db_session, str(emp.id), EmployeeUpdate(position="Team Lead")
        )
        assert updated.position == "Team Lead"
        assert updated.department == "Warehouse"

    def test_soft_delete(self, db_session, organization) -> None:
        emp = self._create(db_session, organization, "E-4")
        employees.delete(db_session, str(emp.id))
        assert emp.is_active is False
        items = employees.list(
            db_session, str(organization.id), None, None, "last_name", "asc", 50, 0
        )
        assert items == []

    def test_invalid_identifier(self, db_session) -> None:
        with pytest.raises(HTTPException) as exc_info:
            employees.get(db_session, "not-a-uuid")
        assert exc_info.value.status_code == 400
