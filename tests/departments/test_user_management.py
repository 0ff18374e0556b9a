from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from src.dept_records.dept_records.container import build_container
from src.dept_records.dept_records.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.dept_records.dept_records.departments.service import admin_accounts_from_settings

CATALOGUE = ("Department of Law", "Department of History")


@pytest.fixture
def users_container(tmp_path):
    admins = admin_accounts_from_settings(
        [
            {"email": "admin@example.edu", "password_hash": generate_password_hash("admin123"), "admin_type": "super"},
            {"email": "salary@example.edu", "password_hash": generate_password_hash("pay123"), "admin_type": "salary"},
        ]
    )
    return build_container(
        storage_backend="memory",
        upload_folder=str(tmp_path / "uploads"),
        admin_accounts=admins,
        department_catalogue=CATALOGUE,
    )


@pytest.fixture
def service(users_container):
    return users_container.department_service


def _history(users_container):
    return users_container.auth_service.register(
        name="Department of History", hod_title=None, hod_name="Dr. R. Khan", email="history@example.edu", password="secret1"
    ).department


def _user(**overrides):
    data = {"name": "Prof. M. Zaidi", "email": "law@example.edu", "password": "secret1", "role": "department", "departmentId": -1}
    data.update(overrides)
    return data


def test_directory_flags_registered_departments(users_container, service):
    _history(users_container)

    listing = {d["name"]: d for d in service.directory()}

    assert listing["Department of Law"]["isRegistered"] is False
    assert listing["Department of Law"]["id"] == -1
    assert listing["Department of History"]["isRegistered"] is True
    assert listing["Department of History"]["id"] > 0


def test_create_user_registers_catalogue_department(users_container, service):
    user = service.create_user(_user())

    assert user["role"] == "department"
    assert user["departmentName"] == "Department of Law"
    assert user["id"] == 2 + user["departmentId"]
    assert users_container.auth_service.login("law@example.edu", "secret1").hod_name == "Prof. M. Zaidi"


def test_create_user_for_existing_department_replaces_login(users_container, service):
    department = _history(users_container)
    user = service.create_user(_user(email="hod.history@example.edu", departmentId=department.department_id))

    assert user["departmentId"] == department.department_id
    assert users_container.auth_service.login("hod.history@example.edu", "secret1").department_id == department.department_id


@pytest.mark.parametrize(
    "overrides",
    [
        {"role": "superadmin"},
        {"departmentId": None},
        {"departmentId": -99},
        {"email": "admin@example.edu"},
        {"password": "123"},
    ],
)
def test_create_user_rejects_bad_input(service, overrides):
    with pytest.raises((ValidationError, NotFoundError)):
        service.create_user(_user(**overrides))


def test_update_user_changes_name_and_password(users_container, service):
    user = service.create_user(_user())

    updated = service.update_user(user["id"], {"name": "Prof. New", "password": "", "email": "dean.law@example.edu"})

    assert updated["name"] == "Prof. New"
    assert users_container.auth_service.login("dean.law@example.edu", "secret1").hod_name == "Prof. New"


def test_update_user_cannot_move_department(users_container, service):
    department = _history(users_container)
    user = service.create_user(_user())

    with pytest.raises(ValidationError):
        service.update_user(user["id"], {"departmentId": department.department_id})


def test_system_users_are_protected(service):
    with pytest.raises(AuthorizationError):
        service.delete_user(1)
    with pytest.raises(AuthorizationError):
        service.update_user(2, {"name": "Someone"})


def test_delete_user_removes_department_records_and_files(users_container, service, make_file):
    user = service.create_user(_user())
    department_id = user["departmentId"]
    employee = users_container.employee_service.create(
        department_id,
        {
            "epid": "LW-1",
            "name": "Arif Jamal",
            "designation": "Clerk",
            "employmentStatus": "Permanent",
            "joiningDate": "2019-01-01",
        },
        {"panCardDoc": make_file("pan.pdf")},
    )
    report = users_container.attendance_service.create_report(
        department_id, 2, 2024, entries=[{"employeeId": employee.employee_id, "periods": [{"fromDate": "2024-02-01", "toDate": "2024-02-10"}]}]
    )

    deleted = service.delete_user(user["id"])

    assert deleted.name == "Department of Law"
    assert users_container.employees_repo.get_by_id(employee.employee_id) is None
    assert users_container.attendance_repo.get_report(report.report_id) is None
    assert users_container.attendance_repo.list_entries_by_report(report.report_id) == []
    assert not users_container.uploads.resolve(employee.pan_card_url).exists()
    assert all(u["departmentId"] != department_id for u in service.list_users())
    with pytest.raises(NotFoundError):
        service.delete_user(user["id"])
