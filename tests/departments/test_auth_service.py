from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from src.dept_records.dept_records.core.enums import AdminType
from src.dept_records.dept_records.core.exceptions import AuthenticationError, ValidationError
from src.dept_records.dept_records.database.memory_store import InMemoryStore
from src.dept_records.dept_records.departments.memory_department_repository import InMemoryDepartmentRepository
from src.dept_records.dept_records.departments.service import (
    DepartmentAuthService,
    DepartmentService,
    admin_accounts_from_settings,
)


@pytest.fixture
def repo():
    return InMemoryDepartmentRepository(InMemoryStore())


@pytest.fixture
def admins():
    return admin_accounts_from_settings(
        [
            {"email": "Admin@Example.edu", "password_hash": generate_password_hash("admin123"), "admin_type": "super"},
            {"email": "salary@example.edu", "password_hash": generate_password_hash("pay123"), "admin_type": "salary"},
        ]
    )


def _register(auth, **overrides):
    data = dict(name="Department of Law", hod_title="Dean", hod_name="Prof. M. Zaidi", email="law@example.edu", password="secret1")
    data.update(overrides)
    return auth.register(**data)


def test_register_hashes_password(repo):
    result = _register(DepartmentAuthService(repo))

    assert result.created
    assert result.department.password_hash != "secret1"
    assert "password" not in str(result.department.to_dict()).lower()


def test_register_duplicate_email_rejected(repo):
    auth = DepartmentAuthService(repo)
    _register(auth)

    with pytest.raises(ValidationError):
        _register(auth, name="Another", email="LAW@example.edu")


def test_register_existing_name_replaces_credentials(repo):
    auth = DepartmentAuthService(repo)
    first = _register(auth).department

    result = _register(auth, name="department of law", hod_name="Prof. New", email="newhod@example.edu", password="newpass")

    assert not result.created
    assert result.department.department_id == first.department_id
    assert auth.login("newhod@example.edu", "newpass").hod_name == "Prof. New"
    with pytest.raises(AuthenticationError):
        auth.login("law@example.edu", "secret1")


def test_register_defaults_hod_title(repo):
    department = _register(DepartmentAuthService(repo), hod_title="").department
    assert department.hod_title == "Chairperson"


def test_login_wrong_password(repo):
    auth = DepartmentAuthService(repo)
    _register(auth)

    with pytest.raises(AuthenticationError):
        auth.login("law@example.edu", "wrong")
    with pytest.raises(AuthenticationError):
        auth.login("nobody@example.edu", "secret1")


def test_login_with_placeholder_hash_fails(repo):
    repo.create(name="Seeded", hod_title="Chairperson", hod_name="X", email="seed@example.edu", password_hash="")

    with pytest.raises(AuthenticationError):
        DepartmentAuthService(repo).login("seed@example.edu", "")


def test_admin_login(repo, admins):
    auth = DepartmentAuthService(repo, admins)

    assert auth.admin_login("admin@example.edu", "admin123").admin_type == AdminType.SUPER
    assert auth.admin_login("salary@example.edu", "pay123").to_dict()["adminType"] == "salary"
    with pytest.raises(AuthenticationError):
        auth.admin_login("salary@example.edu", "admin123")


def test_list_users_includes_admins_and_departments(repo, admins):
    _register(DepartmentAuthService(repo))

    users = DepartmentService(repo, admins).list_users()

    assert [u["role"] for u in users] == ["superadmin", "salary", "department"]
    assert [u["id"] for u in users] == [1, 2, 3]
    assert users[2]["departmentName"] == "Department of Law"
