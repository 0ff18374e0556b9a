from __future__ import annotations

import io

import pytest
from werkzeug.datastructures import FileStorage

from src.dept_records.dept_records.container import build_container
from src.dept_records.dept_records.main import create_app


def _make_file(name: str = "scan.pdf", content_type: str = "application/pdf", data: bytes = b"%PDF-1.4 test") -> FileStorage:
    return FileStorage(stream=io.BytesIO(data), filename=name, content_type=content_type)


@pytest.fixture
def make_file():
    return _make_file


@pytest.fixture
def container(tmp_path):
    return build_container(storage_backend="memory", upload_folder=str(tmp_path / "uploads"))


@pytest.fixture
def department(container):
    return container.auth_service.register(
        name="Department of Physics",
        hod_title="Chairperson",
        hod_name="Dr. N. Siddiqui",
        email="physics@example.edu",
        password="secret123",
    ).department


@pytest.fixture
def other_department(container):
    return container.auth_service.register(
        name="Department of Chemistry",
        hod_title="Chairperson",
        hod_name="Dr. K. Ahmad",
        email="chemistry@example.edu",
        password="secret123",
    ).department


@pytest.fixture
def employee(container, department):
    return container.employee_service.create(
        department.department_id,
        {
            "epid": "PH-001",
            "name": "Zoya Haider",
            "designation": "Lab Assistant",
            "employmentStatus": "Permanent",
            "joiningDate": "2020-08-01",
            "salaryRegisterNo": "SR-7",
            "salaryAsstt": "T. Ansari",
        },
    )


@pytest.fixture
def app(tmp_path):
    app = create_app("config.testing", UPLOAD_FOLDER=str(tmp_path / "uploads"))
    return app


@pytest.fixture
def client(app):
    return app.test_client()
