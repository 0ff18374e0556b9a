from __future__ import annotations

from datetime import date

import pytest

from src.dept_records.dept_records.core.enums import EmploymentStatus
from src.dept_records.dept_records.core.exceptions import AuthorizationError, NotFoundError, ValidationError


def _payload(**overrides):
    data = {
        "epid": "PH-100",
        "name": "Rehan Qadri",
        "designation": "Office Assistant",
        "employmentStatus": "Temporary",
        "termExpiry": "2026-03-31",
        "joiningDate": "2025-04-01",
        "salaryRegisterNo": "SR-9",
    }
    data.update(overrides)
    return data


def test_create_employee_with_defaults(container, department):
    employee = container.employee_service.create(department.department_id, _payload())

    assert employee.employment_status == EmploymentStatus.TEMPORARY
    assert employee.term_expiry == date(2026, 3, 31)
    assert employee.joining_shift == "morning"
    assert employee.to_dict()["salaryRegisterNo"] == "SR-9"


def test_term_expiry_required_for_non_permanent(container, department):
    with pytest.raises(ValidationError):
        container.employee_service.create(department.department_id, _payload(employmentStatus="Probation", termExpiry=""))


def test_term_expiry_cleared_for_permanent(container, department):
    employee = container.employee_service.create(department.department_id, _payload(employmentStatus="Permanent"))

    assert employee.term_expiry is None


def test_unknown_employment_status_rejected(container, department):
    with pytest.raises(ValidationError):
        container.employee_service.create(department.department_id, _payload(employmentStatus="Contract"))


def test_epid_unique_within_department(container, department, other_department):
    container.employee_service.create(department.department_id, _payload())

    with pytest.raises(ValidationError):
        container.employee_service.create(department.department_id, _payload(name="Someone Else"))

    # the same EPID is fine in another department
    container.employee_service.create(other_department.department_id, _payload())


def test_update_switching_to_temporary_needs_term_expiry(container, employee):
    with pytest.raises(ValidationError):
        container.employee_service.update(employee.employee_id, {"employmentStatus": "Temporary"})

    updated = container.employee_service.update(
        employee.employee_id, {"employmentStatus": "Temporary", "termExpiry": "2027-01-31"}
    )
    assert updated.term_expiry == date(2027, 1, 31)


def test_update_scoped_to_department(container, employee, other_department):
    with pytest.raises(AuthorizationError):
        container.employee_service.update(
            employee.employee_id, {"name": "X"}, department_id=other_department.department_id
        )


def test_update_replaces_document_file(container, employee, make_file):
    first = container.employee_service.update(employee.employee_id, {}, {"panCardDoc": make_file("pan.png", "image/png")})
    second = container.employee_service.update(employee.employee_id, {}, {"panCardDoc": make_file("pan2.png", "image/png")})

    assert first.pan_card_url != second.pan_card_url
    assert not container.uploads.resolve(first.pan_card_url).exists()
    assert container.uploads.resolve(second.pan_card_url).exists()


def test_document_url_of_another_record_rejected(container, department, other_department, make_file):
    owner = container.employee_service.create(
        other_department.department_id, _payload(epid="CH-7"), {"panCardDoc": make_file("pan.png", "image/png")}
    )

    with pytest.raises(ValidationError):
        container.employee_service.create(department.department_id, _payload(panCardUrl=owner.pan_card_url))
    assert container.uploads.resolve(owner.pan_card_url).exists()


def test_update_cannot_point_document_elsewhere(container, employee, other_department, make_file):
    owner = container.employee_service.create(
        other_department.department_id, _payload(epid="CH-8"), {"bankAccountDoc": make_file("bank.pdf")}
    )

    with pytest.raises(ValidationError):
        container.employee_service.update(employee.employee_id, {"bankProofUrl": owner.bank_proof_url})
    container.employee_service.delete(employee.employee_id)

    assert container.uploads.resolve(owner.bank_proof_url).exists()


def test_update_keeps_or_clears_held_document(container, employee, make_file):
    employee = container.employee_service.update(employee.employee_id, {}, {"panCardDoc": make_file("pan.png", "image/png")})
    url = employee.pan_card_url

    kept = container.employee_service.update(employee.employee_id, {"panCardUrl": url, "name": "Zoya H."})
    assert kept.pan_card_url == url

    cleared = container.employee_service.update(employee.employee_id, {"panCardUrl": ""})
    assert cleared.pan_card_url is None
    assert not container.uploads.resolve(url).exists()


def test_document_upload_rejects_other_types(container, department, make_file):
    with pytest.raises(ValidationError):
        container.employee_service.create(
            department.department_id, _payload(), {"bankAccountDoc": make_file("a.txt", "text/plain")}
        )


def test_delete_cascades_entries_and_files(container, department, employee, make_file):
    employee = container.employee_service.update(
        employee.employee_id, {}, {"aadharCardDoc": make_file("aadhar.pdf")}
    )
    report = container.attendance_service.create_report(department.department_id, 2, 2024)
    container.attendance_service.add_entry(
        report.report_id, employee.employee_id, [{"fromDate": "2024-02-01", "toDate": "2024-02-03"}]
    )

    container.employee_service.delete(employee.employee_id)

    assert container.attendance_service.list_entries(report.report_id) == []
    assert not container.uploads.resolve(employee.aadhar_card_url).exists()
    with pytest.raises(NotFoundError):
        container.employee_service.get(employee.employee_id)
