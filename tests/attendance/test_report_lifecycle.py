from __future__ import annotations

import pytest

from src.dept_records.dept_records.core.enums import ReportStatus
from src.dept_records.dept_records.core.exceptions import AuthorizationError, NotFoundError, ValidationError

FEB_2024 = [{"fromDate": "2024-02-01", "toDate": "2024-02-29", "remarks": ""}]


@pytest.fixture
def attendance(container):
    return container.attendance_service


@pytest.fixture
def draft(attendance, department):
    return attendance.create_report(department.department_id, 2, 2024)


def test_new_report_is_draft_with_transaction_id(draft):
    assert draft.status == ReportStatus.DRAFT
    assert len(draft.transaction_id) == 8
    assert draft.transaction_id == draft.transaction_id.upper()
    assert draft.receipt_no is None


def test_create_report_validates_month(attendance, department):
    with pytest.raises(ValidationError):
        attendance.create_report(department.department_id, 13, 2024)


def test_create_report_with_initial_entries(attendance, department, employee):
    report = attendance.create_report(
        department.department_id, "2", "2024", entries=[{"employeeId": employee.employee_id, "periods": FEB_2024}]
    )

    [entry] = attendance.list_entries(report.report_id)
    assert entry.days == 29


def test_create_report_with_bad_entry_stores_nothing(attendance, department, employee):
    entries = [
        {"employeeId": employee.employee_id, "periods": FEB_2024},
        {"employeeId": 9999, "periods": FEB_2024},
    ]

    with pytest.raises(ValidationError):
        attendance.create_report(department.department_id, 2, 2024, entries=entries)

    assert list(attendance.list_reports(department.department_id)) == []


def test_create_report_with_duplicate_employee_stores_nothing(attendance, department, employee):
    entries = [{"employeeId": employee.employee_id, "periods": FEB_2024}] * 2

    with pytest.raises(ValidationError):
        attendance.create_report(department.department_id, 2, 2024, entries=entries)

    assert list(attendance.list_reports(department.department_id)) == []


@pytest.mark.parametrize("entries", ["oops", [1, 2], {"employeeId": 1}])
def test_create_report_rejects_malformed_entries(attendance, department, entries):
    with pytest.raises(ValidationError, match="Invalid entries data"):
        attendance.create_report(department.department_id, 2, 2024, entries=entries)

    assert list(attendance.list_reports(department.department_id)) == []


def test_entry_days_follow_periods(attendance, draft, employee):
    entry = attendance.add_entry(
        draft.report_id,
        employee.employee_id,
        [
            {"fromDate": "2024-02-15", "toDate": "2024-02-20", "remarks": "Medical leave"},
            {"fromDate": "2024-02-01", "toDate": "2024-02-05"},
        ],
    )

    assert entry.days == 5 + 6
    assert (entry.from_date, entry.to_date) == ("2024-02-01", "2024-02-20")
    assert entry.remarks == "Medical leave"


def test_second_entry_for_same_employee_rejected(attendance, draft, employee):
    attendance.add_entry(draft.report_id, employee.employee_id, FEB_2024)

    with pytest.raises(ValidationError):
        attendance.add_entry(draft.report_id, employee.employee_id, FEB_2024)


def test_entry_for_employee_of_other_department_rejected(container, attendance, draft, other_department):
    outsider = container.employee_service.create(
        other_department.department_id,
        {
            "epid": "CH-1",
            "name": "Outsider",
            "designation": "Clerk",
            "employmentStatus": "Permanent",
            "joiningDate": "2021-01-01",
        },
    )

    with pytest.raises(ValidationError):
        attendance.add_entry(draft.report_id, outsider.employee_id, FEB_2024)


def test_update_entry_replaces_periods(attendance, draft, employee):
    entry = attendance.add_entry(draft.report_id, employee.employee_id, FEB_2024)

    updated = attendance.update_entry(
        draft.report_id, entry.entry_id, periods=[{"fromDate": "2024-02-01", "toDate": "2024-02-10", "remarks": "Left"}]
    )

    assert updated.days == 10
    assert updated.remarks == "Left"
    assert len(updated.periods) == 1


def test_update_entry_of_other_report_is_not_found(attendance, department, draft, employee):
    entry = attendance.add_entry(draft.report_id, employee.employee_id, FEB_2024)
    other = attendance.create_report(department.department_id, 3, 2024)

    with pytest.raises(NotFoundError):
        attendance.update_entry(other.report_id, entry.entry_id, remarks="x")


def test_status_moves_forward_one_step(attendance, draft):
    with pytest.raises(ValidationError):
        attendance.update_report(draft.report_id, {"status": "sent"})

    submitted = attendance.update_report(draft.report_id, {"status": "submitted"})
    assert submitted.status == ReportStatus.SUBMITTED

    with pytest.raises(ValidationError):
        attendance.update_report(draft.report_id, {"status": "draft"})

    with pytest.raises(ValidationError):
        attendance.update_report(draft.report_id, {"status": "archived"})


def test_repeating_current_status_is_noop(attendance, draft):
    assert attendance.update_report(draft.report_id, {"status": "draft"}) == draft


def test_receipt_assigned_once_on_sent(attendance, department):
    first = attendance.create_report(department.department_id, 1, 2024)
    second = attendance.create_report(department.department_id, 2, 2024)
    for report in (first, second):
        attendance.update_report(report.report_id, {"status": "submitted"})

    first_sent = attendance.update_report(first.report_id, {"status": "sent", "receiptNo": 99})
    second_sent = attendance.update_report(second.report_id, {"status": "sent"})

    assert first_sent.receipt_no == 1
    assert first_sent.receipt_date is not None
    assert second_sent.receipt_no == 2

    again = attendance.update_report(first.report_id, {"status": "sent", "receiptNo": 50, "despatchNo": "D-17"})
    assert again.receipt_no == 1
    assert again.receipt_date == first_sent.receipt_date
    assert again.despatch_no == "D-17"


def test_receipt_number_cannot_be_issued_twice(container, attendance, department):
    first = attendance.create_report(department.department_id, 1, 2024)
    second = attendance.create_report(department.department_id, 2, 2024)
    container.attendance_repo.update_report(first.report_id, receipt_no=1)

    with pytest.raises(ValidationError):
        container.attendance_repo.update_report(second.report_id, receipt_no=1)
    assert attendance.get_report(second.report_id).receipt_no is None


def test_entries_locked_after_submit(attendance, draft, employee):
    attendance.update_report(draft.report_id, {"status": "submitted"})

    with pytest.raises(ValidationError):
        attendance.add_entry(draft.report_id, employee.employee_id, FEB_2024)


def test_month_change_clamps_entries(attendance, department, employee):
    report = attendance.create_report(department.department_id, 1, 2023)
    entry = attendance.add_entry(
        report.report_id, employee.employee_id, [{"fromDate": "2023-01-01", "toDate": "2023-01-31"}]
    )
    assert entry.days == 31

    attendance.update_report(report.report_id, {"month": 2})

    [clamped] = attendance.list_entries(report.report_id)
    assert clamped.days == 28
    assert all(p.days <= 28 for p in clamped.periods)


def test_month_change_only_in_draft(attendance, draft):
    attendance.update_report(draft.report_id, {"status": "submitted"})

    with pytest.raises(ValidationError):
        attendance.update_report(draft.report_id, {"month": 3})


def test_delete_only_draft_and_cascades(container, attendance, department, draft, employee):
    attendance.add_entry(draft.report_id, employee.employee_id, FEB_2024)
    attendance.delete_report(draft.report_id)

    assert container.attendance_repo.get_report(draft.report_id) is None
    assert container.attendance_repo.list_entries_by_report(draft.report_id) == []

    report = attendance.create_report(department.department_id, 3, 2024)
    attendance.update_report(report.report_id, {"status": "submitted"})
    with pytest.raises(ValidationError):
        attendance.delete_report(report.report_id)


def test_signed_copy_marks_report_sent(container, attendance, draft, make_file):
    with pytest.raises(ValidationError):
        attendance.attach_signed_copy(draft.report_id, make_file())

    attendance.update_report(draft.report_id, {"status": "submitted"})
    sent = attendance.attach_signed_copy(draft.report_id, make_file())

    assert sent.status == ReportStatus.SENT
    assert sent.receipt_no == 1
    assert sent.file_url.startswith("/uploads/")
    assert container.uploads.resolve(sent.file_url).exists()


def test_signed_copy_must_be_pdf(attendance, draft, make_file):
    attendance.update_report(draft.report_id, {"status": "submitted"})

    with pytest.raises(ValidationError):
        attendance.attach_signed_copy(draft.report_id, make_file("scan.png", "image/png"))


def test_report_of_other_department_forbidden(attendance, draft, other_department):
    with pytest.raises(AuthorizationError):
        attendance.get_report(draft.report_id, department_id=other_department.department_id)
