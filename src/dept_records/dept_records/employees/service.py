from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from werkzeug.datastructures import FileStorage

from ..common.validators import optional_date, optional_text, require_date, require_non_empty
from ..core.constants import DEFAULT_JOINING_SHIFT, EMPLOYEE_DOCUMENT_FIELDS
from ..core.enums import EmploymentStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..departments.repository import DepartmentRepository
from ..uploads.storage import UploadStore
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

# Wire name -> column for plain text fields.
_TEXT_FIELDS = {
    "joiningShift": "joining_shift",
    "salaryRegisterNo": "salary_register_no",
    "salaryAsstt": "salary_assistant",
    "officeMemoNo": "office_memo_no",
    "panNumber": "pan_number",
    "bankAccount": "bank_account",
    "aadharCard": "aadhar_card",
}

# Wire name -> column for document URLs. A client may send one back unchanged
# or blank it to drop the document; new files only arrive as uploads.
_URL_FIELDS = {
    "panCardUrl": "pan_card_url",
    "bankProofUrl": "bank_proof_url",
    "aadharCardUrl": "aadhar_card_url",
    "officeMemoUrl": "office_memo_url",
    "joiningReportUrl": "joining_report_url",
    "termExtensionUrl": "term_extension_url",
}


def parse_employment_status(value) -> EmploymentStatus:
    try:
        return EmploymentStatus(str(value).strip())
    except ValueError:
        allowed = ", ".join(s.value for s in EmploymentStatus)
        raise ValidationError(f"Employment status must be one of: {allowed}")


def employee_changes(data: Mapping, *, partial: bool) -> dict:
    """Translate a request payload into column values.

    With `partial` only the keys present in the payload are returned.
    """

    changes: dict = {}

    def present(key: str) -> bool:
        return not partial or key in data

    if present("epid"):
        changes["epid"] = require_non_empty(data.get("epid"), "EPID")
    if present("name"):
        changes["name"] = require_non_empty(data.get("name"), "Name")
    if present("designation"):
        changes["designation"] = require_non_empty(data.get("designation"), "Designation")
    if present("employmentStatus"):
        changes["employment_status"] = parse_employment_status(data.get("employmentStatus"))
    if present("joiningDate"):
        changes["joining_date"] = require_date(data.get("joiningDate"), "Joining date")
    if "termExpiry" in data:
        changes["term_expiry"] = optional_date(data.get("termExpiry"), "Term expiry")

    for key, column in _TEXT_FIELDS.items():
        if key in data:
            changes[column] = optional_text(data.get(key)) or ""
        elif not partial:
            changes[column] = DEFAULT_JOINING_SHIFT if column == "joining_shift" else ""

    for key, column in _URL_FIELDS.items():
        if key in data:
            changes[column] = optional_text(data.get(key))

    return changes


def check_term_expiry(status: EmploymentStatus, term_expiry) -> None:
    if status.requires_term_expiry and not term_expiry:
        raise ValidationError(f"Term expiry is required for {status.value} employees")


def check_document_urls(changes: dict, current: Optional[Employee] = None) -> list[str]:
    """Reject document URLs the employee does not already hold.

    Returns the URLs being cleared.
    """

    cleared = []
    for column in _URL_FIELDS.values():
        if column not in changes:
            continue
        held = getattr(current, column) if current else None
        url = changes[column]
        if url is None:
            if held:
                cleared.append(held)
        elif url != held:
            raise ValidationError("Documents must be uploaded as files")
    return cleared


class EmployeeService:
    """Use cases: maintain a department's employees and their documents."""

    def __init__(self, employees: EmployeeRepository, departments: DepartmentRepository, uploads: UploadStore):
        self._employees = employees
        self._departments = departments
        self._uploads = uploads

    def _require_department(self, department_id: int) -> None:
        if not self._departments.get_by_id(department_id):
            raise NotFoundError("Department not found")

    def get(self, employee_id: int, *, department_id: Optional[int] = None) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if department_id is not None and employee.department_id != int(department_id):
            raise AuthorizationError("Employee belongs to another department")
        return employee

    def list_for_department(self, department_id: int) -> Sequence[Employee]:
        self._require_department(department_id)
        return self._employees.list_by_department(department_id)

    def list_all(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def _store_files(self, files: Optional[Mapping[str, FileStorage]]) -> dict:
        stored = {}
        for field, column in EMPLOYEE_DOCUMENT_FIELDS.items():
            file = (files or {}).get(field)
            if file is not None and file.filename:
                stored[column] = self._uploads.save(file, field_name=field)
        return stored

    def create(self, department_id: int, data: Mapping, files: Optional[Mapping[str, FileStorage]] = None) -> Employee:
        self._require_department(department_id)
        values = employee_changes(data, partial=False)

        status = values["employment_status"]
        check_term_expiry(status, values.get("term_expiry"))
        if not status.requires_term_expiry:
            values["term_expiry"] = None
        check_document_urls(values)

        if self._employees.get_by_epid(department_id, values["epid"]):
            raise ValidationError("EPID already exists in this department")

        values.update(self._store_files(files))
        employee = self._employees.create(department_id=int(department_id), **values)
        logger.info("Employee %s (%s) created in department %s", employee.employee_id, employee.epid, department_id)
        return employee

    def update(
        self,
        employee_id: int,
        data: Mapping,
        files: Optional[Mapping[str, FileStorage]] = None,
        *,
        department_id: Optional[int] = None,
    ) -> Employee:
        current = self.get(employee_id, department_id=department_id)
        changes = employee_changes(data, partial=True)

        status = changes.get("employment_status", current.employment_status)
        term_expiry = changes["term_expiry"] if "term_expiry" in changes else current.term_expiry
        check_term_expiry(status, term_expiry)
        if not status.requires_term_expiry:
            changes["term_expiry"] = None
        cleared = check_document_urls(changes, current)

        new_epid = changes.get("epid")
        if new_epid and new_epid != current.epid:
            other = self._employees.get_by_epid(current.department_id, new_epid)
            if other and other.employee_id != current.employee_id:
                raise ValidationError("EPID already exists in this department")

        stored = self._store_files(files)
        changes.update(stored)
        employee = self._employees.update(current.employee_id, **changes)

        # replaced or cleared documents are removed once the row no longer points at them
        for column in stored:
            old_url = getattr(current, column)
            if old_url and old_url != getattr(employee, column):
                self._uploads.delete(old_url)
        for old_url in cleared:
            if old_url not in employee.document_urls:
                self._uploads.delete(old_url)

        logger.info("Employee %s updated (%s)", employee.employee_id, ", ".join(sorted(changes)) or "no changes")
        return employee

    def delete(self, employee_id: int, *, department_id: Optional[int] = None) -> None:
        employee = self.get(employee_id, department_id=department_id)
        if not self._employees.delete(employee.employee_id):
            raise NotFoundError("Employee not found")
        for url in employee.document_urls:
            self._uploads.delete(url)
        logger.info("Employee %s deleted from department %s", employee.employee_id, employee.department_id)
