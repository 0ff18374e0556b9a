from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.exceptions import NotFoundError, ValidationError
from ..database.memory_store import InMemoryStore
from .model import Department
from .repository import DepartmentRepository

_UPDATABLE = {"name", "hod_title", "hod_name", "email", "password_hash"}


class InMemoryDepartmentRepository(DepartmentRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    @property
    def _rows(self) -> dict[int, Department]:
        return self._store.table("departments")

    def get_by_id(self, department_id: int) -> Optional[Department]:
        return self._rows.get(int(department_id))

    def get_by_email(self, email: str) -> Optional[Department]:
        email = (email or "").lower()
        return next((d for d in self._rows.values() if d.email.lower() == email), None)

    def get_by_name(self, name: str) -> Optional[Department]:
        name = (name or "").lower()
        return next((d for d in self._rows.values() if d.name.lower() == name), None)

    def list_all(self) -> Sequence[Department]:
        return sorted(self._rows.values(), key=lambda d: d.name)

    def create(self, *, name: str, hod_title: str, hod_name: str, email: str, password_hash: str) -> Department:
        with self._store.lock:
            if self.get_by_email(email):
                # mirrors the UNIQUE(email) key of the relational schema
                raise ValidationError("Email already registered")
            department = Department(
                department_id=self._store.next_id("departments"),
                name=name,
                hod_title=hod_title,
                hod_name=hod_name,
                email=email,
                password_hash=password_hash,
                created_at=now_local(),
            )
            self._rows[department.department_id] = department
            return department

    def update(self, department_id: int, **changes) -> Department:
        with self._store.lock:
            department = self.get_by_id(department_id)
            if not department:
                raise NotFoundError("Department not found")
            values = {k: v for k, v in changes.items() if k in _UPDATABLE}
            department = replace(department, **values)
            self._rows[department.department_id] = department
            return department

    def delete(self, department_id: int) -> bool:
        """Drops the department with its employees, reports, entries and documents."""

        department_id = int(department_id)
        with self._store.lock:
            if self._rows.pop(department_id, None) is None:
                return False
            reports = self._store.table("attendance_reports")
            report_ids = {k for k, r in reports.items() if r.department_id == department_id}
            employees = self._store.table("employees")
            employee_ids = {k for k, e in employees.items() if e.department_id == department_id}
            entries = self._store.table("attendance_entries")
            for entry_id in [k for k, e in entries.items() if e.report_id in report_ids or e.employee_id in employee_ids]:
                del entries[entry_id]
            for report_id in report_ids:
                del reports[report_id]
            for employee_id in employee_ids:
                del employees[employee_id]
            documents = self._store.table("documents")
            for document_id in [k for k, d in documents.items() if d.department_id == department_id]:
                del documents[document_id]
            return True
