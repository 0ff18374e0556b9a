from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..core.enums import EmploymentStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..database.memory_store import InMemoryStore
from .model import EMPLOYEE_FIELDS, Employee
from .repository import EmployeeRepository


def _sort_key(e: Employee):
    return (e.name, e.employee_id)


class InMemoryEmployeeRepository(EmployeeRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    @property
    def _rows(self) -> dict[int, Employee]:
        return self._store.table("employees")

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._rows.get(int(employee_id))

    def get_by_epid(self, department_id: int, epid: str) -> Optional[Employee]:
        return next(
            (e for e in self._rows.values() if e.department_id == int(department_id) and e.epid == epid),
            None,
        )

    def list_by_department(self, department_id: int) -> Sequence[Employee]:
        return sorted((e for e in self._rows.values() if e.department_id == int(department_id)), key=_sort_key)

    def list_all(self) -> Sequence[Employee]:
        return sorted(self._rows.values(), key=lambda e: (e.department_id,) + _sort_key(e))

    def create(self, **fields) -> Employee:
        values = {k: v for k, v in fields.items() if k in EMPLOYEE_FIELDS}
        values["employment_status"] = EmploymentStatus(values["employment_status"])
        with self._store.lock:
            if self.get_by_epid(values["department_id"], values["epid"]):
                raise ValidationError("EPID already exists in this department")
            employee = Employee(employee_id=self._store.next_id("employees"), **values)
            self._rows[employee.employee_id] = employee
            return employee

    def update(self, employee_id: int, **changes) -> Employee:
        values = {k: v for k, v in changes.items() if k in EMPLOYEE_FIELDS and k != "department_id"}
        if "employment_status" in values:
            values["employment_status"] = EmploymentStatus(values["employment_status"])
        with self._store.lock:
            employee = self.get_by_id(employee_id)
            if not employee:
                raise NotFoundError("Employee not found")
            employee = replace(employee, **values)
            self._rows[employee.employee_id] = employee
            return employee

    def delete(self, employee_id: int) -> bool:
        with self._store.lock:
            if self._rows.pop(int(employee_id), None) is None:
                return False
            entries = self._store.table("attendance_entries")
            for entry_id in [k for k, e in entries.items() if e.employee_id == int(employee_id)]:
                del entries[entry_id]
            return True
