from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_epid(self, department_id: int, epid: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_by_department(self, department_id: int) -> Sequence[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def create(self, **fields) -> Employee:
        """Insert a row; keys are the names in `EMPLOYEE_FIELDS`."""

        raise NotImplementedError

    def update(self, employee_id: int, **changes) -> Employee:
        raise NotImplementedError

    def delete(self, employee_id: int) -> bool:
        """Delete the employee together with its attendance entries."""

        raise NotImplementedError
