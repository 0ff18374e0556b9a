from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Department


class DepartmentRepository(Protocol):
    def get_by_id(self, department_id: int) -> Optional[Department]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Department]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Department]:
        """Case-insensitive lookup."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def create(self, *, name: str, hod_title: str, hod_name: str, email: str, password_hash: str) -> Department:
        raise NotImplementedError

    def update(self, department_id: int, **changes) -> Department:
        raise NotImplementedError

    def delete(self, department_id: int) -> bool:
        raise NotImplementedError
