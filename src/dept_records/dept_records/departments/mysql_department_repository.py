from __future__ import annotations

from typing import Optional, Sequence

from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import Department
from .repository import DepartmentRepository

_COLUMNS = "department_id, name, hod_title, hod_name, email, password_hash, created_at"
_UPDATABLE = {"name", "hod_title", "hod_name", "email", "password_hash"}


def _to_department(r: dict) -> Department:
    return Department(
        department_id=int(r["department_id"]),
        name=r["name"],
        hod_title=r["hod_title"],
        hod_name=r["hod_name"],
        email=r["email"],
        password_hash=r["password_hash"],
        created_at=r.get("created_at"),
    )


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM departments WHERE {where}", params)
            r = fetchone(cur)
            return _to_department(r) if r else None

    def get_by_id(self, department_id: int) -> Optional[Department]:
        return self._get_one("department_id=%s", (int(department_id),))

    def get_by_email(self, email: str) -> Optional[Department]:
        return self._get_one("LOWER(email)=LOWER(%s)", (email,))

    def get_by_name(self, name: str) -> Optional[Department]:
        return self._get_one("LOWER(name)=LOWER(%s)", (name,))

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM departments ORDER BY name")
            return [_to_department(r) for r in fetchall(cur)]

    def create(self, *, name: str, hod_title: str, hod_name: str, email: str, password_hash: str) -> Department:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO departments(name, hod_title, hod_name, email, password_hash)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, hod_title, hod_name, email, password_hash),
            )
            department_id = int(cur.lastrowid)
        return self.get_by_id(department_id)

    def update(self, department_id: int, **changes) -> Department:
        values = {k: v for k, v in changes.items() if k in _UPDATABLE}
        if values:
            sql, params = build_update("departments", "department_id", department_id, values)
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, params)

        department = self.get_by_id(department_id)
        if not department:
            raise NotFoundError("Department not found")
        return department

    def delete(self, department_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM departments WHERE department_id=%s", (int(department_id),))
            return cur.rowcount > 0
