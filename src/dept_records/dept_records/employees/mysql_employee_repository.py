from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EmploymentStatus
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import EMPLOYEE_FIELDS, Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, " + ", ".join(EMPLOYEE_FIELDS)


def _to_employee(r: dict) -> Employee:
    values = {k: r.get(k) for k in EMPLOYEE_FIELDS}
    values["department_id"] = int(r["department_id"])
    values["employment_status"] = EmploymentStatus(r["employment_status"])
    for text_field in ("salary_register_no", "salary_assistant", "office_memo_no", "pan_number", "bank_account", "aadhar_card"):
        values[text_field] = values[text_field] or ""
    return Employee(employee_id=int(r["employee_id"]), **values)


def _to_row(values: dict) -> dict:
    row = {k: v for k, v in values.items() if k in EMPLOYEE_FIELDS}
    if isinstance(row.get("employment_status"), EmploymentStatus):
        row["employment_status"] = row["employment_status"].value
    return row


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_epid(self, department_id: int, epid: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE department_id=%s AND epid=%s",
                (int(department_id), epid),
            )
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_by_department(self, department_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE department_id=%s ORDER BY name, employee_id",
                (int(department_id),),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY department_id, name, employee_id")
            return [_to_employee(r) for r in fetchall(cur)]

    def create(self, **fields) -> Employee:
        row = _to_row(fields)
        columns = ", ".join(row)
        placeholders = ", ".join(["%s"] * len(row))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO employees({columns}) VALUES({placeholders})", tuple(row.values()))
            employee_id = int(cur.lastrowid)
        return self.get_by_id(employee_id)

    def update(self, employee_id: int, **changes) -> Employee:
        row = _to_row(changes)
        row.pop("department_id", None)
        if row:
            sql, params = build_update("employees", "employee_id", employee_id, row)
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, params)

        employee = self.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def delete(self, employee_id: int) -> bool:
        # attendance_entries rows go with the FK's ON DELETE CASCADE
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
            return cur.rowcount > 0
