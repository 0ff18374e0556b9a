from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import ReportStatus
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import AttendanceEntry, AttendanceReport, Period
from .periods import load_periods, serialize_periods
from .repository import AttendanceRepository

_REPORT_COLUMNS = (
    "report_id, department_id, month, year, status, transaction_id, receipt_no, receipt_date, "
    "despatch_no, despatch_date, file_url, created_at"
)
_ENTRY_COLUMNS = "entry_id, report_id, employee_id, days, from_date, to_date, periods, remarks"

_REPORT_UPDATABLE = {
    "month",
    "year",
    "status",
    "receipt_no",
    "receipt_date",
    "despatch_no",
    "despatch_date",
    "file_url",
}
_ENTRY_UPDATABLE = {"days", "from_date", "to_date", "periods", "remarks"}


def _to_report(r: dict) -> AttendanceReport:
    return AttendanceReport(
        report_id=int(r["report_id"]),
        department_id=int(r["department_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        status=ReportStatus(r["status"]),
        transaction_id=r["transaction_id"],
        receipt_no=int(r["receipt_no"]) if r.get("receipt_no") is not None else None,
        receipt_date=r.get("receipt_date"),
        despatch_no=r.get("despatch_no"),
        despatch_date=r.get("despatch_date"),
        file_url=r.get("file_url"),
        created_at=r.get("created_at"),
    )


def _to_entry(r: dict) -> AttendanceEntry:
    return AttendanceEntry(
        entry_id=int(r["entry_id"]),
        report_id=int(r["report_id"]),
        employee_id=int(r["employee_id"]),
        days=int(r["days"]),
        from_date=r["from_date"],
        to_date=r["to_date"],
        periods=load_periods(r.get("periods")),
        remarks=r.get("remarks") or "",
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_report(self, *, department_id: int, month: int, year: int, transaction_id: str) -> AttendanceReport:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_reports(department_id, month, year, status, transaction_id)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(department_id), int(month), int(year), ReportStatus.DRAFT.value, transaction_id),
            )
            report_id = int(cur.lastrowid)
        return self.get_report(report_id)

    def get_report(self, report_id: int) -> Optional[AttendanceReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_REPORT_COLUMNS} FROM attendance_reports WHERE report_id=%s", (int(report_id),))
            r = fetchone(cur)
            return _to_report(r) if r else None

    def list_reports_by_department(self, department_id: int) -> Sequence[AttendanceReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REPORT_COLUMNS} FROM attendance_reports
                WHERE department_id=%s
                ORDER BY year DESC, month DESC, report_id DESC
                """,
                (int(department_id),),
            )
            return [_to_report(r) for r in fetchall(cur)]

    def list_reports(self, status: Optional[ReportStatus] = None) -> Sequence[AttendanceReport]:
        sql = f"SELECT {_REPORT_COLUMNS} FROM attendance_reports"
        params: tuple = ()
        if status is not None:
            sql += " WHERE status=%s"
            params = (ReportStatus(status).value,)
        sql += " ORDER BY year DESC, month DESC, report_id DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_report(r) for r in fetchall(cur)]

    def update_report(self, report_id: int, **changes) -> AttendanceReport:
        values = {k: v for k, v in changes.items() if k in _REPORT_UPDATABLE}
        if isinstance(values.get("status"), ReportStatus):
            values["status"] = values["status"].value
        if values:
            sql, params = build_update("attendance_reports", "report_id", report_id, values)
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, params)

        report = self.get_report(report_id)
        if not report:
            raise NotFoundError("Report not found")
        return report

    def delete_report(self, report_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_entries WHERE report_id=%s", (int(report_id),))
            cur.execute("DELETE FROM attendance_reports WHERE report_id=%s", (int(report_id),))
            return cur.rowcount > 0

    def next_receipt_no(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COALESCE(MAX(receipt_no), 0) AS last_no FROM attendance_reports")
            r = fetchone(cur)
            return int(r["last_no"]) + 1

    def create_entry(
        self,
        *,
        report_id: int,
        employee_id: int,
        days: int,
        from_date: str,
        to_date: str,
        periods: Sequence[Period],
        remarks: str,
    ) -> AttendanceEntry:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_entries(report_id, employee_id, days, from_date, to_date, periods, remarks)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(report_id), int(employee_id), int(days), from_date, to_date, serialize_periods(periods), remarks),
            )
            entry_id = int(cur.lastrowid)
        return self.get_entry(entry_id)

    def get_entry(self, entry_id: int) -> Optional[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ENTRY_COLUMNS} FROM attendance_entries WHERE entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_entries_by_report(self, report_id: int) -> Sequence[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM attendance_entries WHERE report_id=%s ORDER BY entry_id",
                (int(report_id),),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def update_entry(self, entry_id: int, **changes) -> AttendanceEntry:
        values = {k: v for k, v in changes.items() if k in _ENTRY_UPDATABLE}
        if "periods" in values:
            values["periods"] = serialize_periods(values["periods"])
        if values:
            sql, params = build_update("attendance_entries", "entry_id", entry_id, values)
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, params)

        entry = self.get_entry(entry_id)
        if not entry:
            raise NotFoundError("Attendance entry not found")
        return entry
