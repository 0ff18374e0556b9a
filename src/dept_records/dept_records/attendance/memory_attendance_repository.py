from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import ReportStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..database.memory_store import InMemoryStore
from .model import AttendanceEntry, AttendanceReport, Period
from .repository import AttendanceRepository

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


def _newest_first(reports) -> list[AttendanceReport]:
    return sorted(reports, key=lambda r: (r.year, r.month, r.report_id), reverse=True)


class InMemoryAttendanceRepository(AttendanceRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    @property
    def _reports(self) -> dict[int, AttendanceReport]:
        return self._store.table("attendance_reports")

    @property
    def _entries(self) -> dict[int, AttendanceEntry]:
        return self._store.table("attendance_entries")

    def create_report(self, *, department_id: int, month: int, year: int, transaction_id: str) -> AttendanceReport:
        with self._store.lock:
            report = AttendanceReport(
                report_id=self._store.next_id("attendance_reports"),
                department_id=int(department_id),
                month=int(month),
                year=int(year),
                status=ReportStatus.DRAFT,
                transaction_id=transaction_id,
                created_at=now_local(),
            )
            self._reports[report.report_id] = report
            return report

    def get_report(self, report_id: int) -> Optional[AttendanceReport]:
        return self._reports.get(int(report_id))

    def list_reports_by_department(self, department_id: int) -> Sequence[AttendanceReport]:
        return _newest_first(r for r in self._reports.values() if r.department_id == int(department_id))

    def list_reports(self, status: Optional[ReportStatus] = None) -> Sequence[AttendanceReport]:
        if status is None:
            return _newest_first(self._reports.values())
        status = ReportStatus(status)
        return _newest_first(r for r in self._reports.values() if r.status == status)

    def update_report(self, report_id: int, **changes) -> AttendanceReport:
        values = {k: v for k, v in changes.items() if k in _REPORT_UPDATABLE}
        if "status" in values:
            values["status"] = ReportStatus(values["status"])
        with self._store.lock:
            report = self.get_report(report_id)
            if not report:
                raise NotFoundError("Report not found")
            receipt_no = values.get("receipt_no")
            if receipt_no is not None and any(
                r.receipt_no == receipt_no and r.report_id != report.report_id for r in self._reports.values()
            ):
                # mirrors the UNIQUE(receipt_no) key of the relational schema
                raise ValidationError(f"Receipt number {receipt_no} is already issued")
            report = replace(report, **values)
            self._reports[report.report_id] = report
            return report

    def delete_report(self, report_id: int) -> bool:
        with self._store.lock:
            if self._reports.pop(int(report_id), None) is None:
                return False
            for entry_id in [k for k, e in self._entries.items() if e.report_id == int(report_id)]:
                del self._entries[entry_id]
            return True

    def next_receipt_no(self) -> int:
        issued = [r.receipt_no for r in self._reports.values() if r.receipt_no is not None]
        return max(issued, default=0) + 1

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
        with self._store.lock:
            entry = AttendanceEntry(
                entry_id=self._store.next_id("attendance_entries"),
                report_id=int(report_id),
                employee_id=int(employee_id),
                days=int(days),
                from_date=from_date,
                to_date=to_date,
                periods=tuple(periods),
                remarks=remarks,
            )
            self._entries[entry.entry_id] = entry
            return entry

    def get_entry(self, entry_id: int) -> Optional[AttendanceEntry]:
        return self._entries.get(int(entry_id))

    def list_entries_by_report(self, report_id: int) -> Sequence[AttendanceEntry]:
        return sorted((e for e in self._entries.values() if e.report_id == int(report_id)), key=lambda e: e.entry_id)

    def update_entry(self, entry_id: int, **changes) -> AttendanceEntry:
        values = {k: v for k, v in changes.items() if k in _ENTRY_UPDATABLE}
        if "periods" in values:
            values["periods"] = tuple(values["periods"])
        with self._store.lock:
            entry = self.get_entry(entry_id)
            if not entry:
                raise NotFoundError("Attendance entry not found")
            entry = replace(entry, **values)
            self._entries[entry.entry_id] = entry
            return entry
