from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ReportStatus
from .model import AttendanceEntry, AttendanceReport, Period


class AttendanceRepository(Protocol):
    def create_report(self, *, department_id: int, month: int, year: int, transaction_id: str) -> AttendanceReport:
        raise NotImplementedError

    def get_report(self, report_id: int) -> Optional[AttendanceReport]:
        raise NotImplementedError

    def list_reports_by_department(self, department_id: int) -> Sequence[AttendanceReport]:
        """Newest reporting month first."""

        raise NotImplementedError

    def list_reports(self, status: Optional[ReportStatus] = None) -> Sequence[AttendanceReport]:
        raise NotImplementedError

    def update_report(self, report_id: int, **changes) -> AttendanceReport:
        raise NotImplementedError

    def delete_report(self, report_id: int) -> bool:
        """Delete the report together with its entries."""

        raise NotImplementedError

    def next_receipt_no(self) -> int:
        """Highest receipt number issued so far plus one (1 when none)."""

        raise NotImplementedError

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
        raise NotImplementedError

    def get_entry(self, entry_id: int) -> Optional[AttendanceEntry]:
        raise NotImplementedError

    def list_entries_by_report(self, report_id: int) -> Sequence[AttendanceEntry]:
        raise NotImplementedError

    def update_entry(self, entry_id: int, **changes) -> AttendanceEntry:
        raise NotImplementedError
