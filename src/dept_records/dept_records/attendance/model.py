from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple

from ..common.datetime_utils import format_iso_date, format_iso_datetime
from ..core.enums import ReportStatus


@dataclass(frozen=True)
class Period:
    """A contiguous, inclusive date range inside one attendance entry."""

    from_date: date
    to_date: date
    days: int
    remarks: str = ""

    def to_dict(self) -> dict:
        return {
            "fromDate": format_iso_date(self.from_date),
            "toDate": format_iso_date(self.to_date),
            "days": self.days,
            "remarks": self.remarks,
        }


@dataclass(frozen=True)
class AttendanceReport:
    """Domain entity: one department's attendance report for a month."""

    report_id: int
    department_id: int
    month: int
    year: int
    status: ReportStatus
    transaction_id: str
    receipt_no: Optional[int] = None
    receipt_date: Optional[datetime] = None
    despatch_no: Optional[str] = None
    despatch_date: Optional[date] = None
    file_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_draft(self) -> bool:
        return self.status == ReportStatus.DRAFT

    def to_dict(self) -> dict:
        return {
            "id": self.report_id,
            "departmentId": self.department_id,
            "month": self.month,
            "year": self.year,
            "status": self.status.value,
            "transactionId": self.transaction_id,
            "receiptNo": self.receipt_no,
            "receiptDate": format_iso_datetime(self.receipt_date),
            "despatchNo": self.despatch_no,
            "despatchDate": format_iso_date(self.despatch_date),
            "fileUrl": self.file_url,
            "createdAt": format_iso_datetime(self.created_at),
        }


@dataclass(frozen=True)
class AttendanceEntry:
    """Aggregate of all periods recorded for one employee in one report."""

    entry_id: int
    report_id: int
    employee_id: int
    days: int
    from_date: str
    to_date: str
    periods: Tuple[Period, ...] = field(default_factory=tuple)
    remarks: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "reportId": self.report_id,
            "employeeId": self.employee_id,
            "days": self.days,
            "fromDate": self.from_date,
            "toDate": self.to_date,
            "periods": [p.to_dict() for p in self.periods],
            "remarks": self.remarks,
        }
