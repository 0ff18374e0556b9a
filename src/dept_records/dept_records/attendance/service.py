from __future__ import annotations

import logging
import secrets
from typing import Any, Mapping, Optional, Sequence

from werkzeug.datastructures import FileStorage

from ..common.datetime_utils import now_local
from ..common.validators import optional_date, optional_text, require_int, require_month, require_year
from ..core.constants import TRANSACTION_ID_LENGTH
from ..core.enums import ReportStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..departments.repository import DepartmentRepository
from ..employees.repository import EmployeeRepository
from ..uploads.storage import UploadStore
from .model import AttendanceEntry, AttendanceReport
from .periods import EntrySummary, SheetRow, build_report_sheet, clamp_periods, parse_periods, summarize_periods
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def new_transaction_id() -> str:
    return secrets.token_hex(TRANSACTION_ID_LENGTH // 2).upper()


def parse_status(value: Any) -> ReportStatus:
    try:
        return ReportStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError("Status must be one of: draft, submitted, sent")


class AttendanceService:
    """Use cases: monthly reports, their entries and the draft -> submitted -> sent lifecycle."""

    def __init__(
        self,
        reports: AttendanceRepository,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        uploads: UploadStore,
    ):
        self._reports = reports
        self._employees = employees
        self._departments = departments
        self._uploads = uploads

    # ---- reports -------------------------------------------------------

    def get_report(self, report_id: int, *, department_id: Optional[int] = None) -> AttendanceReport:
        report = self._reports.get_report(report_id)
        if not report:
            raise NotFoundError("Report not found")
        if department_id is not None and report.department_id != int(department_id):
            raise AuthorizationError("Report belongs to another department")
        return report

    def list_reports(self, department_id: int) -> Sequence[AttendanceReport]:
        return self._reports.list_reports_by_department(department_id)

    def create_report(
        self,
        department_id: int,
        month: Any,
        year: Any,
        entries: Any = None,
    ) -> AttendanceReport:
        if not self._departments.get_by_id(department_id):
            raise NotFoundError("Department not found")
        month = require_month(month)
        year = require_year(year)

        if entries is None:
            entries = []
        if not isinstance(entries, list) or not all(isinstance(item, Mapping) for item in entries):
            raise ValidationError("Invalid entries data")
        # Every entry is checked before the report row exists.
        prepared = []
        for item in entries:
            employee_id, summary = self._prepare_entry(int(department_id), month, year, item.get("employeeId"), item.get("periods"))
            if any(employee_id == seen for seen, _ in prepared):
                raise ValidationError("This employee already has an entry in the report")
            prepared.append((employee_id, summary))

        report = self._reports.create_report(
            department_id=int(department_id),
            month=month,
            year=year,
            transaction_id=new_transaction_id(),
        )
        logger.info("Report %s created for department %s (%02d/%s)", report.report_id, department_id, month, year)

        for employee_id, summary in prepared:
            self._store_entry(report, employee_id, summary)
        return report

    def _transition(self, report: AttendanceReport, target: ReportStatus, changes: dict) -> None:
        if target == report.status:
            return
        if target != report.status.next():
            raise ValidationError(f"Cannot change status from {report.status.value} to {target.value}")
        changes["status"] = target
        if target == ReportStatus.SENT and report.receipt_no is None:
            changes["receipt_no"] = self._reports.next_receipt_no()
            changes["receipt_date"] = now_local()

    def update_report(
        self,
        report_id: int,
        data: Mapping,
        *,
        department_id: Optional[int] = None,
    ) -> AttendanceReport:
        """Apply a partial update.

        `receiptNo`/`receiptDate` in the payload are ignored: the receipt is
        issued by the first move into `sent` and never rewritten.
        """

        report = self.get_report(report_id, department_id=department_id)
        changes: dict = {}

        month = require_month(data["month"]) if "month" in data else report.month
        year = require_year(data["year"]) if "year" in data else report.year
        period_changed = (month, year) != (report.month, report.year)
        if period_changed:
            if not report.is_draft:
                raise ValidationError("Month and year can only be changed on a draft report")
            changes["month"], changes["year"] = month, year

        if "despatchNo" in data:
            changes["despatch_no"] = optional_text(data.get("despatchNo"))
        if "despatchDate" in data:
            changes["despatch_date"] = optional_date(data.get("despatchDate"), "Despatch date")

        if "status" in data:
            self._transition(report, parse_status(data.get("status")), changes)

        if not changes:
            return report

        if period_changed:
            self._reclamp_entries(report.report_id, month, year)

        updated = self._reports.update_report(report.report_id, **changes)
        if "status" in changes:
            logger.info("Report %s: %s -> %s", updated.report_id, report.status.value, updated.status.value)
        if "receipt_no" in changes:
            logger.info("Report %s issued receipt no %s", updated.report_id, updated.receipt_no)
        return updated

    def _reclamp_entries(self, report_id: int, month: int, year: int) -> None:
        for entry in self._reports.list_entries_by_report(report_id):
            periods = clamp_periods(entry.periods, month, year)
            if list(periods) == list(entry.periods):
                continue
            summary = summarize_periods(periods)
            self._reports.update_entry(entry.entry_id, days=summary.days, periods=summary.periods)
            logger.info("Entry %s clamped to %s days for %02d/%s", entry.entry_id, summary.days, month, year)

    def attach_signed_copy(
        self,
        report_id: int,
        file: Optional[FileStorage],
        *,
        department_id: Optional[int] = None,
    ) -> AttendanceReport:
        report = self.get_report(report_id, department_id=department_id)
        if report.is_draft:
            raise ValidationError("Submit the report before uploading the signed copy")
        if file is None or not file.filename:
            raise ValidationError("No file uploaded")
        if file.mimetype != "application/pdf":
            raise ValidationError("The signed copy must be a PDF")

        changes: dict = {"file_url": self._uploads.save(file, field_name="report")}
        self._transition(report, ReportStatus.SENT, changes)
        updated = self._reports.update_report(report.report_id, **changes)

        if report.file_url and report.file_url != updated.file_url:
            self._uploads.delete(report.file_url)
        logger.info("Report %s signed copy stored (%s), status %s", updated.report_id, updated.file_url, updated.status.value)
        return updated

    def delete_report(self, report_id: int, *, department_id: Optional[int] = None) -> None:
        report = self.get_report(report_id, department_id=department_id)
        if not report.is_draft:
            raise ValidationError("Only draft reports can be deleted")
        self._reports.delete_report(report.report_id)
        logger.info("Report %s deleted", report.report_id)

    def report_sheet(self, report_id: int, *, department_id: Optional[int] = None) -> list[SheetRow]:
        report = self.get_report(report_id, department_id=department_id)
        return build_report_sheet(
            report,
            self._employees.list_by_department(report.department_id),
            self._reports.list_entries_by_report(report.report_id),
        )

    # ---- entries -------------------------------------------------------

    def _require_draft(self, report: AttendanceReport) -> None:
        if not report.is_draft:
            raise ValidationError("Entries can only be changed while the report is a draft")

    def list_entries(self, report_id: int, *, department_id: Optional[int] = None) -> Sequence[AttendanceEntry]:
        report = self.get_report(report_id, department_id=department_id)
        return self._reports.list_entries_by_report(report.report_id)

    def add_entry(
        self,
        report_id: int,
        employee_id: Any,
        periods: Any,
        *,
        department_id: Optional[int] = None,
    ) -> AttendanceEntry:
        report = self.get_report(report_id, department_id=department_id)
        self._require_draft(report)

        employee_id, summary = self._prepare_entry(report.department_id, report.month, report.year, employee_id, periods)
        if any(e.employee_id == employee_id for e in self._reports.list_entries_by_report(report.report_id)):
            raise ValidationError("This employee already has an entry in the report")
        return self._store_entry(report, employee_id, summary)

    def _prepare_entry(
        self, department_id: int, month: int, year: int, employee_id: Any, periods: Any
    ) -> tuple[int, EntrySummary]:
        employee_id = require_int(employee_id, "Employee", min_value=1)
        employee = self._employees.get_by_id(employee_id)
        if not employee or employee.department_id != department_id:
            raise ValidationError("Employee does not belong to this department")
        return employee_id, summarize_periods(clamp_periods(parse_periods(periods), month, year))

    def _store_entry(self, report: AttendanceReport, employee_id: int, summary: EntrySummary) -> AttendanceEntry:
        entry = self._reports.create_entry(
            report_id=report.report_id,
            employee_id=employee_id,
            days=summary.days,
            from_date=summary.from_date,
            to_date=summary.to_date,
            periods=summary.periods,
            remarks=summary.remarks,
        )
        logger.info("Entry %s added to report %s for employee %s (%s days)", entry.entry_id, report.report_id, employee_id, entry.days)
        return entry

    def update_entry(
        self,
        report_id: int,
        entry_id: int,
        *,
        periods: Any = None,
        remarks: Optional[str] = None,
        department_id: Optional[int] = None,
    ) -> AttendanceEntry:
        report = self.get_report(report_id, department_id=department_id)
        self._require_draft(report)

        entry = self._reports.get_entry(entry_id)
        if not entry or entry.report_id != report.report_id:
            raise NotFoundError("Attendance entry not found")

        changes: dict = {}
        if periods is not None:
            summary = summarize_periods(clamp_periods(parse_periods(periods), report.month, report.year))
            changes.update(
                days=summary.days,
                from_date=summary.from_date,
                to_date=summary.to_date,
                periods=summary.periods,
                remarks=summary.remarks,
            )
        if remarks is not None:
            changes["remarks"] = str(remarks).strip()

        if not changes:
            return entry
        return self._reports.update_entry(entry.entry_id, **changes)
