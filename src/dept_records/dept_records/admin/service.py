from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional

from ..attendance.model import AttendanceReport
from ..attendance.repository import AttendanceRepository
from ..core.constants import ADMIN_ROWS_PAGE_SIZE
from ..core.enums import ReportStatus
from ..core.exceptions import NotFoundError
from ..departments.repository import DepartmentRepository
from ..employees.repository import EmployeeRepository
from .export import export_filename, rows_to_excel
from .filters import (
    AdminRow,
    FilterOptions,
    FilterState,
    GroupedRow,
    Page,
    ReportDetail,
    apply_filters,
    cascading_options,
    flatten_reports,
    group_rows,
    paginate,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminTable:
    page: Page[GroupedRow]
    options: FilterOptions
    total_days: int

    def to_dict(self) -> dict:
        return {
            "rows": [r.to_dict() for r in self.page.items],
            "page": self.page.page,
            "pageSize": self.page.page_size,
            "total": self.page.total,
            "pages": self.page.pages,
            "totalDays": self.total_days,
            "options": self.options.to_dict(),
        }


class AdminReportService:
    """Read-side for the admin portal: report details, filtered rows, Excel export."""

    def __init__(self, reports: AttendanceRepository, employees: EmployeeRepository, departments: DepartmentRepository):
        self._reports = reports
        self._employees = employees
        self._departments = departments

    def _detail(self, report: AttendanceReport, *, with_entries: bool = True) -> ReportDetail:
        pairs = ()
        if with_entries:
            pairs = tuple(
                (entry, self._employees.get_by_id(entry.employee_id))
                for entry in self._reports.list_entries_by_report(report.report_id)
            )
        return ReportDetail(report=report, department=self._departments.get_by_id(report.department_id), entries=pairs)

    def list_reports(self) -> list[ReportDetail]:
        # entries are only expanded for reports that reached the salary section
        return [self._detail(r, with_entries=r.status == ReportStatus.SENT) for r in self._reports.list_reports()]

    def report_detail(self, report_id: int) -> ReportDetail:
        report = self._reports.get_report(report_id)
        if not report:
            raise NotFoundError("Report not found")
        return self._detail(report)

    def all_rows(self) -> list[AdminRow]:
        return flatten_reports(self._detail(r) for r in self._reports.list_reports(ReportStatus.SENT))

    def table(self, state: FilterState, *, page: int = 1, page_size: int = ADMIN_ROWS_PAGE_SIZE) -> AdminTable:
        rows = self.all_rows()
        filtered = apply_filters(rows, state)
        return AdminTable(
            page=paginate(group_rows(filtered), page, page_size),
            options=cascading_options(rows, state),
            total_days=sum(r.days for r in filtered),
        )

    def export(self, state: FilterState) -> tuple[io.BytesIO, str]:
        filtered = [g.row for g in group_rows(apply_filters(self.all_rows(), state))]

        department_name: Optional[str] = None
        if state.department is not None:
            department = self._departments.get_by_id(state.department)
            department_name = department.name if department else None

        logger.info("Exporting %s admin attendance rows", len(filtered))
        return rows_to_excel(filtered), export_filename(department_name, state.month)
