"""Admin view over sent attendance reports.

Every period of every entry becomes one row. The filter dimensions cascade:
the options offered for one dimension are the values still present after
applying all the *other* active filters, so no offered choice yields an
empty table.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Mapping, Optional, Sequence, Tuple, TypeVar

from ..attendance.model import AttendanceEntry, AttendanceReport
from ..common.datetime_utils import format_iso_date, month_label
from ..core.enums import ReportStatus

T = TypeVar("T")

DEPARTMENT = "department"
MONTH = "month"
SALARY_REGISTER = "salary_register"
SALARY_ASSISTANT = "salary_assistant"
DIMENSIONS = (DEPARTMENT, MONTH, SALARY_REGISTER, SALARY_ASSISTANT)


@dataclass(frozen=True)
class ReportDetail:
    """A report with its department and (entry, employee) pairs."""

    report: AttendanceReport
    department: Any
    entries: Tuple[Tuple[AttendanceEntry, Any], ...]

    def to_dict(self) -> dict:
        payload = self.report.to_dict()
        payload["department"] = self.department.to_dict() if self.department else None
        payload["entries"] = [
            dict(entry.to_dict(), employee=employee.to_dict() if employee else None)
            for entry, employee in self.entries
        ]
        return payload


@dataclass(frozen=True)
class AdminRow:
    report_id: int
    department_id: int
    department_name: str
    month: int
    year: int
    epid: str
    employee_name: str
    designation: str
    salary_assistant: str
    salary_register_no: str
    period: str
    days: int
    remarks: str

    @property
    def month_label(self) -> str:
        return month_label(self.month, self.year)

    def value(self, dimension: str):
        if dimension == DEPARTMENT:
            return self.department_id
        if dimension == MONTH:
            return self.month_label
        if dimension == SALARY_REGISTER:
            return self.salary_register_no
        if dimension == SALARY_ASSISTANT:
            return self.salary_assistant
        raise KeyError(dimension)

    def matches_search(self, needle: str) -> bool:
        haystack = (
            self.month_label,
            self.department_name,
            self.epid,
            self.employee_name,
            self.designation,
            self.salary_assistant,
            self.salary_register_no,
            self.remarks,
        )
        return any(needle in (text or "").lower() for text in haystack)

    def to_dict(self) -> dict:
        return {
            "reportId": self.report_id,
            "departmentId": self.department_id,
            "departmentName": self.department_name,
            "month": self.month_label,
            "employeeId": self.epid,
            "employeeName": self.employee_name,
            "designation": self.designation,
            "salaryAsstt": self.salary_assistant,
            "salaryRegisterNo": self.salary_register_no,
            "period": self.period,
            "days": self.days,
            "remarks": self.remarks,
        }


@dataclass(frozen=True)
class FilterState:
    department: Optional[int] = None
    month: Optional[str] = None
    salary_register: Optional[str] = None
    salary_assistant: Optional[str] = None
    search: str = ""

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "FilterState":
        """Read query-string filters; empty and "all" mean inactive."""

        def pick(key: str) -> Optional[str]:
            value = (args.get(key) or "").strip()
            return None if not value or value.lower() == "all" else value

        department = pick("department")
        return cls(
            department=int(department) if department and department.isdigit() else None,
            month=pick("month"),
            salary_register=pick("salaryRegister"),
            salary_assistant=pick("salaryAsstt"),
            search=(args.get("search") or args.get("q") or "").strip(),
        )

    def selected(self, dimension: str):
        return getattr(self, dimension)


@dataclass(frozen=True)
class GroupedRow:
    row: AdminRow
    show_department: bool
    show_month: bool

    def to_dict(self) -> dict:
        return dict(self.row.to_dict(), showDepartment=self.show_department, showMonth=self.show_month)


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    page: int
    page_size: int
    total: int
    pages: int


def flatten_reports(details: Iterable[ReportDetail]) -> list[AdminRow]:
    rows = []
    for detail in details:
        report = detail.report
        if report.status != ReportStatus.SENT:
            continue
        department_name = detail.department.name if detail.department else "Unknown"
        for entry, employee in detail.entries:
            if employee is None:
                continue
            for period in entry.periods:
                rows.append(
                    AdminRow(
                        report_id=report.report_id,
                        department_id=report.department_id,
                        department_name=department_name,
                        month=report.month,
                        year=report.year,
                        epid=employee.epid,
                        employee_name=employee.name,
                        designation=employee.designation,
                        salary_assistant=employee.salary_assistant or "",
                        salary_register_no=employee.salary_register_no or "",
                        period=f"{format_iso_date(period.from_date)} to {format_iso_date(period.to_date)}",
                        days=period.days,
                        remarks=period.remarks or "",
                    )
                )
    return rows


def apply_filters(rows: Iterable[AdminRow], state: FilterState, ignore: Optional[str] = None) -> list[AdminRow]:
    needle = state.search.lower()
    active = [(d, state.selected(d)) for d in DIMENSIONS if d != ignore and state.selected(d) is not None]

    out = []
    for row in rows:
        if needle and not row.matches_search(needle):
            continue
        if all(row.value(d) == selected for d, selected in active):
            out.append(row)
    return out


@dataclass(frozen=True)
class FilterOptions:
    departments: list[dict]
    months: list[str]
    salary_registers: list[str]
    salary_assistants: list[str]

    def to_dict(self) -> dict:
        return {
            "departments": self.departments,
            "months": self.months,
            "salaryRegisters": self.salary_registers,
            "salaryAssistants": self.salary_assistants,
        }


def cascading_options(rows: Sequence[AdminRow], state: FilterState) -> FilterOptions:
    departments = {r.department_id: r.department_name for r in apply_filters(rows, state, ignore=DEPARTMENT)}

    months: dict[str, tuple] = {}
    for r in apply_filters(rows, state, ignore=MONTH):
        months[r.month_label] = (r.year, r.month)

    registers = {r.salary_register_no for r in apply_filters(rows, state, ignore=SALARY_REGISTER)}
    assistants = {r.salary_assistant for r in apply_filters(rows, state, ignore=SALARY_ASSISTANT)}

    return FilterOptions(
        departments=[{"id": k, "name": v} for k, v in sorted(departments.items(), key=lambda kv: (kv[1].lower(), kv[0]))],
        months=sorted(months, key=months.get),
        salary_registers=sorted(v for v in registers if v),
        salary_assistants=sorted(v for v in assistants if v),
    )


def group_rows(rows: Iterable[AdminRow]) -> list[GroupedRow]:
    ordered = sorted(rows, key=lambda r: (r.department_name.lower(), r.department_id, r.year, r.month, r.employee_name.lower()))

    grouped = []
    current_dept = current_month = None
    for row in ordered:
        first_in_dept = row.department_id != current_dept
        first_in_month = first_in_dept or (row.year, row.month) != current_month
        current_dept, current_month = row.department_id, (row.year, row.month)
        grouped.append(GroupedRow(row, show_department=first_in_dept, show_month=first_in_month))
    return grouped


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    page_size = max(1, int(page_size))
    total = len(items)
    pages = max(1, math.ceil(total / page_size))
    page = min(max(1, int(page)), pages)
    start = (page - 1) * page_size
    return Page(items=list(items[start : start + page_size]), page=page, page_size=page_size, total=total, pages=pages)
