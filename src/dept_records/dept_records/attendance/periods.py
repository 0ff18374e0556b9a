"""Day-count reconciliation for attendance periods.

A period is an inclusive date range: 2024-02-01..2024-02-29 counts 29 days.
An entry aggregates the periods of one employee in one report, and an
employee without an entry is taken as present for the whole month.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Iterable, Optional, Sequence, Tuple

from ..common import datetime_utils
from ..common.validators import optional_text, require_date
from ..core.constants import REMARKS_SEPARATOR
from ..core.exceptions import ValidationError
from .model import AttendanceEntry, AttendanceReport, Period


@dataclass(frozen=True)
class EntrySummary:
    """Column values derived from an entry's periods."""

    days: int
    from_date: str
    to_date: str
    remarks: str
    periods: Tuple[Period, ...]


@dataclass(frozen=True)
class SheetRow:
    employee: Any
    entry: Optional[AttendanceEntry]
    days: int
    periods: Tuple[Period, ...]
    remarks: str
    implicit: bool

    def to_dict(self) -> dict:
        return {
            "employee": self.employee.to_dict(),
            "entryId": self.entry.entry_id if self.entry else None,
            "days": self.days,
            "periods": [p.to_dict() for p in self.periods],
            "remarks": self.remarks,
            "implicit": self.implicit,
        }


def period_days(from_date: date, to_date: date) -> int:
    if to_date < from_date:
        raise ValidationError("Period end date must not be before its start date")
    return (to_date - from_date).days + 1


def days_in_month(month: int, year: int) -> int:
    return datetime_utils.days_in_month(month, year)


def make_period(from_date: date, to_date: date, remarks: Optional[str] = None) -> Period:
    return Period(from_date=from_date, to_date=to_date, days=period_days(from_date, to_date), remarks=remarks or "")


def parse_periods(raw: Any) -> list[Period]:
    """Build periods from a request payload (a list, or its JSON text).

    A client-sent `days` value is ignored; the count always comes from the dates.
    """

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            raise ValidationError("Invalid periods data")
    if not isinstance(raw, list) or not raw:
        raise ValidationError("At least one period is required")

    periods = []
    for idx, item in enumerate(raw, start=1):
        if not isinstance(item, dict):
            raise ValidationError("Invalid periods data")
        periods.append(
            make_period(
                require_date(item.get("fromDate"), f"Period {idx} from date"),
                require_date(item.get("toDate"), f"Period {idx} to date"),
                optional_text(item.get("remarks")),
            )
        )
    return periods


def clamp_periods(periods: Iterable[Period], month: int, year: int) -> list[Period]:
    limit = days_in_month(month, year)
    return [p if p.days <= limit else replace(p, days=limit) for p in periods]


def summarize_periods(periods: Sequence[Period]) -> EntrySummary:
    ordered = tuple(sorted(periods, key=lambda p: (p.from_date, p.to_date)))
    if not ordered:
        raise ValidationError("At least one period is required")
    remarks = REMARKS_SEPARATOR.join(p.remarks for p in ordered if p.remarks)
    return EntrySummary(
        days=sum(p.days for p in ordered),
        from_date=datetime_utils.format_iso_date(ordered[0].from_date),
        to_date=datetime_utils.format_iso_date(ordered[-1].to_date),
        remarks=remarks,
        periods=ordered,
    )


def serialize_periods(periods: Iterable[Period]) -> str:
    return json.dumps([p.to_dict() for p in periods])


def load_periods(text: Optional[str]) -> Tuple[Period, ...]:
    """Inverse of `serialize_periods`; stored day counts are kept as-is."""

    if not text:
        return ()
    return tuple(
        Period(
            from_date=datetime_utils.parse_iso_date(item["fromDate"]),
            to_date=datetime_utils.parse_iso_date(item["toDate"]),
            days=int(item["days"]),
            remarks=item.get("remarks") or "",
        )
        for item in json.loads(text)
    )


def build_report_sheet(
    report: AttendanceReport,
    employees: Iterable[Any],
    entries: Iterable[AttendanceEntry],
) -> list[SheetRow]:
    by_employee = {e.employee_id: e for e in entries}
    full_month = days_in_month(report.month, report.year)

    rows = []
    for employee in employees:
        entry = by_employee.get(employee.employee_id)
        if entry:
            rows.append(SheetRow(employee, entry, entry.days, entry.periods, entry.remarks, implicit=False))
        else:
            rows.append(SheetRow(employee, None, full_month, (), "", implicit=True))
    return rows
