from __future__ import annotations

from datetime import date

import pytest

from src.dept_records.dept_records.attendance.model import AttendanceEntry, AttendanceReport, Period
from src.dept_records.dept_records.attendance.periods import (
    build_report_sheet,
    clamp_periods,
    days_in_month,
    load_periods,
    make_period,
    parse_periods,
    period_days,
    serialize_periods,
    summarize_periods,
)
from src.dept_records.dept_records.core.enums import EmploymentStatus, ReportStatus
from src.dept_records.dept_records.core.exceptions import ValidationError
from src.dept_records.dept_records.employees.model import Employee


def test_period_days_is_inclusive():
    assert period_days(date(2024, 3, 5), date(2024, 3, 5)) == 1
    assert period_days(date(2024, 3, 1), date(2024, 3, 10)) == 10


def test_leap_february_counts_29_days():
    assert period_days(date(2024, 2, 1), date(2024, 2, 29)) == 29
    assert days_in_month(2, 2024) == 29
    assert days_in_month(2, 2023) == 28


def test_period_end_before_start_rejected():
    with pytest.raises(ValidationError):
        period_days(date(2024, 3, 10), date(2024, 3, 1))


def test_parse_periods_recomputes_days_from_dates():
    periods = parse_periods([{"fromDate": "2024-02-01", "toDate": "2024-02-29", "days": 3, "remarks": "  "}])

    assert periods == [Period(date(2024, 2, 1), date(2024, 2, 29), 29, "")]


@pytest.mark.parametrize("raw", [None, [], "not json", [1, 2], [{"fromDate": "2024-02-01"}]])
def test_parse_periods_rejects_bad_payloads(raw):
    with pytest.raises(ValidationError):
        parse_periods(raw)


def test_parse_periods_accepts_json_text():
    periods = parse_periods('[{"fromDate": "2024-01-02", "toDate": "2024-01-03"}]')
    assert [p.days for p in periods] == [2]


def test_clamp_limits_days_to_new_month():
    january = make_period(date(2024, 1, 1), date(2024, 1, 31))
    short = make_period(date(2024, 1, 1), date(2024, 1, 5))

    clamped = clamp_periods([january, short], 2, 2023)

    assert [p.days for p in clamped] == [28, 5]
    assert clamped[0].from_date == january.from_date


def test_summarize_sums_days_and_orders_chronologically():
    late = make_period(date(2024, 3, 20), date(2024, 3, 25), "Earned leave")
    early = make_period(date(2024, 3, 1), date(2024, 3, 4))
    middle = make_period(date(2024, 3, 10), date(2024, 3, 10), "Half day")

    summary = summarize_periods([late, early, middle])

    assert summary.days == 6 + 4 + 1
    assert summary.from_date == "2024-03-01"
    assert summary.to_date == "2024-03-25"
    assert summary.remarks == "Half day; Earned leave"
    assert summary.periods == (early, middle, late)


def test_summarize_requires_a_period():
    with pytest.raises(ValidationError):
        summarize_periods([])


def test_serialized_periods_load_back():
    periods = (make_period(date(2024, 5, 1), date(2024, 5, 3), "Tour"),)

    text = serialize_periods(periods)

    assert '"fromDate": "2024-05-01"' in text
    assert load_periods(text) == periods
    assert load_periods(None) == ()


def _employee(employee_id: int, name: str) -> Employee:
    return Employee(
        employee_id=employee_id,
        department_id=1,
        epid=f"E-{employee_id}",
        name=name,
        designation="Clerk",
        employment_status=EmploymentStatus.PERMANENT,
    )


def test_report_sheet_treats_missing_entries_as_full_month():
    report = AttendanceReport(
        report_id=1, department_id=1, month=2, year=2024, status=ReportStatus.DRAFT, transaction_id="ABCD1234"
    )
    period = make_period(date(2024, 2, 1), date(2024, 2, 10))
    entry = AttendanceEntry(
        entry_id=5, report_id=1, employee_id=1, days=10, from_date="2024-02-01", to_date="2024-02-10", periods=(period,)
    )

    rows = build_report_sheet(report, [_employee(1, "A"), _employee(2, "B")], [entry])

    assert [(r.days, r.implicit) for r in rows] == [(10, False), (29, True)]
    assert rows[0].to_dict()["entryId"] == 5
    assert rows[1].to_dict()["periods"] == []
