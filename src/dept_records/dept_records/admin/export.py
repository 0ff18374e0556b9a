from __future__ import annotations

import io
import re
from typing import Iterable, Optional

import pandas as pd
from openpyxl.utils import get_column_letter

from .filters import AdminRow

SHEET_NAME = "Attendance Report"

# header -> column width (characters)
COLUMNS = (
    ("Month", 15),
    ("Department", 25),
    ("Employee ID", 15),
    ("Employee Name", 20),
    ("Designation", 20),
    ("Salary Assistant", 20),
    ("Salary Register No", 15),
    ("Period", 25),
    ("Days", 8),
    ("Remarks", 25),
)


def _as_record(row: AdminRow) -> list:
    return [
        row.month_label,
        row.department_name,
        row.epid,
        row.employee_name,
        row.designation,
        row.salary_assistant,
        row.salary_register_no,
        row.period,
        row.days,
        row.remarks,
    ]


def rows_to_excel(rows: Iterable[AdminRow]) -> io.BytesIO:
    """Write rows to an in-memory .xlsx workbook."""

    df = pd.DataFrame([_as_record(r) for r in rows], columns=[name for name, _ in COLUMNS])

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=SHEET_NAME)
        sheet = writer.sheets[SHEET_NAME]
        for idx, (_, width) in enumerate(COLUMNS, start=1):
            sheet.column_dimensions[get_column_letter(idx)].width = width

    output.seek(0)
    return output


def export_filename(department_name: Optional[str] = None, month: Optional[str] = None) -> str:
    name = "Attendance_Report"
    for part in (department_name, month):
        if part:
            name += "_" + re.sub(r"\s+", "_", part.strip())
    return name + ".xlsx"
