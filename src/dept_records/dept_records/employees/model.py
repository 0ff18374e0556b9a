from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import format_iso_date
from ..core.enums import EmploymentStatus

# Writable columns, in table order.
EMPLOYEE_FIELDS = (
    "department_id",
    "epid",
    "name",
    "designation",
    "employment_status",
    "term_expiry",
    "joining_date",
    "joining_shift",
    "salary_register_no",
    "salary_assistant",
    "office_memo_no",
    "pan_number",
    "bank_account",
    "aadhar_card",
    "pan_card_url",
    "bank_proof_url",
    "aadhar_card_url",
    "office_memo_url",
    "joining_report_url",
    "term_extension_url",
)


@dataclass(frozen=True)
class Employee:
    """Domain entity: a person on a department's salary register."""

    employee_id: int
    department_id: int
    epid: str
    name: str
    designation: str
    employment_status: EmploymentStatus
    term_expiry: Optional[date] = None
    joining_date: Optional[date] = None
    joining_shift: str = "morning"
    salary_register_no: str = ""
    salary_assistant: str = ""
    office_memo_no: str = ""
    pan_number: str = ""
    bank_account: str = ""
    aadhar_card: str = ""
    pan_card_url: Optional[str] = None
    bank_proof_url: Optional[str] = None
    aadhar_card_url: Optional[str] = None
    office_memo_url: Optional[str] = None
    joining_report_url: Optional[str] = None
    term_extension_url: Optional[str] = None

    @property
    def document_urls(self) -> list[str]:
        urls = (
            self.pan_card_url,
            self.bank_proof_url,
            self.aadhar_card_url,
            self.office_memo_url,
            self.joining_report_url,
            self.term_extension_url,
        )
        return [u for u in urls if u]

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "departmentId": self.department_id,
            "epid": self.epid,
            "name": self.name,
            "designation": self.designation,
            "employmentStatus": self.employment_status.value,
            "termExpiry": format_iso_date(self.term_expiry),
            "joiningDate": format_iso_date(self.joining_date),
            "joiningShift": self.joining_shift,
            "salaryRegisterNo": self.salary_register_no,
            "salaryAsstt": self.salary_assistant,
            "officeMemoNo": self.office_memo_no,
            "panNumber": self.pan_number,
            "bankAccount": self.bank_account,
            "aadharCard": self.aadhar_card,
            "panCardUrl": self.pan_card_url,
            "bankProofUrl": self.bank_proof_url,
            "aadharCardUrl": self.aadhar_card_url,
            "officeMemoUrl": self.office_memo_url,
            "joiningReportUrl": self.joining_report_url,
            "termExtensionUrl": self.term_extension_url,
        }
