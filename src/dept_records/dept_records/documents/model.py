from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_iso_date, format_iso_datetime


@dataclass(frozen=True)
class Document:
    """An archived official letter/order scanned into the department gallery."""

    document_id: int
    department_id: int
    document_type: str
    issuing_authority: str
    subject: str
    ref_no: str
    date: date
    image_url: str
    uploaded_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.document_id,
            "departmentId": self.department_id,
            "documentType": self.document_type,
            "issuingAuthority": self.issuing_authority,
            "subject": self.subject,
            "refNo": self.ref_no,
            "date": format_iso_date(self.date),
            "imageUrl": self.image_url,
            "uploadedAt": format_iso_datetime(self.uploaded_at),
        }
