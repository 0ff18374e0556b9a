from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_iso_datetime


@dataclass(frozen=True)
class Department:
    """A department account; the HOD logs in with the department e-mail."""

    department_id: int
    name: str
    hod_title: str
    hod_name: str
    email: str
    password_hash: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        # password_hash never leaves the server
        return {
            "id": self.department_id,
            "name": self.name,
            "hodTitle": self.hod_title,
            "hodName": self.hod_name,
            "email": self.email,
            "createdAt": format_iso_datetime(self.created_at),
        }


@dataclass(frozen=True)
class AdminAccount:
    email: str
    password_hash: str
    admin_type: str
    name: str = ""
