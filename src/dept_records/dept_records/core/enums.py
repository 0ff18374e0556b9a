from __future__ import annotations

from enum import Enum


class EmploymentStatus(str, Enum):
    """Employment status of a department employee."""

    PERMANENT = "Permanent"
    PROBATION = "Probation"
    TEMPORARY = "Temporary"

    @property
    def requires_term_expiry(self) -> bool:
        return self is not EmploymentStatus.PERMANENT


class ReportStatus(str, Enum):
    """Lifecycle of a monthly attendance report (forward-only)."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    SENT = "sent"

    def next(self) -> "ReportStatus | None":
        order = list(ReportStatus)
        idx = order.index(self)
        return order[idx + 1] if idx + 1 < len(order) else None


class AdminType(str, Enum):
    """Admin portal account kinds."""

    SUPER = "super"
    SALARY = "salary"
