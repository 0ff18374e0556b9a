from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..attendance.repository import AttendanceRepository
from ..common.validators import optional_text, require_email, require_int, require_min_length, require_non_empty
from ..core.constants import DEFAULT_DEPARTMENT_CATALOGUE, DEFAULT_HOD_TITLE
from ..core.enums import AdminType
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..documents.repository import DocumentRepository
from ..employees.repository import EmployeeRepository
from ..uploads.storage import UploadStore
from .model import AdminAccount, Department
from .repository import DepartmentRepository

logger = logging.getLogger(__name__)


def _password_matches(password_hash: str, password: str) -> bool:
    if not password_hash:
        return False
    try:
        return check_password_hash(password_hash, password or "")
    except ValueError:
        # placeholder or corrupted hashes, e.g. an unseeded demo row
        return False


@dataclass(frozen=True)
class AdminSession:
    """What we store into Flask session after an admin login."""

    email: str
    admin_type: AdminType
    name: str

    def to_dict(self) -> dict:
        return {"role": "admin", "adminType": self.admin_type.value, "email": self.email, "name": self.name}


@dataclass(frozen=True)
class RegisterResult:
    department: Department
    created: bool


class DepartmentAuthService:
    """Use cases: register a department, department login, admin login."""

    def __init__(self, departments: DepartmentRepository, admin_accounts: Iterable[AdminAccount] = ()):
        self._departments = departments
        self._admins = {a.email.lower(): a for a in admin_accounts}

    def register(self, *, name: str, hod_title: Optional[str], hod_name: str, email: str, password: str) -> RegisterResult:
        name = require_non_empty(name, "Department name")
        hod_name = require_non_empty(hod_name, "HOD name")
        hod_title = optional_text(hod_title) or DEFAULT_HOD_TITLE
        email = require_email(email)
        require_min_length(password, "Password", 6)

        if self._departments.get_by_email(email):
            raise ValidationError("Email already registered")

        password_hash = generate_password_hash(password)
        existing = self._departments.get_by_name(name)
        if existing:
            # a pre-loaded department is claimed by its HOD: credentials are replaced
            department = self._departments.update(
                existing.department_id,
                hod_title=hod_title,
                hod_name=hod_name,
                email=email,
                password_hash=password_hash,
            )
            logger.info("Department %s re-registered by %s", department.department_id, email)
            return RegisterResult(department=department, created=False)

        department = self._departments.create(
            name=name,
            hod_title=hod_title,
            hod_name=hod_name,
            email=email,
            password_hash=password_hash,
        )
        logger.info("Department %s registered (%s)", department.department_id, department.name)
        return RegisterResult(department=department, created=True)

    def login(self, email: str, password: str) -> Department:
        department = self._departments.get_by_email((email or "").strip())
        if not department or not _password_matches(department.password_hash, password):
            logger.info("Failed department login for %s", email)
            raise AuthenticationError("Invalid credentials")
        return department

    def admin_login(self, email: str, password: str) -> AdminSession:
        account = self._admins.get((email or "").strip().lower())
        if not account or not _password_matches(account.password_hash, password):
            logger.info("Failed admin login for %s", email)
            raise AuthenticationError("Invalid admin credentials")
        return AdminSession(email=account.email, admin_type=AdminType(account.admin_type), name=account.name)


class DepartmentService:
    """Use cases: read departments and manage portal users (admin).

    Admin accounts come from configuration and are listed first with ids
    1..N; a department user's id is N + department id, so it stays stable
    while departments come and go.
    """

    def __init__(
        self,
        departments: DepartmentRepository,
        admin_accounts: Iterable[AdminAccount] = (),
        *,
        catalogue: Iterable[str] = DEFAULT_DEPARTMENT_CATALOGUE,
        employees: Optional[EmployeeRepository] = None,
        reports: Optional[AttendanceRepository] = None,
        documents: Optional[DocumentRepository] = None,
        uploads: Optional[UploadStore] = None,
    ):
        self._departments = departments
        self._admins = list(admin_accounts)
        self._catalogue = [name.strip() for name in catalogue if name and name.strip()]
        self._employees = employees
        self._reports = reports
        self._documents = documents
        self._uploads = uploads

    def get(self, department_id: int) -> Department:
        department = self._departments.get_by_id(department_id)
        if not department:
            raise NotFoundError("Department not found")
        return department

    def list_departments(self) -> Sequence[Department]:
        return self._departments.list_all()

    def directory(self) -> list[dict]:
        """Catalogue merged with registered departments, flagged with `isRegistered`."""

        registered = {d.name.lower(): d for d in self._departments.list_all()}
        listing = []
        for idx, name in enumerate(self._catalogue, start=1):
            department = registered.pop(name.lower(), None)
            if department:
                listing.append(dict(department.to_dict(), isRegistered=True))
            else:
                listing.append(
                    {
                        "id": -idx,
                        "name": name,
                        "hodTitle": DEFAULT_HOD_TITLE,
                        "hodName": "",
                        "email": "",
                        "createdAt": None,
                        "isRegistered": False,
                    }
                )
        listing.extend(dict(d.to_dict(), isRegistered=True) for d in registered.values())
        return sorted(listing, key=lambda d: d["name"].lower())

    # ---- portal users --------------------------------------------------

    def _user(self, department: Department) -> dict:
        return {
            "id": len(self._admins) + department.department_id,
            "name": department.hod_name,
            "email": department.email,
            "role": "department",
            "departmentId": department.department_id,
            "departmentName": department.name,
        }

    def list_users(self) -> list[dict]:
        users = [
            {
                "id": idx,
                "name": a.name or a.email,
                "email": a.email,
                "role": "superadmin" if a.admin_type == AdminType.SUPER.value else a.admin_type,
                "departmentId": None,
                "departmentName": None,
            }
            for idx, a in enumerate(self._admins, start=1)
        ]
        users.extend(self._user(d) for d in self._departments.list_all() if d.email and d.email.strip())
        return users

    def _department_for_user(self, user_id: int, action: str) -> Department:
        user_id = require_int(user_id, "User", min_value=1)
        if user_id <= len(self._admins):
            raise AuthorizationError(f"Cannot {action} system users")
        department = self._departments.get_by_id(user_id - len(self._admins))
        if not department:
            raise NotFoundError("User not found")
        return department

    def _check_email_free(self, email: str, *, department_id: Optional[int] = None) -> None:
        if any(a.email.lower() == email.lower() for a in self._admins):
            raise ValidationError("Email already in use")
        holder = self._departments.get_by_email(email)
        if holder and holder.department_id != department_id:
            raise ValidationError("Email already in use")

    def create_user(self, data: Mapping) -> dict:
        """Give a department its HOD login.

        `departmentId` is either a registered department (its credentials are
        replaced) or a negative catalogue id (the department is registered).
        """

        name = require_non_empty(data.get("name"), "Name")
        email = require_email(data.get("email"))
        password = require_min_length(data.get("password"), "Password", 6)
        role = require_non_empty(data.get("role"), "Role")
        if role != "department":
            raise ValidationError("Admin accounts are managed in configuration")
        if data.get("departmentId") in (None, ""):
            raise ValidationError("Department ID is required for department users")
        department_id = require_int(data.get("departmentId"), "Department ID")

        if department_id > 0:
            department = self.get(department_id)
            self._check_email_free(email, department_id=department.department_id)
            department = self._departments.update(
                department.department_id,
                hod_name=name,
                email=email,
                password_hash=generate_password_hash(password),
            )
            logger.info("Admin set HOD login %s for department %s", email, department.department_id)
            return self._user(department)

        if not 1 <= -department_id <= len(self._catalogue):
            raise NotFoundError("Department not found")
        catalogue_name = self._catalogue[-department_id - 1]
        self._check_email_free(email)
        if self._departments.get_by_name(catalogue_name):
            raise ValidationError("Department is already registered")
        department = self._departments.create(
            name=catalogue_name,
            hod_title=DEFAULT_HOD_TITLE,
            hod_name=name,
            email=email,
            password_hash=generate_password_hash(password),
        )
        logger.info("Admin registered department %s (%s)", department.department_id, department.name)
        return self._user(department)

    def update_user(self, user_id: int, data: Mapping) -> dict:
        department = self._department_for_user(user_id, "modify")
        if "role" in data and data.get("role") != "department":
            raise ValidationError("Admin accounts are managed in configuration")
        if data.get("departmentId") not in (None, "") and require_int(
            data.get("departmentId"), "Department ID"
        ) != department.department_id:
            raise ValidationError("A user cannot be moved to another department")

        changes: dict = {}
        if "name" in data:
            changes["hod_name"] = require_non_empty(data.get("name"), "Name")
        if "email" in data:
            email = require_email(data.get("email"))
            self._check_email_free(email, department_id=department.department_id)
            changes["email"] = email
        # blank password keeps the current one
        if optional_text(data.get("password")):
            changes["password_hash"] = generate_password_hash(require_min_length(data.get("password"), "Password", 6))

        if changes:
            department = self._departments.update(department.department_id, **changes)
            logger.info("Admin updated user of department %s (%s)", department.department_id, ", ".join(sorted(changes)))
        return self._user(department)

    def delete_user(self, user_id: int) -> Department:
        """Remove a department user together with its department and records."""

        department = self._department_for_user(user_id, "delete")
        stale = self._stored_files(department.department_id)
        if not self._departments.delete(department.department_id):
            raise NotFoundError("User not found")
        if self._uploads:
            for url in stale:
                self._uploads.delete(url)
        logger.info("Department %s (%s) deleted with %d stored files", department.department_id, department.name, len(stale))
        return department

    def _stored_files(self, department_id: int) -> list[str]:
        urls: list[str] = []
        if self._employees:
            for employee in self._employees.list_by_department(department_id):
                urls.extend(employee.document_urls)
        if self._reports:
            urls.extend(r.file_url for r in self._reports.list_reports_by_department(department_id) if r.file_url)
        if self._documents:
            urls.extend(d.image_url for d in self._documents.list_by_department(department_id) if d.image_url)
        return urls


def admin_accounts_from_settings(raw: Iterable[dict]) -> list[AdminAccount]:
    """Build admin accounts from the ADMIN_ACCOUNTS setting."""

    accounts = []
    for item in raw or ():
        admin_type = AdminType(str(item.get("admin_type", AdminType.SUPER.value)))
        accounts.append(
            AdminAccount(
                email=str(item["email"]).lower(),
                password_hash=str(item["password_hash"]),
                admin_type=admin_type.value,
                name=str(item.get("name", "")),
            )
        )
    return accounts
