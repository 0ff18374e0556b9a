from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .admin.service import AdminReportService
from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_DEPARTMENT_CATALOGUE
from .database.connection import DatabaseConnection
from .database.memory_store import InMemoryStore
from .departments.memory_department_repository import InMemoryDepartmentRepository
from .departments.model import AdminAccount
from .departments.mysql_department_repository import MySQLDepartmentRepository
from .departments.repository import DepartmentRepository
from .departments.service import DepartmentAuthService, DepartmentService
from .documents.memory_document_repository import InMemoryDocumentRepository
from .documents.mysql_document_repository import MySQLDocumentRepository
from .documents.repository import DocumentRepository
from .documents.service import DocumentService
from .employees.memory_employee_repository import InMemoryEmployeeRepository
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .uploads.storage import UploadStore

STORAGE_BACKENDS = ("mysql", "memory")


@dataclass(frozen=True)
class Container:
    storage_backend: str
    conn: Optional[DatabaseConnection]
    store: Optional[InMemoryStore]
    uploads: UploadStore

    departments_repo: DepartmentRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    documents_repo: DocumentRepository

    auth_service: DepartmentAuthService
    department_service: DepartmentService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    admin_report_service: AdminReportService
    document_service: DocumentService


def build_container(
    *,
    storage_backend: str,
    upload_folder: str,
    admin_accounts: Iterable[AdminAccount] = (),
    db_config: Optional[dict] = None,
    department_catalogue: Iterable[str] = DEFAULT_DEPARTMENT_CATALOGUE,
) -> Container:
    storage_backend = (storage_backend or "mysql").lower()
    if storage_backend not in STORAGE_BACKENDS:
        raise ValueError(f"Unknown STORAGE_BACKEND {storage_backend!r}; expected one of {STORAGE_BACKENDS}")

    conn = store = None
    if storage_backend == "mysql":
        if not db_config:
            raise ValueError("DB_CONFIG is required for the mysql storage backend")
        conn = DatabaseConnection.from_settings(db_config)
        departments_repo = MySQLDepartmentRepository(conn)
        employees_repo = MySQLEmployeeRepository(conn)
        attendance_repo = MySQLAttendanceRepository(conn)
        documents_repo = MySQLDocumentRepository(conn)
    else:
        store = InMemoryStore()
        departments_repo = InMemoryDepartmentRepository(store)
        employees_repo = InMemoryEmployeeRepository(store)
        attendance_repo = InMemoryAttendanceRepository(store)
        documents_repo = InMemoryDocumentRepository(store)

    uploads = UploadStore(upload_folder)
    admin_accounts = list(admin_accounts)

    return Container(
        storage_backend=storage_backend,
        conn=conn,
        store=store,
        uploads=uploads,
        departments_repo=departments_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        documents_repo=documents_repo,
        auth_service=DepartmentAuthService(departments_repo, admin_accounts),
        department_service=DepartmentService(
            departments_repo,
            admin_accounts,
            catalogue=department_catalogue,
            employees=employees_repo,
            reports=attendance_repo,
            documents=documents_repo,
            uploads=uploads,
        ),
        employee_service=EmployeeService(employees_repo, departments_repo, uploads),
        attendance_service=AttendanceService(attendance_repo, employees_repo, departments_repo, uploads),
        admin_report_service=AdminReportService(attendance_repo, employees_repo, departments_repo),
        document_service=DocumentService(documents_repo, departments_repo, uploads),
    )
