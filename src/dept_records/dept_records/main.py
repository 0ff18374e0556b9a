from __future__ import annotations

import importlib
import logging
import os
from datetime import timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .admin.controller import register as register_admin
from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_DEPARTMENT_CATALOGUE, DEFAULT_SESSION_DAYS
from .core.enums import EmploymentStatus
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_departments, list_tables
from .departments.controller import register as register_departments
from .departments.service import admin_accounts_from_settings
from .documents.controller import register as register_documents
from .employees.controller import register as register_employees
from .uploads.controller import register as register_uploads

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[3]
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    root = logging.getLogger()
    root.setLevel(level)

    if log_file and not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=5)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)


def _seed_memory(container: Container) -> None:
    """Demo data for the in-memory backend (mirrors database/seed.sql)."""

    cs = container.auth_service.register(
        name="Department of Computer Science",
        hod_title="Chairperson",
        hod_name="Dr. A. Rahman",
        email="cs@example.edu",
        password="department123",
    ).department
    container.auth_service.register(
        name="Department of Mathematics",
        hod_title="Chairperson",
        hod_name="Dr. S. Verma",
        email="maths@example.edu",
        password="department123",
    )
    container.employee_service.create(
        cs.department_id,
        {
            "epid": "CS-001",
            "name": "Imran Khan",
            "designation": "Lab Assistant",
            "employmentStatus": EmploymentStatus.PERMANENT.value,
            "joiningDate": "2019-07-01",
            "salaryRegisterNo": "SR-12",
            "salaryAsstt": "R. Gupta",
        },
    )
    container.employee_service.create(
        cs.department_id,
        {
            "epid": "CS-002",
            "name": "Sana Ali",
            "designation": "Office Clerk",
            "employmentStatus": EmploymentStatus.TEMPORARY.value,
            "termExpiry": "2026-12-31",
            "joiningDate": "2025-01-02",
            "salaryRegisterNo": "SR-14",
            "salaryAsstt": "M. Qureshi",
        },
    )


def create_app(settings_module: Optional[str] = None, **overrides) -> Flask:
    load_dotenv(override=False)
    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    def setting(key: str, default=None):
        if key in overrides:
            return overrides[key]
        return getattr(settings, key, default)

    configure_logging(str(setting("LOG_LEVEL", "INFO")).upper(), setting("LOG_FILE"))

    app = Flask(__name__)
    app.secret_key = setting("SECRET_KEY")
    app.config["DEBUG"] = bool(setting("DEBUG", False))
    app.config["TESTING"] = bool(setting("TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = setting("MAX_CONTENT_LENGTH")
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(days=int(setting("SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    storage_backend = str(setting("STORAGE_BACKEND", "mysql")).lower()
    db_config = setting("DB_CONFIG")
    upload_folder = setting("UPLOAD_FOLDER") or str(PROJECT_ROOT / "uploads")
    if not os.path.isabs(upload_folder):
        upload_folder = str(PROJECT_ROOT / upload_folder)

    logger.info("Starting dept-records (settings=%s, storage=%s)", settings_module, storage_backend)

    auto_init_db = bool(setting("AUTO_INIT_DB", False))
    auto_seed_db = bool(setting("AUTO_SEED_DB", False))
    if storage_backend == "mysql" and auto_init_db:
        apply_schema(db_config, schema_path=PROJECT_ROOT / "database" / "schema.sql")
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if storage_backend == "mysql" and auto_seed_db:
        apply_seed_sql(db_config, seed_path=PROJECT_ROOT / "database" / "seed.sql")
        ensure_demo_departments(db_config)

    container = build_container(
        storage_backend=storage_backend,
        upload_folder=upload_folder,
        admin_accounts=admin_accounts_from_settings(setting("ADMIN_ACCOUNTS", ())),
        db_config=db_config,
        department_catalogue=setting("DEPARTMENT_CATALOGUE") or DEFAULT_DEPARTMENT_CATALOGUE,
    )
    if storage_backend == "memory" and auto_seed_db:
        _seed_memory(container)
        logger.info("In-memory demo data loaded")

    app.extensions["dept_records"] = container

    register_error_handlers(app)
    register_departments(app, container)
    register_employees(app, container)
    register_attendance(app, container)
    register_admin(app, container)
    register_documents(app, container)
    register_uploads(app, container)

    return app
