import os
import tempfile

from werkzeug.security import generate_password_hash

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "dept_records_test"),
}

STORAGE_BACKEND = "memory"

UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), "dept_records_test_uploads")
MAX_CONTENT_LENGTH = 10 * 1024 * 1024

ADMIN_ACCOUNTS = [
    {
        "email": "admin@example.edu",
        "password_hash": generate_password_hash("admin123"),
        "admin_type": "super",
        "name": "Super Administrator",
    },
    {
        "email": "salary@example.edu",
        "password_hash": generate_password_hash("admin123"),
        "admin_type": "salary",
        "name": "Salary Officer",
    },
]

SESSION_DAYS = 1

LOG_LEVEL = "WARNING"
LOG_FILE = None

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
