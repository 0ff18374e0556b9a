import os

from werkzeug.security import generate_password_hash

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "dept_records"),
    "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
}

# "mysql" or "memory" (non-persistent, single process)
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")

UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")
MAX_CONTENT_LENGTH = 10 * 1024 * 1024

# Demo admin logins; production reads hashes from the environment.
ADMIN_ACCOUNTS = [
    {
        "email": os.getenv("ADMIN_EMAIL", "admin@example.edu"),
        "password_hash": generate_password_hash(os.getenv("ADMIN_PASSWORD", "admin123")),
        "admin_type": "super",
        "name": "Super Administrator",
    },
    {
        "email": os.getenv("SALARY_ADMIN_EMAIL", "salary@example.edu"),
        "password_hash": generate_password_hash(os.getenv("SALARY_ADMIN_PASSWORD", "admin123")),
        "admin_type": "salary",
        "name": "Salary Officer",
    },
]

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FILE = os.getenv("LOG_FILE", "logs/dept_records.log")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
