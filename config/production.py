import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "dept_records"),
    "pool_size": int(os.getenv("DB_POOL_SIZE", "10")),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
}

STORAGE_BACKEND = "mysql"

UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")
MAX_CONTENT_LENGTH = 10 * 1024 * 1024

# Hashes are produced with werkzeug.security.generate_password_hash.
ADMIN_ACCOUNTS = [
    account
    for account in (
        {
            "email": os.getenv("ADMIN_EMAIL", ""),
            "password_hash": os.getenv("ADMIN_PASSWORD_HASH", ""),
            "admin_type": "super",
            "name": "Super Administrator",
        },
        {
            "email": os.getenv("SALARY_ADMIN_EMAIL", ""),
            "password_hash": os.getenv("SALARY_ADMIN_PASSWORD_HASH", ""),
            "admin_type": "salary",
            "name": "Salary Officer",
        },
    )
    if account["email"] and account["password_hash"]
]

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "logs/dept_records.log")

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
