import os

SECRET_KEY = "test-secret"

JWT_SECRET = "test-jwt-secret"
JWT_EXPIRES_HOURS = 24

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "chs_acquittals_test"),
    "pool_size": 2,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

MAX_UPLOAD_BYTES = 1024 * 1024
UPLOAD_EXTENSIONS = (".xlsx", ".csv")

BACKUP_DIR = os.getenv("BACKUP_DIR", "backups")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
