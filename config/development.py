import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_engine"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Reference timezone for "today", "yesterday" and month boundaries.
TIMEZONE = os.getenv("TIMEZONE", "Asia/Kolkata")

# Shared secret the external scheduler sends as X-Job-Token.
JOB_TOKEN = os.getenv("JOB_TOKEN", "dev-job-token")

CLOSER_MAX_WORKERS = int(os.getenv("CLOSER_MAX_WORKERS", "2"))
CLOSER_RETRY_BACKOFF_SECONDS = float(os.getenv("CLOSER_RETRY_BACKOFF_SECONDS", "1"))
# Empty means every session opened before today is swept.
STALE_LOOKBACK_DAYS = int(os.getenv("STALE_LOOKBACK_DAYS")) if os.getenv("STALE_LOOKBACK_DAYS") else None

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
