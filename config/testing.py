import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_engine_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

TIMEZONE = "Asia/Kolkata"

JOB_TOKEN = "test-job-token"

CLOSER_MAX_WORKERS = 1
CLOSER_RETRY_BACKOFF_SECONDS = 0.0
STALE_LOOKBACK_DAYS = None

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
