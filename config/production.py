import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_engine"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TIMEZONE = os.getenv("TIMEZONE", "Asia/Kolkata")

JOB_TOKEN = os.getenv("JOB_TOKEN", "")

CLOSER_MAX_WORKERS = int(os.getenv("CLOSER_MAX_WORKERS", "4"))
CLOSER_RETRY_BACKOFF_SECONDS = float(os.getenv("CLOSER_RETRY_BACKOFF_SECONDS", "5"))
STALE_LOOKBACK_DAYS = int(os.getenv("STALE_LOOKBACK_DAYS")) if os.getenv("STALE_LOOKBACK_DAYS") else None

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
