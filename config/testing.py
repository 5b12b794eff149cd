import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

ORG_UTC_OFFSET_MINUTES = 300
DEFAULT_GRACE_MINUTES = 30
WORKING_DAY_ENABLED = False
WORKING_DAY_START_TIME = "10:00"
BATCH_CONCURRENCY = 4

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
