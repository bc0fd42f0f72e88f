import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "command_console"),
}
POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))

ATTENDANCE_POLICY = {
    "safe_threshold": int(os.getenv("ATTENDANCE_SAFE_THRESHOLD", "75")),
    "borderline_band": int(os.getenv("ATTENDANCE_BORDERLINE_BAND", "10")),
    "lab_weight": int(os.getenv("ATTENDANCE_LAB_WEIGHT", "2")),
    "excused_counts_as_absence": bool(int(os.getenv("ATTENDANCE_EXCUSED_COUNTS", "1"))),
}

CALENDAR_POLICY = {
    "tight_days": int(os.getenv("CALENDAR_TIGHT_DAYS", "2")),
    "upcoming_limit": int(os.getenv("CALENDAR_UPCOMING_LIMIT", "10")),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed reference data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
