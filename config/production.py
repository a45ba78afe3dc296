import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "outlet_attendance_db"),
}

IDENTITY_BASE_URL = os.getenv("IDENTITY_BASE_URL", "")
IDENTITY_TIMEOUT_SECONDS = float(os.getenv("IDENTITY_TIMEOUT_SECONDS", "5"))

GUARD_RETRY_COUNT = int(os.getenv("GUARD_RETRY_COUNT", "3"))
GUARD_RETRY_INTERVAL_SECONDS = float(os.getenv("GUARD_RETRY_INTERVAL_SECONDS", "0.5"))
GUARD_RETRY_BACKOFF = float(os.getenv("GUARD_RETRY_BACKOFF", "2"))

DEFAULT_CHECKIN_RADIUS_METERS = int(os.getenv("DEFAULT_CHECKIN_RADIUS_METERS", "100"))
RESET_PROGRESS_ON_UNLOAD = bool(int(os.getenv("RESET_PROGRESS_ON_UNLOAD", "1")))

SURVEY_FLOW_VARIANT = os.getenv("SURVEY_FLOW_VARIANT", "otp")
OTP_LENGTH = int(os.getenv("OTP_LENGTH", "6"))

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
