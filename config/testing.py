import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "outlet_attendance_test"),
}

IDENTITY_BASE_URL = os.getenv("IDENTITY_BASE_URL", "http://identity.test")
IDENTITY_TIMEOUT_SECONDS = 1.0

# No real sleeping between retries in tests
GUARD_RETRY_COUNT = 2
GUARD_RETRY_INTERVAL_SECONDS = 0.0
GUARD_RETRY_BACKOFF = 1.0

DEFAULT_CHECKIN_RADIUS_METERS = 100
RESET_PROGRESS_ON_UNLOAD = True

SURVEY_FLOW_VARIANT = "otp"
OTP_LENGTH = 6

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
