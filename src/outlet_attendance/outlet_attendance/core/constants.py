"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000
FALLBACK_CHECKIN_RADIUS_METERS = 100

DEFAULT_RETRY_COUNT = 3
DEFAULT_RETRY_INTERVAL_SECONDS = 0.5
DEFAULT_RETRY_BACKOFF = 2.0

DEFAULT_OTP_LENGTH = 6
DEFAULT_IDENTITY_TIMEOUT_SECONDS = 5

GIFT_PROGRESS = "gift-progress"
SURVEY_PROGRESS = "survey-progress"

DEVICE_COOKIE_NAME = "device_id"
DEVICE_COOKIE_MAX_AGE = 60 * 60 * 24 * 365

# Lucky-wheel spins granted per survey branch
SPIN_COUNTS = {
    "quick": 1,
    "full": 2,
    "no-games": 0,
}
