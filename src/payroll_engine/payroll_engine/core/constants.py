"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_STANDARD_DAILY_HOURS = Decimal("8")
DEFAULT_TIMEZONE = "Asia/Kolkata"

EARTH_RADIUS_METERS = 6_371_000.0

AUTO_CHECKOUT_WORK_REPORT = "Employee did not perform checkout."
REVIEW_REASON_CLOCK_SKEW = "clock_skew"

DEFAULT_CLOSER_MAX_WORKERS = 4
DEFAULT_RETRY_BACKOFF_SECONDS = 2.0

MONEY_PLACES = Decimal("0.01")
HOURS_PLACES = Decimal("0.01")
EVENT_HOURS_PLACES = Decimal("0.0001")
