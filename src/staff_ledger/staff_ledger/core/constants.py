"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_SITE_TIMEZONE = "Africa/Lagos"

LATE_THRESHOLD = time(9, 15, 0)
FULL_DAY_HOURS = 4
MIN_SHIFT_INTERVAL_HOURS = 8
MIN_SHIFT_DURATION_MINUTES = 30

CORRECTION_WINDOW_DAYS = 7
DASHBOARD_CHART_DAYS = 30
DASHBOARD_UPCOMING_SHIFTS = 5
DASHBOARD_RECENT_ACTIVITIES = 3

DEFAULT_LOCATION = "Main Bakery"
UNRECORDED_LOCATION = "Not recorded"
