"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SHIFT_START_MINUTES = 480  # 08:00
DEFAULT_HISTORY_LIMIT = 30
WEEKLY_TREND_DAYS = 7
DEMO_HISTORY_DAYS = 36
REPORT_EPOCH = "2000-01-01"
