"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

PRESENT_MIN_HOURS = 8.0
HALF_DAY_MIN_HOURS = 4.0
DURATION_DECIMALS = 2

ABSENT_ROW_PREFIX = "absent-"

DEFAULT_HISTORY_LIMIT = 30
HR_HISTORY_LIMIT = 100
DEFAULT_UTC_OFFSET_MINUTES = 330

FIELD_WORK = "Field Work"
OFFICE_WORK = "Office Work"
