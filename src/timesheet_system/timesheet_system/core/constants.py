"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

WEEKLY_NORMAL_THRESHOLD = Decimal("35")
HOURS_PER_ABSENCE_DAY = Decimal("7")
MAX_DAY_HOURS = Decimal("24")
HOURS_STEP = Decimal("0.01")

MIN_YEAR = 1900
MAX_YEAR = 2999

SELECTABLE_YEARS_BACK = 5
SELECTABLE_YEARS_AHEAD = 1

DEFAULT_LIST_LIMIT = 500
DEFAULT_SESSION_DAYS = 7
