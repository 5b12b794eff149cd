"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_UTC_OFFSET_MINUTES = 5 * 60
DEFAULT_GRACE_MINUTES = 30
DEFAULT_WORKING_DAY_START = "10:00"
DEFAULT_BATCH_CONCURRENCY = 10
DEFAULT_PAYROLL_CONCURRENCY = 8

MAX_ASSIGNED_PATTERNS = 3

# Matching buffers around a shift window
MATCH_BUFFER_BEFORE_MINUTES = 120
MATCH_BUFFER_AFTER_MINUTES = 600

# Classification thresholds
OVERTIME_BUFFER_MINUTES = 120
BREAK_GRACE_MINUTES = 180
RECENT_PUNCH_MINUTES = 60
OUT_PUNCH_AFTER_END_MINUTES = 120
SCHEDULE_TOLERANCE_MINUTES = 120
MAX_SHIFT_DURATION_HOURS = 12

# Punch lookup range relative to the requested dates
PUNCH_LOOKBACK_DAYS = 1
PUNCH_LOOKAHEAD_DAYS = 2
