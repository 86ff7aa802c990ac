"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

CHURN_WINDOW = 5
CHURN_THRESHOLD = 3
PAYMENT_CYCLE_DAYS = 30
DEFAULT_REMINDER_DAYS = 7
LOW_OCCUPANCY_RATIO = 0.5
UNKNOWN_LABEL = "Unknown"
