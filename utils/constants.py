"""
Application-wide constants.
Centralizes magic numbers and fallback configuration values.
"""

# Hardcoded availability fallbacks (used when neither the professional nor
# the tenant configures a value)
DEFAULT_SLOT_INTERVAL_MINUTES = 30
DEFAULT_MIN_ADVANCE_BOOKING_MINUTES = 60
DEFAULT_MAX_ADVANCE_BOOKING_MINUTES = 43200  # 30 days
DEFAULT_BUFFER_MINUTES = 0

# Duration assumed when a query names no services
DEFAULT_SERVICE_DURATION_MINUTES = 30

# Next-available search
NEXT_SLOTS_DEFAULT_LIMIT = 5
NEXT_SLOTS_MAX_DAYS = 60

# Time constants
MINUTES_IN_DAY = 24 * 60
