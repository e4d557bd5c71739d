"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

ABSENT_MARKER = "—"
DEFAULT_LEAVE_REASON = "Leave"

WEEK_SIZE = 7
HOURS_PER_DAY = 24

DEFAULT_API_TIMEOUT = 15.0
PIN_LENGTH = 4

# Local key-value store keys (kept compatible with the mobile client).
THEME_KEY = "themeMode"
NOTES_KEY = "calendar_notes"
REGISTERED_USERS_KEY = "registered_users"
