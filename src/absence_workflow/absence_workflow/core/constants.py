"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_MAX_REASON_LENGTH = 1000
DEFAULT_MAX_NOTE_LENGTH = 500
DEFAULT_LIST_LIMIT = 200
MAX_LIST_LIMIT = 500

ABSENCE_ENTITY = "absence"
