"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_GRACE_MINUTES = 15
DEFAULT_HISTORY_DAYS = 30
DEFAULT_TEAM_DAYS = 7
DEFAULT_LIST_LIMIT = 200

SYSTEM_ACTOR = "System"
LATE_ARRIVAL_REASON = "Late arrival detected"
CORRECTION_APPROVED_REASON = "Correction approved"

STRUCTURE_CHANGE_MESSAGE = "Your organizational assignment has been updated."
