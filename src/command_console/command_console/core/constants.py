"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SAFE_THRESHOLD = 75
DEFAULT_BORDERLINE_BAND = 10
DEFAULT_LAB_WEIGHT = 2

DEFAULT_TIGHT_DAYS = 2
DEFAULT_UPCOMING_LIMIT = 10

# Hackathon submission risk windows (days)
HACKATHON_CRITICAL_DAYS = 2
HACKATHON_AT_RISK_DAYS = 7

DEFAULT_HACKATHON_TASKS = (
    ("Form Team", "high", "Finalize team members and roles"),
    ("Brainstorm Ideas", "high", "Problem statement and solution"),
    ("Setup MVP", "medium", "Repo and boilerplate"),
)

EXPORT_VERSION = "1.0"
MIGRATION_MARKER = "MIGRATION_IMPORT"
