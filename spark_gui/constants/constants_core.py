"""Core constants for the Spark registry and its per-user storage layout.

Defines the product namespace used on disk, the date format shared by
transcripts and history views, and the error message patterns raised by the
registry when a dependency is used before it is ready.
"""

from __future__ import annotations

from datetime import datetime

# ================================================================
# Per-user Storage Layout
# ================================================================

# Directory created beneath the user home for all Spark data
PRODUCT_NAMESPACE = "Spark"

# Sub-directory holding one folder per bare address (multi-user support)
USER_DIRECTORY_NAME = "user"

# Preferences persisted inside each user's storage root
PREFERENCES_FILENAME = "preferences.yaml"

# ================================================================
# Date Formatting
# ================================================================

# e.g. "Tue 03/14/2006 4:05:09 PM"
DATE_SECOND_FORMAT = "%a %m/%d/%Y %I:%M:%S %p"


def format_date_seconds(moment: datetime) -> str:
    """Format ``moment`` using :data:`DATE_SECOND_FORMAT` without hour padding.

    Examples:
        >>> format_date_seconds(datetime(2006, 3, 14, 16, 5, 9))
        'Tue 03/14/2006 4:05:09 PM'
    """

    text = moment.strftime(DATE_SECOND_FORMAT)
    day, date, clock, meridiem = text.split(" ")
    return f"{day} {date} {clock.lstrip('0') or '0'} {meridiem}"


# ================================================================
# Error Message Patterns
# ================================================================

SESSION_NOT_ESTABLISHED_ERROR = (
    "No session has been established; call SessionManager.initialize_session() "
    "before using {consumer}"
)
SERVICE_ALREADY_REGISTERED_ERROR = "Service '{key}' is already registered"
SERVICE_DEPENDENCY_UNKNOWN_ERROR = (
    "Service '{key}' depends on '{dependency}', which has not been registered yet"
)
SERVICE_NOT_REGISTERED_ERROR = "Service '{key}' has not been registered"


__all__ = [
    "PRODUCT_NAMESPACE",
    "USER_DIRECTORY_NAME",
    "PREFERENCES_FILENAME",
    "DATE_SECOND_FORMAT",
    "format_date_seconds",
    "SESSION_NOT_ESTABLISHED_ERROR",
    "SERVICE_ALREADY_REGISTERED_ERROR",
    "SERVICE_DEPENDENCY_UNKNOWN_ERROR",
    "SERVICE_NOT_REGISTERED_ERROR",
]
