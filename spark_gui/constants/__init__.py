"""Centralized constants package for the Spark client.

Constants Organization:
======================

1. constants_core.py
   - Per-user storage layout (product namespace, user directory name)
   - Date formatting shared by transcripts and history
   - Registry error message patterns
   - Functions: format_date_seconds()

Import Examples:
================

from spark_gui.constants import PRODUCT_NAMESPACE, format_date_seconds
"""

from spark_gui.constants.constants_core import (
    DATE_SECOND_FORMAT,
    PREFERENCES_FILENAME,
    PRODUCT_NAMESPACE,
    SERVICE_ALREADY_REGISTERED_ERROR,
    SERVICE_DEPENDENCY_UNKNOWN_ERROR,
    SERVICE_NOT_REGISTERED_ERROR,
    SESSION_NOT_ESTABLISHED_ERROR,
    USER_DIRECTORY_NAME,
    format_date_seconds,
)

__all__ = [
    "DATE_SECOND_FORMAT",
    "PREFERENCES_FILENAME",
    "PRODUCT_NAMESPACE",
    "SERVICE_ALREADY_REGISTERED_ERROR",
    "SERVICE_DEPENDENCY_UNKNOWN_ERROR",
    "SERVICE_NOT_REGISTERED_ERROR",
    "SESSION_NOT_ESTABLISHED_ERROR",
    "USER_DIRECTORY_NAME",
    "format_date_seconds",
]
