"""
Core module initialization.
Exports configuration, error and security utilities.
"""

from tiffin.core.config import get_settings, Settings, EnvironmentMode
from tiffin.core.exceptions import (
    TiffinError,
    InvalidInput,
    Conflict,
    InvalidCredentials,
    Unauthenticated,
    Forbidden,
    NotFound,
)

__all__ = [
    "get_settings",
    "Settings",
    "EnvironmentMode",
    "TiffinError",
    "InvalidInput",
    "Conflict",
    "InvalidCredentials",
    "Unauthenticated",
    "Forbidden",
    "NotFound",
]
