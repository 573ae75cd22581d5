"""
Core module initialization.
Exports configuration, logging and error utilities.
"""

from ordering_api.core.config import get_settings, setup_logging, Settings, EnvironmentMode
from ordering_api.core.exceptions import (
    OrderingError,
    ValidationError,
    ConflictError,
    AuthError,
    NotFoundError,
    ServerError,
)

__all__ = [
    "get_settings",
    "setup_logging",
    "Settings",
    "EnvironmentMode",
    "OrderingError",
    "ValidationError",
    "ConflictError",
    "AuthError",
    "NotFoundError",
    "ServerError",
]
