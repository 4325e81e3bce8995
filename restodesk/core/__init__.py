"""
Core module initialization.
Exports configuration, logging and security utilities.
"""

from restodesk.core.config import get_settings, setup_logging, Settings, EnvironmentMode
from restodesk.core.security import hash_password, verify_password

__all__ = [
    "get_settings",
    "setup_logging",
    "Settings",
    "EnvironmentMode",
    "hash_password",
    "verify_password",
]
