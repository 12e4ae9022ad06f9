"""
Configuration module: Settings, logging, constants.
"""

from shared.config.settings import settings, get_settings, Settings, MONGO_URL, MONGO_DATABASE
from shared.config.logging import get_logger, setup_logging
from shared.config.constants import RecordFields, WELL_KNOWN_FIELDS, DEFAULT_SORT

__all__ = [
    # settings
    "settings",
    "get_settings",
    "Settings",
    "MONGO_URL",
    "MONGO_DATABASE",
    # logging
    "get_logger",
    "setup_logging",
    # constants
    "RecordFields",
    "WELL_KNOWN_FIELDS",
    "DEFAULT_SORT",
]
