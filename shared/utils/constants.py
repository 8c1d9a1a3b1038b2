"""
Constants and enumerations for the marketplace tables.
"""

from enum import Enum


class TABLE_NAMES:
    """Azure Table Storage table names."""
    TRAINERS = "trainers"
    LISTINGS = "listings"
    SEARCH_ALERTS = "searchalerts"


class PartitionKeys(str, Enum):
    """Each entity type lives in a single partition of its own table."""
    TRAINER = "TRAINER"
    LISTING = "LISTING"
    SEARCH_ALERT = "SEARCH_ALERT"


DEFAULT_USER_NAME: str = "system"

ENTITY_ID_LENGTH: int = 12
