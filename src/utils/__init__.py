"""Utilities package for the Anagrafiche import application."""

from .config import get_config, get_database_url, reset_config
from .datetime_utils import parse_calendar_date, utc_now

__all__ = [
    "get_config",
    "get_database_url",
    "reset_config",
    "parse_calendar_date",
    "utc_now",
]
