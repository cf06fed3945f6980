"""
Constants for the Anagrafiche import application.

This module defines system-wide constants including:
- Application metadata
- Import defaults (error list cap, numeric comparison precision)
- Spreadsheet conventions (date serial epoch, boolean literals)
"""

from datetime import date
from typing import FrozenSet

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "Anagrafiche Import"
APP_VERSION = "0.1.0"
DATABASE_VERSION = "1.0"
DATABASE_FILENAME = "anagrafiche.db"

# ============================================================================
# Import Defaults
# ============================================================================

# Error strings returned by a commit run before truncation
DEFAULT_MAX_REPORTED_ERRORS = 50

# Fields never compared when classifying a row against stored state
TIMESTAMP_FIELDS: FrozenSet[str] = frozenset({"created_at", "updated_at"})

# Decimal places kept when comparing numbers
NUMERIC_COMPARISON_PRECISION = 10

# ============================================================================
# Spreadsheet Conventions
# ============================================================================

# Day zero of spreadsheet date serials (serial 1 == 1899-12-31)
SPREADSHEET_EPOCH = date(1899, 12, 30)

TRUE_LITERALS: FrozenSet[str] = frozenset({"true", "1"})
FALSE_LITERALS: FrozenSet[str] = frozenset({"false", "0"})

# Rendering of booleans in exported rows
EXPORT_TRUE = "TRUE"
EXPORT_FALSE = "FALSE"

# Canonical identifier format (UUID, any case)
UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
