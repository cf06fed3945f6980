"""
Field lookup and type coercion for raw spreadsheet rows.

Stateless helpers shared by every record mapper. A raw row is a mapping
from column header to cell value; the same logical field may appear
under several header spellings depending on the template version.

Usage:
    from src.services.field_mapping import get_field_value, to_string

    get_field_value(row, ("Ragione Sociale", "ragione_sociale"), to_string)
"""

import math
import re
from datetime import date
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from src.utils.constants import FALSE_LITERALS, TRUE_LITERALS, UUID_PATTERN
from src.utils.datetime_utils import parse_calendar_date

Converter = Callable[[Any], Any]
Number = Union[int, float]

_UUID_RE = re.compile(UUID_PATTERN)


def is_blank(value: Any) -> bool:
    """
    Check whether a cell value counts as empty.

    None, NaN (as produced by dataframe-based decoders) and strings that
    are empty after trimming are blank. False and 0 are not.
    """
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return False


def to_string(value: Any) -> str:
    """
    Convert a cell to trimmed text.

    Integral floats lose their ".0" so numeric-looking codes such as
    postal codes read back as typed ("20100", not "20100.0").
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def to_number(value: Any) -> Optional[Number]:
    """
    Convert a cell to a number.

    Accepts ints, floats and numeric text; a comma is read as the decimal
    separator when the text has no dot ("12,50" -> 12.5).

    Returns:
        The number, or None when the value does not parse
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return None
        return value
    text = str(value).strip()
    if "," in text and "." not in text:
        text = text.replace(",", ".")
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def to_boolean(value: Any) -> Optional[bool]:
    """
    Convert a cell to a boolean.

    "true"/"1" map to True and "false"/"0" to False, case-insensitive
    and trimmed; real booleans pass through.

    Returns:
        The boolean, or None for any other value
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip().lower()
    if text in TRUE_LITERALS:
        return True
    if text in FALSE_LITERALS:
        return False
    return None


def to_date(value: Any) -> Optional[date]:
    """Convert a cell (text, date, or spreadsheet serial) to a calendar date."""
    return parse_calendar_date(value)


def is_valid_identifier(value: Any) -> bool:
    """Check whether a value is a well-formed record identifier (UUID)."""
    return isinstance(value, str) and bool(_UUID_RE.match(value.strip()))


def to_identifier(value: Any) -> Optional[str]:
    """
    Convert a cell to a record identifier.

    Returns:
        The lowercase UUID string, or None when the text is not a UUID
    """
    text = to_string(value)
    if not is_valid_identifier(text):
        return None
    return text.lower()


def get_field_value(row: Mapping[str, Any], headers: Sequence[str], converter: Converter) -> Any:
    """
    Look up a field under its accepted header spellings and coerce it.

    Headers are tried in order; the first one holding a non-blank value
    is converted and returned. Later spellings are not consulted even if
    the conversion yields None.

    Args:
        row: Raw spreadsheet row
        headers: Accepted header spellings, most preferred first
        converter: Coercion applied to the raw value

    Returns:
        The converted value, or None if no header holds a value
    """
    for header in headers:
        value = row.get(header)
        if not is_blank(value):
            return converter(value)
    return None
