"""
Export Service - import templates and re-importable exports.

Exports are raw rows keyed by canonical column labels, so an unchanged
export fed back into an import classifies every row as DUPLICATE.

Usage:
    from src.services.export_service import export_records, get_template_headers

    headers = get_template_headers("clienti")
    rows = export_records(RecordKind.CLIENTS)
"""

from datetime import date, datetime
from typing import Any, Dict, List

from src.services.database import session_scope
from src.services.logging_utils import get_service_logger, log_operation
from src.services.record_mappers import get_field_specs
from src.services.import_config import parse_record_kind
from src.services.storage_service import StorageAccessor
from src.utils.constants import EXPORT_FALSE, EXPORT_TRUE

logger = get_service_logger(__name__)


def get_template_headers(kind) -> List[str]:
    """Canonical column labels of a kind, in field order."""
    return [spec.label for spec in get_field_specs(kind)]


def format_export_value(value: Any) -> Any:
    """
    Render a stored value as a spreadsheet cell.

    Dates become ISO strings, booleans TRUE/FALSE and None an empty string.
    Numbers and text pass through.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return EXPORT_TRUE if value else EXPORT_FALSE
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def export_records(kind, session=None) -> List[Dict[str, Any]]:
    """
    Export every stored record of a kind as rows keyed by column label.

    Uses the session=None pattern for transactional composition.

    Args:
        kind: RecordKind (or table name) to export
        session: Optional SQLAlchemy session

    Returns:
        One row per stored record
    """
    if session is not None:
        return _export_records_impl(kind, session)
    with session_scope() as sess:
        return _export_records_impl(kind, sess)


def _export_records_impl(kind, session) -> List[Dict[str, Any]]:
    kind = parse_record_kind(kind)
    specs = get_field_specs(kind)
    rows = []
    for record in StorageAccessor(session).select_all(kind):
        rows.append({spec.label: format_export_value(record.get(spec.name)) for spec in specs})
    log_operation(logger, operation="export_records", outcome="success", record_kind=kind.value, rows=len(rows))
    return rows
