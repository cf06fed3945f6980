"""
Record Classifier - decide whether a mapped record is new or already stored.

Classification uses only the preloaded ReferenceSnapshot:
- NEW: no key-set of the record matches a stored record
- UPDATE: a stored record matches and at least one field differs
- DUPLICATE: a stored record matches and no field differs

DUPLICATE always carries an empty changed-field list.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, List, Mapping, Optional

from src.models.enums import RowStatus
from src.services.field_mapping import is_blank
from src.services.import_config import get_kind_config
from src.services.reference_data_service import ReferenceSnapshot, build_unique_identifier
from src.utils.constants import NUMERIC_COMPARISON_PRECISION, TIMESTAMP_FIELDS


@dataclass
class ClassificationResult:
    """Outcome of classifying one record against the snapshot."""

    status: RowStatus
    message: str
    changed_fields: List[str] = field(default_factory=list)
    existing_id: Optional[str] = None


def normalize_for_comparison(value: Any) -> Any:
    """
    Normalize a field value so stored and imported values compare equal.

    - blank (None, NaN, empty text) -> None
    - text -> trimmed and lowercased
    - numbers -> float rounded to a fixed precision
    - dates -> ISO string (a datetime keeps only its date when at midnight)
    """
    if is_blank(value):
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isinf(value):
            return value
        return round(float(value), NUMERIC_COMPARISON_PRECISION)
    if isinstance(value, datetime):
        if value.time() == datetime.min.time() and value.tzinfo is None:
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return value.strip().lower()
    return value


def find_changed_fields(record: Mapping[str, Any], existing: Mapping[str, Any]) -> List[str]:
    """
    List the fields of a record whose value differs from the stored one.

    Timestamp fields are never compared. Field order follows the record.
    """
    changed = []
    for name, value in record.items():
        if name in TIMESTAMP_FIELDS:
            continue
        if normalize_for_comparison(value) != normalize_for_comparison(existing.get(name)):
            changed.append(name)
    return changed


def classify_record(kind, record: Mapping[str, Any], snapshot: ReferenceSnapshot) -> ClassificationResult:
    """
    Classify a mapped record as NEW, UPDATE or DUPLICATE.

    Key-sets are tried in configured order. A key-set is skipped when
    any of its fields is blank on the record; the first key-set whose
    identifier is in the snapshot's index decides the match.

    Args:
        kind: RecordKind (or table name) of the record
        record: Canonical record from a mapper
        snapshot: Reference snapshot for this run

    Returns:
        ClassificationResult with status, message, changed fields and the
        matched record's identifier
    """
    config = get_kind_config(kind)
    if not config.key_sets:
        return ClassificationResult(
            status=RowStatus.NEW,
            message="New record to insert (no unique keys configured for duplicate detection).",
        )

    existing = None
    for key_set in config.key_sets:
        identifier = build_unique_identifier(key_set, record)
        if identifier is None:
            continue
        existing = snapshot.find_existing(identifier)
        if existing is not None:
            break

    if existing is None:
        return ClassificationResult(status=RowStatus.NEW, message="New record to insert.")

    changed = find_changed_fields(record, existing)
    if changed:
        noun = "field" if len(changed) == 1 else "fields"
        return ClassificationResult(
            status=RowStatus.UPDATE,
            message=f"Will update {len(changed)} {noun}.",
            changed_fields=changed,
            existing_id=existing.get("id"),
        )
    return ClassificationResult(
        status=RowStatus.DUPLICATE,
        message="Existing record, no changes detected.",
        existing_id=existing.get("id"),
    )
