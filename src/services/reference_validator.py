"""
Reference Validator - check a mapped record's foreign keys.

Every populated foreign-key field must name an identifier present in the
snapshot's set for the referenced kind. Checks run in configured order
and stop at the first failure.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from src.services.exceptions import InvalidForeignKey
from src.services.field_mapping import is_blank
from src.services.import_config import get_kind_config
from src.services.reference_data_service import ReferenceSnapshot


@dataclass
class ValidationResult:
    """Outcome of validating one record's foreign keys."""

    is_valid: bool
    message: Optional[str] = None


def check_foreign_keys(kind, record: Mapping[str, Any], snapshot: ReferenceSnapshot) -> None:
    """
    Raise on the first populated foreign key that references nothing.

    Raises:
        InvalidForeignKey: For the first failing field in configured order
    """
    for fk in get_kind_config(kind).foreign_keys:
        value = record.get(fk.field)
        if is_blank(value):
            continue
        if not snapshot.has_foreign_id(fk.references, value):
            raise InvalidForeignKey(fk.field, fk.references.value, str(value))


def validate_foreign_keys(kind, record: Mapping[str, Any], snapshot: ReferenceSnapshot) -> ValidationResult:
    """
    Validate a record's foreign keys against the snapshot.

    Args:
        kind: RecordKind (or table name) of the record
        record: Canonical record from a mapper
        snapshot: Reference snapshot for this run

    Returns:
        ValidationResult; is_valid is False with the failure message when
        a populated foreign key references no stored record
    """
    try:
        check_foreign_keys(kind, record, snapshot)
    except InvalidForeignKey as e:
        return ValidationResult(is_valid=False, message=str(e))
    return ValidationResult(is_valid=True)
