"""
Reference Data Service - bulk preload of existing records and foreign ids.

Builds a ReferenceSnapshot once per import run so that classifying and
validating N rows costs a constant number of queries instead of one
query per row:
- one full fetch of the imported kind, indexed by every satisfied key-set
- one identifier-only fetch per distinct referenced kind

The snapshot is never refreshed while a run is in progress. Rows
inserted earlier in the same run are therefore invisible to later rows;
colliding inserts are left to the storage uniqueness constraints.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, FrozenSet, Mapping, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from src.models.enums import RecordKind
from src.services.exceptions import SnapshotLoadFailure
from src.services.field_mapping import is_blank
from src.services.import_config import get_kind_config, parse_record_kind
from src.services.logging_utils import get_service_logger, log_operation
from src.utils.constants import NUMERIC_COMPARISON_PRECISION

logger = get_service_logger(__name__)

Record = Dict[str, Any]


@dataclass(frozen=True)
class ReferenceSnapshot:
    """
    Read-only reference data for one import run.

    Attributes:
        kind: Record kind being imported
        existing_index: Key-set identifier -> full stored record
        valid_foreign_ids: Referenced kind -> all of its stored identifiers
    """

    kind: RecordKind
    existing_index: Mapping[str, Record] = field(default_factory=dict)
    valid_foreign_ids: Mapping[RecordKind, FrozenSet[str]] = field(default_factory=dict)

    def find_existing(self, identifier: str) -> Optional[Record]:
        """Return the stored record indexed under an identifier, if any."""
        return self.existing_index.get(identifier)

    def has_foreign_id(self, kind: RecordKind, value: Any) -> bool:
        """Check whether an identifier exists among a referenced kind's records."""
        ids = self.valid_foreign_ids.get(kind, frozenset())
        return str(value).strip().lower() in ids


def _key_part(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        number = round(float(value), NUMERIC_COMPARISON_PRECISION)
        return str(int(number)) if number.is_integer() else repr(number)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value).strip().lower()


def build_unique_identifier(key_set: Sequence[str], record: Mapping[str, Any]) -> Optional[str]:
    """
    Compute the index identifier of a record for one key-set.

    The identifier is the key-set's field names joined by "_", a colon,
    then the trimmed, lowercased field values joined by "|"
    (e.g. "nome_cognome:mario|rossi").

    Args:
        key_set: Canonical field names forming the key-set
        record: Stored or mapped record

    Returns:
        The identifier, or None if any key-set field is blank on the record
    """
    parts = []
    for name in key_set:
        value = record.get(name)
        if is_blank(value):
            return None
        parts.append(_key_part(value))
    return "_".join(key_set) + ":" + "|".join(parts)


def build_existing_index(kind, records: Sequence[Record]) -> Dict[str, Record]:
    """
    Index stored records under every key-set they satisfy.

    A record satisfying several key-sets gets one entry per key-set.
    When two stored records share an identifier, the first one wins.
    """
    config = get_kind_config(kind)
    index: Dict[str, Record] = {}
    for record in records:
        for key_set in config.key_sets:
            identifier = build_unique_identifier(key_set, record)
            if identifier is not None and identifier not in index:
                index[identifier] = record
    return index


def load_reference_snapshot(kind, accessor) -> ReferenceSnapshot:
    """
    Build the reference snapshot for an import run.

    Args:
        kind: RecordKind (or table name) being imported
        accessor: StorageAccessor used for the bulk reads

    Returns:
        ReferenceSnapshot for the kind

    Raises:
        UnknownRecordKind: If the kind is not supported
        SnapshotLoadFailure: If any bulk read fails
    """
    kind = parse_record_kind(kind)
    config = get_kind_config(kind)

    try:
        existing_index: Dict[str, Record] = {}
        if config.key_sets:
            existing_index = build_existing_index(kind, accessor.select_all(kind))

        valid_foreign_ids = {
            referenced: frozenset(
                str(value).lower() for value in accessor.select_identifiers(referenced)
            )
            for referenced in config.referenced_kinds
        }
    except (SQLAlchemyError, KeyError, ValueError) as e:
        log_operation(
            logger,
            operation="load_reference_snapshot",
            outcome="failed",
            level=logging.ERROR,
            record_kind=kind.value,
            error=str(e),
        )
        raise SnapshotLoadFailure(kind.value, e) from e

    log_operation(
        logger,
        operation="load_reference_snapshot",
        outcome="success",
        level=logging.DEBUG,
        record_kind=kind.value,
        indexed_keys=len(existing_index),
        referenced_kinds={ref.value: len(ids) for ref, ids in valid_foreign_ids.items()},
    )
    return ReferenceSnapshot(
        kind=kind,
        existing_index=existing_index,
        valid_foreign_ids=valid_foreign_ids,
    )
