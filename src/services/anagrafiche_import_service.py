"""
Anagrafiche Import Service - reconcile spreadsheet rows with stored records.

Drives one import run for a single RecordKind:

1. Load the ReferenceSnapshot once (existing records and foreign ids).
2. For each row, in input order: map -> classify -> validate foreign keys,
   producing one RowReport per row.
3. Preview mode returns the reports; nothing is written.
4. Commit mode inserts NEW rows and updates UPDATE rows, committing after
   each successful write. A failing write is recorded against its row and
   the run continues.

Row-scoped problems (missing fields, unknown codes, bad references, write
failures) never abort a run. Only a snapshot that cannot be loaded or an
unknown kind/mode does.

Usage:
    from src.services.anagrafiche_import_service import preview_import, commit_import

    preview = preview_import("clienti", rows)
    for report in preview.rows:
        print(report.row_number, report.status.value, report.message)

    result = commit_import("clienti", rows)
    print(result.get_summary())
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from src.models.enums import RecordKind, RowStatus
from src.services.database import session_scope
from src.services.exceptions import ImportRowError, InvalidImportRequest, RowWriteFailure
from src.services.import_config import parse_record_kind
from src.services.logging_utils import get_service_logger, log_operation
from src.services.record_classifier import classify_record
from src.services.record_mappers import map_row
from src.services.reference_data_service import ReferenceSnapshot, load_reference_snapshot
from src.services.reference_validator import validate_foreign_keys
from src.services.storage_service import StorageAccessor
from src.utils.config import get_config
from src.utils.datetime_utils import utc_now

logger = get_service_logger(__name__)

Record = Dict[str, Any]
RawRow = Mapping[str, Any]


class ImportMode(str, Enum):
    """Whether an import run only reports or also writes."""

    PREVIEW = "preview"
    COMMIT = "commit"


def parse_import_mode(value: Union[str, ImportMode]) -> ImportMode:
    """
    Resolve an import mode from its value.

    Raises:
        InvalidImportRequest: If the value is not "preview" or "commit"
    """
    if isinstance(value, ImportMode):
        return value
    try:
        return ImportMode(str(value).strip().lower())
    except ValueError:
        raise InvalidImportRequest(
            f"Invalid mode {value!r}: expected 'preview' or 'commit'"
        ) from None


def _json_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


# ============================================================================
# Row reports
# ============================================================================


@dataclass
class RowReport:
    """
    Outcome of processing one input row.

    Attributes:
        row_number: 1-based position of the row in the input
        original_row: The raw row as received
        processed_data: Canonical record, or None when mapping failed
        status: Terminal status of the row
        message: Human-readable explanation of the status
        updated_fields: Changed field names (UPDATE only)
        existing_id: Identifier of the matched stored record, if any
    """

    row_number: int
    original_row: Mapping[str, Any]
    processed_data: Optional[Record]
    status: RowStatus
    message: str
    updated_fields: List[str] = field(default_factory=list)
    existing_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for a JSON response body."""
        processed = None
        if self.processed_data is not None:
            processed = {key: _json_value(value) for key, value in self.processed_data.items()}
        return {
            "originalRow": {key: _json_value(value) for key, value in self.original_row.items()},
            "processedData": processed,
            "status": self.status.value,
            "message": self.message,
            "updatedFields": list(self.updated_fields),
            "id": self.existing_id,
        }


class ImportPreview:
    """Per-row report of a preview run."""

    def __init__(self, kind: RecordKind, rows: List[RowReport]):
        self.kind = kind
        self.rows = rows

    def count(self, status: RowStatus) -> int:
        """Number of rows with the given status."""
        return sum(1 for row in self.rows if row.status == status)

    @property
    def has_errors(self) -> bool:
        return any(row.status.is_error for row in self.rows)

    def to_response(self) -> Dict[str, Any]:
        return {"report": [row.to_dict() for row in self.rows]}

    def get_summary(self) -> str:
        """Generate user-friendly summary for CLI display."""
        lines = [
            "=" * 60,
            f"Import Preview: {self.kind.value}",
            "*** PREVIEW - No changes committed ***",
            "=" * 60,
        ]
        for row in self.rows:
            lines.append(f"  Row {row.row_number}: {row.status.value} - {row.message}")
        lines.append("")
        lines.append(f"Total Rows: {len(self.rows)}")
        for status in RowStatus:
            lines.append(f"  {status.value + ':':<11}{self.count(status)}")
        lines.append("=" * 60)
        return "\n".join(lines)


# ============================================================================
# Commit results
# ============================================================================


class ImportRunResult:
    """
    Aggregate outcome of a commit run.

    Every error message is kept in `errors`; `reported_errors` is the
    bounded list returned to callers, with the overflow summarized as a
    final "... and N more errors" entry.
    """

    def __init__(self, kind: RecordKind, max_reported_errors: Optional[int] = None):
        self.kind = kind
        self.max_reported_errors = (
            max_reported_errors
            if max_reported_errors is not None
            else get_config().max_reported_errors
        )
        self.inserted: int = 0
        self.updated: int = 0
        self.duplicates: int = 0
        self.failed: int = 0
        self.errors: List[str] = []

    # -------------------------------------------------------------------------
    # Properties for aggregate counts
    # -------------------------------------------------------------------------

    @property
    def total_processed(self) -> int:
        return self.inserted + self.updated + self.duplicates + self.failed

    @property
    def total_written(self) -> int:
        """Rows inserted or updated."""
        return self.inserted + self.updated

    @property
    def has_errors(self) -> bool:
        return self.failed > 0

    @property
    def reported_errors(self) -> List[str]:
        """Error messages capped at max_reported_errors."""
        limit = self.max_reported_errors
        if len(self.errors) <= limit:
            return list(self.errors)
        return self.errors[:limit] + [f"... and {len(self.errors) - limit} more errors"]

    # -------------------------------------------------------------------------
    # Mutation methods
    # -------------------------------------------------------------------------

    def add_insert(self) -> None:
        self.inserted += 1

    def add_update(self) -> None:
        self.updated += 1

    def add_duplicate(self) -> None:
        self.duplicates += 1

    def add_error(self, row_number: int, message: str) -> None:
        """Record a failed row with a 1-based row reference."""
        self.failed += 1
        self.errors.append(f"Row {row_number}: {message}")

    # -------------------------------------------------------------------------
    # Reporting methods
    # -------------------------------------------------------------------------

    @property
    def message(self) -> str:
        return (
            f"Import into {self.kind.value} completed: {self.inserted} inserted, "
            f"{self.updated} updated, {self.duplicates} duplicates skipped, "
            f"{self.failed} errors."
        )

    def to_response(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "successCount": self.inserted,
            "updateCount": self.updated,
            "duplicateCount": self.duplicates,
            "errorCount": self.failed,
            "errors": self.reported_errors,
        }

    def get_summary(self) -> str:
        """Generate user-friendly summary for CLI display."""
        lines = [
            "=" * 60,
            f"Import Summary: {self.kind.value}",
            "=" * 60,
            f"Total Processed: {self.total_processed}",
            f"  Inserted:   {self.inserted}",
            f"  Updated:    {self.updated}",
            f"  Duplicates: {self.duplicates}",
            f"  Errors:     {self.failed}",
        ]
        if self.errors:
            lines.append("\nErrors:")
            for error in self.reported_errors:
                lines.append(f"  - {error}")
        lines.append("=" * 60)
        return "\n".join(lines)


# ============================================================================
# Per-row processing
# ============================================================================


def process_row(
    kind: RecordKind,
    row_number: int,
    row: RawRow,
    snapshot: ReferenceSnapshot,
    accessor: Optional[StorageAccessor] = None,
) -> RowReport:
    """
    Map, classify and validate one row against the snapshot.

    Mapping failures yield an ERROR report. A failed foreign-key check
    yields INVALID_FK whatever the classification was.
    """
    try:
        record = map_row(kind, row, accessor)
    except ImportRowError as e:
        return RowReport(
            row_number=row_number,
            original_row=row,
            processed_data=None,
            status=RowStatus.ERROR,
            message=str(e),
        )

    classification = classify_record(kind, record, snapshot)
    report = RowReport(
        row_number=row_number,
        original_row=row,
        processed_data=record,
        status=classification.status,
        message=classification.message,
        updated_fields=classification.changed_fields,
        existing_id=classification.existing_id,
    )

    validation = validate_foreign_keys(kind, record, snapshot)
    if not validation.is_valid:
        report.status = RowStatus.INVALID_FK
        report.message = validation.message
    return report


def build_row_reports(
    kind, rows: Sequence[RawRow], accessor: StorageAccessor
) -> List[RowReport]:
    """
    Load the snapshot once and produce one report per row, in input order.

    Raises:
        UnknownRecordKind: If the kind is not supported
        SnapshotLoadFailure: If the snapshot cannot be built
    """
    kind = parse_record_kind(kind)
    snapshot = load_reference_snapshot(kind, accessor)
    return [
        process_row(kind, index, row, snapshot, accessor)
        for index, row in enumerate(rows, start=1)
    ]


def _write_row(kind: RecordKind, report: RowReport, accessor: StorageAccessor) -> None:
    now = utc_now()
    record = dict(report.processed_data)
    if report.status == RowStatus.NEW:
        record["created_at"] = now
        record["updated_at"] = now
        accessor.insert(kind, record)
    else:
        record["updated_at"] = now
        accessor.update_by_id(kind, report.existing_id, record)
    accessor.commit(kind)


def apply_row_reports(
    kind: RecordKind,
    reports: Sequence[RowReport],
    accessor: StorageAccessor,
    max_reported_errors: Optional[int] = None,
) -> ImportRunResult:
    """
    Write the eligible rows of a report list and tally the outcome.

    ERROR and INVALID_FK rows are counted as errors, DUPLICATE rows are
    skipped, NEW rows are inserted and UPDATE rows are updated by their
    matched identifier. Each successful write is committed on its own.
    """
    result = ImportRunResult(kind, max_reported_errors)
    for report in reports:
        if report.status.is_error:
            result.add_error(report.row_number, report.message)
            continue
        if report.status == RowStatus.DUPLICATE:
            result.add_duplicate()
            continue

        try:
            _write_row(kind, report, accessor)
        except RowWriteFailure as e:
            log_operation(
                logger,
                operation="commit_import",
                outcome="row_write_failed",
                level=logging.WARNING,
                record_kind=kind.value,
                row_number=report.row_number,
                error=str(e),
            )
            result.add_error(report.row_number, str(e))
            continue

        if report.status == RowStatus.NEW:
            result.add_insert()
        else:
            result.add_update()
    return result


# ============================================================================
# Entry points
# ============================================================================


def preview_import(kind, rows: Sequence[RawRow], session=None) -> ImportPreview:
    """
    Classify every row without writing anything.

    Uses the session=None pattern for transactional composition.

    Args:
        kind: RecordKind (or table name) of the rows
        rows: Raw spreadsheet rows
        session: Optional SQLAlchemy session

    Returns:
        ImportPreview with one RowReport per row, in input order

    Raises:
        UnknownRecordKind: If the kind is not supported
        SnapshotLoadFailure: If the snapshot cannot be built
    """
    if session is not None:
        return _preview_import_impl(kind, rows, session)
    with session_scope() as sess:
        return _preview_import_impl(kind, rows, sess)


def _preview_import_impl(kind, rows: Sequence[RawRow], session) -> ImportPreview:
    kind = parse_record_kind(kind)
    reports = build_row_reports(kind, rows, StorageAccessor(session))
    preview = ImportPreview(kind, reports)
    log_operation(
        logger,
        operation="preview_import",
        outcome="success",
        record_kind=kind.value,
        rows=len(reports),
        **{status.value.lower(): preview.count(status) for status in RowStatus},
    )
    return preview


def commit_import(
    kind,
    rows: Sequence[RawRow],
    session=None,
    max_reported_errors: Optional[int] = None,
) -> ImportRunResult:
    """
    Classify every row, then insert NEW rows and update UPDATE rows.

    Every successful write is committed immediately, so rows written
    before a failing row stay written. When a session is passed in, its
    pending work is committed along with the first write.

    Args:
        kind: RecordKind (or table name) of the rows
        rows: Raw spreadsheet rows
        session: Optional SQLAlchemy session
        max_reported_errors: Cap on returned error messages (default from config)

    Returns:
        ImportRunResult with counts and the bounded error list

    Raises:
        UnknownRecordKind: If the kind is not supported
        SnapshotLoadFailure: If the snapshot cannot be built
    """
    if session is not None:
        return _commit_import_impl(kind, rows, session, max_reported_errors)
    with session_scope() as sess:
        return _commit_import_impl(kind, rows, sess, max_reported_errors)


def _commit_import_impl(
    kind, rows: Sequence[RawRow], session, max_reported_errors: Optional[int]
) -> ImportRunResult:
    kind = parse_record_kind(kind)
    accessor = StorageAccessor(session)
    reports = build_row_reports(kind, rows, accessor)
    result = apply_row_reports(kind, reports, accessor, max_reported_errors)
    log_operation(
        logger,
        operation="commit_import",
        outcome="completed_with_errors" if result.has_errors else "success",
        record_kind=kind.value,
        rows=len(reports),
        inserted=result.inserted,
        updated=result.updated,
        duplicates=result.duplicates,
        errors=result.failed,
    )
    return result


def run_import(
    kind,
    rows: Sequence[RawRow],
    mode: Union[str, ImportMode] = ImportMode.PREVIEW,
    session=None,
) -> Union[ImportPreview, ImportRunResult]:
    """
    Run an import in preview or commit mode.

    Args:
        kind: RecordKind (or table name) of the rows
        rows: Raw spreadsheet rows
        mode: "preview" (report only) or "commit" (write eligible rows)
        session: Optional SQLAlchemy session

    Returns:
        ImportPreview in preview mode, ImportRunResult in commit mode

    Raises:
        InvalidImportRequest: If the mode or kind is not supported
        SnapshotLoadFailure: If the snapshot cannot be built
    """
    mode = parse_import_mode(mode)
    if mode == ImportMode.COMMIT:
        return commit_import(kind, rows, session=session)
    return preview_import(kind, rows, session=session)
