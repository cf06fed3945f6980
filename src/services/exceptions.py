"""Service layer exception classes for the Anagrafiche import engine.

Exception Hierarchy:
    ServiceError (base)
    ├── ImportRowError (row-scoped: recorded on the row, never aborts a run)
    │   ├── MissingRequiredField
    │   ├── ReferenceNotFound
    │   ├── ReferenceLookupFailure
    │   ├── InvalidForeignKey
    │   └── RowWriteFailure
    ├── SnapshotLoadFailure (run-scoped: aborts the import)
    └── InvalidImportRequest (malformed top-level request)
        └── UnknownRecordKind
"""

from typing import Optional


class ServiceError(Exception):
    """Base exception for all service layer errors.

    All service-specific exceptions should inherit from this class.
    """

    http_status_code = 500


class ImportRowError(ServiceError):
    """Base class for failures confined to a single import row.

    The orchestrator catches these and records them on the row's report
    entry; they never propagate past the per-row loop.
    """

    http_status_code = 422


class MissingRequiredField(ImportRowError):
    """Raised when a required canonical field is blank after mapping.

    Args:
        field: Canonical field name
        label: Column label shown to the user (defaults to the field name)

    Example:
        >>> raise MissingRequiredField("ragione_sociale", "Ragione Sociale")
        MissingRequiredField: Missing required field: Ragione Sociale (ragione_sociale)
    """

    def __init__(self, field: str, label: Optional[str] = None):
        self.field = field
        self.label = label or field
        if self.label != field:
            message = f"Missing required field: {self.label} ({field})"
        else:
            message = f"Missing required field: {field}"
        super().__init__(message)


class ReferenceNotFound(ImportRowError):
    """Raised when a natural-key lookup during mapping finds no single record.

    A code matching several stored records is ambiguous and is treated
    the same way as a code matching none.

    Args:
        code: The human-assigned code that was looked up
        kind: Value of the RecordKind that was searched
        field: Canonical field holding the code on the target kind
        ambiguous: True when the code matched more than one record
    """

    def __init__(self, code: str, kind: str, field: str, ambiguous: bool = False):
        self.code = code
        self.kind = kind
        self.field = field
        self.ambiguous = ambiguous
        if ambiguous:
            message = f"More than one {kind} record found with {field} '{code}'"
        else:
            message = f"No {kind} record found with {field} '{code}'"
        super().__init__(message)


class ReferenceLookupFailure(ImportRowError):
    """Raised when storage fails while resolving a natural key for one row.

    Args:
        code: The human-assigned code that was looked up
        kind: Value of the RecordKind that was searched
        original_error: The underlying storage exception
    """

    def __init__(self, code: str, kind: str, original_error: Optional[Exception] = None):
        self.code = code
        self.kind = kind
        self.original_error = original_error
        detail = f": {str(original_error).splitlines()[0]}" if original_error is not None else ""
        super().__init__(f"Lookup of '{code}' in {kind} failed{detail}")


class InvalidForeignKey(ImportRowError):
    """Raised when a populated foreign key references no stored record.

    Args:
        field: Canonical foreign-key field
        kind: Value of the referenced RecordKind
        value: The offending identifier
    """

    def __init__(self, field: str, kind: str, value: str):
        self.field = field
        self.kind = kind
        self.value = value
        super().__init__(f"Invalid reference: {field} '{value}' not found in {kind}")


class RowWriteFailure(ImportRowError):
    """Raised when storage rejects an insert or update for one row.

    Args:
        kind: Value of the RecordKind being written
        message: Short description of the failure
        original_error: The underlying storage exception, if any
    """

    def __init__(self, kind: str, message: str, original_error: Optional[Exception] = None):
        self.kind = kind
        self.original_error = original_error
        super().__init__(f"Write to {kind} failed: {message}")


class SnapshotLoadFailure(ServiceError):
    """Raised when the reference snapshot for an import run cannot be built.

    Run-scoped: the whole import is aborted before any row is processed.

    Args:
        kind: Value of the RecordKind being imported
        original_error: The underlying storage or configuration error
    """

    http_status_code = 500

    def __init__(self, kind: str, original_error: Optional[Exception] = None):
        self.kind = kind
        self.original_error = original_error
        detail = f": {original_error}" if original_error is not None else ""
        super().__init__(f"Could not load reference data for {kind}{detail}")


class InvalidImportRequest(ServiceError):
    """Raised when an import request payload is malformed.

    HTTP Status: 400 Bad Request
    """

    http_status_code = 400


class UnknownRecordKind(InvalidImportRequest):
    """Raised when a request names a record kind outside the supported set."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Unknown record kind: {value!r}")
