"""Services package - Business logic layer for Anagrafiche Import.

This package contains the service modules of the bulk import engine and
the database infrastructure they run on.

Architecture:
- Services: Stateless functions organized by pipeline stage
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy
- Configuration: Per-kind key-sets and foreign keys as static data

Service Modules:
- record_mappers: Raw spreadsheet row -> canonical record, per kind
- reference_data_service: Bulk preload of existing records and foreign ids
- record_classifier: NEW / UPDATE / DUPLICATE decision
- reference_validator: Foreign-key checks against the preloaded ids
- anagrafiche_import_service: Preview and commit runs
- import_request_service: Request payload -> (status code, body)
- export_service: Import templates and re-importable exports

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- storage_service: Kind-addressed CRUD over a session
- field_mapping: Header lookup and type coercion helpers
- import_config: Key-sets and foreign keys per kind
"""

from . import (
    database,
    anagrafiche_import_service,
    export_service,
    import_request_service,
    record_classifier,
    record_mappers,
    reference_data_service,
    reference_validator,
    storage_service,
)

from .anagrafiche_import_service import (
    ImportMode,
    ImportPreview,
    ImportRunResult,
    RowReport,
    commit_import,
    preview_import,
    run_import,
)
from .export_service import export_records, get_template_headers
from .import_request_service import ImportResponse, handle_import_request
from .record_classifier import ClassificationResult, classify_record
from .record_mappers import map_row
from .reference_data_service import ReferenceSnapshot, load_reference_snapshot
from .reference_validator import ValidationResult, validate_foreign_keys
from .storage_service import StorageAccessor

# Infrastructure
from .database import session_scope
from .exceptions import (
    ServiceError,
    ImportRowError,
    MissingRequiredField,
    ReferenceNotFound,
    ReferenceLookupFailure,
    InvalidForeignKey,
    RowWriteFailure,
    SnapshotLoadFailure,
    InvalidImportRequest,
    UnknownRecordKind,
)

__all__ = [
    # Service modules
    "database",
    "anagrafiche_import_service",
    "export_service",
    "import_request_service",
    "record_classifier",
    "record_mappers",
    "reference_data_service",
    "reference_validator",
    "storage_service",
    # Import runs
    "ImportMode",
    "ImportPreview",
    "ImportRunResult",
    "RowReport",
    "commit_import",
    "preview_import",
    "run_import",
    "handle_import_request",
    "ImportResponse",
    # Pipeline stages
    "map_row",
    "ReferenceSnapshot",
    "load_reference_snapshot",
    "ClassificationResult",
    "classify_record",
    "ValidationResult",
    "validate_foreign_keys",
    "StorageAccessor",
    # Templates and exports
    "export_records",
    "get_template_headers",
    # Infrastructure - Exception hierarchy
    "ServiceError",
    "ImportRowError",
    "MissingRequiredField",
    "ReferenceNotFound",
    "ReferenceLookupFailure",
    "InvalidForeignKey",
    "RowWriteFailure",
    "SnapshotLoadFailure",
    "InvalidImportRequest",
    "UnknownRecordKind",
    # Infrastructure - Session management
    "session_scope",
]
