"""
Import Request Service - validate an import payload and build the response.

Translates a request payload of the form

    {"recordKind": "clienti", "rows": [...], "mode": "preview" | "commit"}

into an import run, and the outcome into an (HTTP status, JSON body) pair:

- 400 {"error": ...}   malformed payload or unknown kind/mode
- 500 {"error": ...}   reference snapshot could not be loaded
- 200 {"report": [...]}  preview
- 200 / 207 commit summary (207 when at least one row failed)
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from src.services.anagrafiche_import_service import (
    ImportMode,
    commit_import,
    parse_import_mode,
    preview_import,
)
from src.services.exceptions import InvalidImportRequest, ServiceError
from src.services.import_config import parse_record_kind
from src.services.logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)

HTTP_OK = 200
HTTP_MULTI_STATUS = 207


@dataclass
class ImportResponse:
    """Status code and JSON-ready body of an import request."""

    status_code: int
    body: Dict[str, Any]


def _validate_rows(rows: Any) -> List[Mapping[str, Any]]:
    if not isinstance(rows, list):
        raise InvalidImportRequest("'rows' must be a list of row objects")
    for index, row in enumerate(rows, start=1):
        if not isinstance(row, Mapping):
            raise InvalidImportRequest(f"Row {index} is not an object")
    return rows


def handle_import_request(payload: Any, session=None) -> ImportResponse:
    """
    Run an import described by a request payload.

    Args:
        payload: Decoded request body with recordKind, rows and mode
        session: Optional SQLAlchemy session

    Returns:
        ImportResponse; never raises for service-layer failures
    """
    try:
        if not isinstance(payload, Mapping):
            raise InvalidImportRequest("Request body must be an object")
        if not payload.get("recordKind"):
            raise InvalidImportRequest("'recordKind' is required")
        kind = parse_record_kind(payload["recordKind"])
        rows = _validate_rows(payload.get("rows"))
        mode = parse_import_mode(payload.get("mode", ImportMode.PREVIEW.value))
    except InvalidImportRequest as e:
        log_operation(
            logger,
            operation="handle_import_request",
            outcome="rejected",
            level=logging.WARNING,
            error=str(e),
        )
        return ImportResponse(e.http_status_code, {"error": str(e)})

    try:
        if mode == ImportMode.PREVIEW:
            preview = preview_import(kind, rows, session=session)
            return ImportResponse(HTTP_OK, preview.to_response())

        result = commit_import(kind, rows, session=session)
    except ServiceError as e:
        log_operation(
            logger,
            operation="handle_import_request",
            outcome="failed",
            level=logging.ERROR,
            record_kind=kind.value,
            mode=mode.value,
            error=str(e),
        )
        return ImportResponse(e.http_status_code, {"error": str(e)})

    status_code = HTTP_MULTI_STATUS if result.has_errors else HTTP_OK
    return ImportResponse(status_code, result.to_response())
