"""Service layer logging utilities.

Provides structured logging functions for service operations, enabling
consistent log format and context across the import services.

Usage:
    from src.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    log_operation(
        logger,
        operation="run_import",
        outcome="success",
        record_kind="clienti",
        inserted=12,
    )
"""

import logging
from typing import Any

LOGGER_PREFIX = "anagrafiche.services"


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for service operations.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger named under the 'anagrafiche.services' prefix.

    Example:
        >>> logger = get_service_logger("src.services.anagrafiche_import_service")
        >>> logger.name
        'anagrafiche.services.anagrafiche_import_service'
    """
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"{LOGGER_PREFIX}.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The context is passed via the 'extra' parameter so handlers can
    read each field as a record attribute.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "load_reference_snapshot", "run_import")
        outcome: Outcome description (e.g., "success", "row_write_failed")
        level: Log level (default: INFO). Use DEBUG for per-row or verbose logs.
        **context: Additional context fields. Common fields:
            - record_kind: Table being imported
            - row_number: 1-based position of the row in the input
            - error: Error message if outcome is a failure
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)
