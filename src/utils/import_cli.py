"""
CLI for anagraphic import runs.

Imports rows of one record kind from a JSON or CSV file, either as a
preview (default, nothing written) or as a commit.

Usage:
    python -m src.utils.import_cli clienti.json --kind clienti
    python -m src.utils.import_cli clienti.csv --kind clienti --commit
    python -m src.utils.import_cli punti.json --kind punti_servizio --verbose
    python -m src.utils.import_cli rows.json --kind fornitori --database-url sqlite:///test.db

Input Files:
    JSON - an array of row objects, or an object with a "rows" array
    CSV  - UTF-8 with a header row; every cell is read as text

Exit Codes:
    0 - Success (every row processed without errors)
    1 - Partial success (some rows errored)
    2 - Complete failure (no row succeeded, or reference data failed to load)
    3 - Invalid arguments or unreadable file
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from src.models.enums import RecordKind
from src.services.database import configure_database, initialize_app_database
from src.services.anagrafiche_import_service import (
    ImportPreview,
    ImportRunResult,
    commit_import,
    preview_import,
)
from src.services.exceptions import InvalidImportRequest, ServiceError
from src.services.import_config import parse_record_kind


# Exit code constants
EXIT_SUCCESS = 0
EXIT_PARTIAL = 1
EXIT_FAILURE = 2
EXIT_INVALID_ARGS = 3


def load_rows(file_path: str) -> List[Dict[str, Any]]:
    """
    Read raw rows from a JSON or CSV file.

    Args:
        file_path: Path to a .json or .csv file

    Returns:
        List of rows keyed by column header

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file cannot be parsed into a list of rows
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    if path.suffix.lower() == ".csv":
        frame = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8")
        return frame.to_dict("records")

    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if isinstance(data, dict):
        data = data.get("rows")
    if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
        raise ValueError(f"{file_path} must contain an array of row objects")
    return data


def get_exit_code(result) -> int:
    """
    Determine exit code based on an import preview or commit result.

    Args:
        result: ImportPreview or ImportRunResult

    Returns:
        Exit code: 0=success, 1=partial, 2=failure
    """
    if isinstance(result, ImportRunResult):
        has_errors = result.has_errors
        succeeded = result.total_written + result.duplicates
    else:
        has_errors = result.has_errors
        succeeded = sum(1 for row in result.rows if not row.status.is_error)

    if has_errors:
        if succeeded > 0:
            return EXIT_PARTIAL  # Some succeeded, some failed
        return EXIT_FAILURE  # All failed
    return EXIT_SUCCESS


def print_verbose_details(preview: ImportPreview) -> None:
    """Print changed fields of every UPDATE row."""
    updates = [row for row in preview.rows if row.updated_fields]
    if updates:
        print("\nChanged Fields:")
        for row in updates:
            print(f"  - Row {row.row_number} ({row.existing_id}): {', '.join(row.updated_fields)}")


def main(args=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Import anagraphic records (clients, suppliers, service points, ...)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Record kinds:
  {", ".join(kind.value for kind in RecordKind)}

Examples:
  %(prog)s clienti.json --kind clienti             # Preview only
  %(prog)s clienti.csv --kind clienti --commit     # Write NEW and UPDATE rows
  %(prog)s punti.json --kind punti_servizio -v     # Preview with debug logging

Exit Codes:
  0 - Success (no row errored)
  1 - Partial success (some rows errored)
  2 - Complete failure (no row succeeded)
  3 - Invalid arguments or file not found
        """,
    )

    parser.add_argument(
        "file",
        help="Path to a JSON or CSV file of rows",
    )

    parser.add_argument(
        "--kind",
        required=True,
        help="Record kind (table name) of the rows",
    )

    parser.add_argument(
        "--commit",
        action="store_true",
        help="Write NEW and UPDATE rows (default: preview only)",
    )

    parser.add_argument(
        "--database-url",
        help="SQLAlchemy database URL (default: from configuration)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging and show changed fields",
    )

    parsed_args = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        kind = parse_record_kind(parsed_args.kind)
        rows = load_rows(parsed_args.file)
    except InvalidImportRequest as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID_ARGS
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID_ARGS
    except (OSError, ValueError) as e:
        print(f"Error: could not read {parsed_args.file}: {e}", file=sys.stderr)
        return EXIT_INVALID_ARGS

    # Initialize database
    if parsed_args.database_url:
        configure_database(parsed_args.database_url)
    initialize_app_database()

    # Execute import
    try:
        if parsed_args.commit:
            result = commit_import(kind, rows)
            print(result.get_summary())
        else:
            result = preview_import(kind, rows)
            print(result.get_summary())
            if parsed_args.verbose:
                print_verbose_details(result)

        return get_exit_code(result)

    except ServiceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
