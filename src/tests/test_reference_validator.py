"""Tests for foreign-key validation against the reference snapshot."""

import pytest

from src.models.enums import RecordKind
from src.services.exceptions import InvalidForeignKey
from src.services.reference_data_service import ReferenceSnapshot
from src.services.reference_validator import check_foreign_keys, validate_foreign_keys

CLIENT_ID = "0f8fad5b-d9cb-469f-a165-70867728950e"
SUPPLIER_ID = "7c9e6679-7425-40de-944b-e07fc1f90ae7"
SERVICE_POINT_ID = "16fd2706-8baf-433b-82eb-8c7fada847da"
MISSING_ID = "ffffffff-ffff-4fff-8fff-ffffffffffff"
OTHER_MISSING_ID = "eeeeeeee-eeee-4eee-8eee-eeeeeeeeeeee"


@pytest.fixture
def snapshot():
    return ReferenceSnapshot(
        kind=RecordKind.RATES,
        valid_foreign_ids={
            RecordKind.CLIENTS: frozenset({CLIENT_ID}),
            RecordKind.SERVICE_POINTS: frozenset({SERVICE_POINT_ID}),
            RecordKind.SUPPLIERS: frozenset({SUPPLIER_ID}),
        },
    )


class TestValidateForeignKeys:
    """Tests for validate_foreign_keys()."""

    def test_all_references_exist(self, snapshot):
        record = {
            "client_id": CLIENT_ID,
            "punto_servizio_id": SERVICE_POINT_ID,
            "fornitore_id": SUPPLIER_ID,
        }
        result = validate_foreign_keys(RecordKind.RATES, record, snapshot)
        assert result.is_valid
        assert result.message is None

    def test_blank_references_are_not_checked(self, snapshot):
        record = {"client_id": None, "punto_servizio_id": "", "fornitore_id": None}
        assert validate_foreign_keys(RecordKind.RATES, record, snapshot).is_valid

    def test_kind_without_foreign_keys_is_valid(self, snapshot):
        assert validate_foreign_keys(RecordKind.CLIENTS, {"ragione_sociale": "x"}, snapshot).is_valid

    def test_missing_reference_names_field_kind_and_value(self, snapshot):
        record = {"client_id": CLIENT_ID, "fornitore_id": MISSING_ID}
        result = validate_foreign_keys(RecordKind.RATES, record, snapshot)
        assert not result.is_valid
        assert "fornitore_id" in result.message
        assert "fornitori" in result.message
        assert MISSING_ID in result.message

    def test_first_failure_wins_in_configured_order(self, snapshot):
        record = {"client_id": MISSING_ID, "fornitore_id": OTHER_MISSING_ID}
        with pytest.raises(InvalidForeignKey) as exc_info:
            check_foreign_keys(RecordKind.RATES, record, snapshot)
        assert exc_info.value.field == "client_id"
        assert exc_info.value.kind == "clienti"
        assert OTHER_MISSING_ID not in str(exc_info.value)

    def test_membership_is_case_insensitive(self, snapshot):
        record = {"client_id": CLIENT_ID.upper()}
        assert validate_foreign_keys(RecordKind.RATES, record, snapshot).is_valid

    def test_referenced_kind_missing_from_snapshot(self):
        empty = ReferenceSnapshot(kind=RecordKind.NETWORK_OPERATORS)
        result = validate_foreign_keys(RecordKind.NETWORK_OPERATORS, {"cliente_id": CLIENT_ID}, empty)
        assert not result.is_valid
