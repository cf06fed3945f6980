"""Tests for the per-kind record mappers."""

from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from src.models import Client
from src.models.enums import RecordKind
from src.services.exceptions import (
    MissingRequiredField,
    ReferenceLookupFailure,
    ReferenceNotFound,
    UnknownRecordKind,
)
from src.services.record_mappers import (
    FIELD_SPECS,
    MAPPERS,
    get_field_label,
    map_row,
)
from src.services.storage_service import StorageAccessor

CLIENT_ID = "0f8fad5b-d9cb-469f-a165-70867728950e"
SUPPLIER_ID = "7c9e6679-7425-40de-944b-e07fc1f90ae7"
SERVICE_POINT_ID = "16fd2706-8baf-433b-82eb-8c7fada847da"


class TestRegistry:
    """Tests for the mapper and field spec tables."""

    def test_every_kind_has_a_mapper(self):
        assert set(MAPPERS) == set(RecordKind)
        assert set(FIELD_SPECS) == set(RecordKind)

    def test_field_names_are_unique_per_kind(self):
        for kind, specs in FIELD_SPECS.items():
            names = [spec.name for spec in specs]
            assert len(names) == len(set(names)), kind

    def test_map_row_accepts_table_name(self):
        record = map_row("clienti", {"Ragione Sociale": "Acme Srl"})
        assert record["ragione_sociale"] == "Acme Srl"

    def test_map_row_rejects_unknown_kind(self):
        with pytest.raises(UnknownRecordKind):
            map_row("richieste_servizio", {})

    def test_get_field_label(self):
        assert get_field_label(RecordKind.CLIENTS, "ragione_sociale") == "Ragione Sociale"
        assert get_field_label(RecordKind.CLIENTS, "unknown") == "unknown"


class TestClientMapper:
    """Tests for the client mapper."""

    def test_maps_canonical_labels(self):
        row = {
            "Ragione Sociale": " Acme Srl ",
            "Partita IVA": "01234567890",
            "Città": "Milano",
            "CAP": 20100,
            "Codice Cliente Manuale": "CL-001",
        }
        record = map_row(RecordKind.CLIENTS, row)
        assert record["ragione_sociale"] == "Acme Srl"
        assert record["partita_iva"] == "01234567890"
        assert record["citta"] == "Milano"
        assert record["cap"] == "20100"
        assert record["codice_cliente_custom"] == "CL-001"
        assert record["telefono"] is None

    def test_header_spellings_are_equivalent(self):
        spellings = [
            {"Ragione Sociale": "Acme Srl", "Partita IVA": "123"},
            {"ragione_sociale": "Acme Srl", "partita_iva": "123"},
            {"ragioneSociale": "Acme Srl", "partitaIva": "123"},
        ]
        records = [map_row(RecordKind.CLIENTS, row) for row in spellings]
        assert records[0] == records[1] == records[2]

    def test_missing_name_raises(self):
        with pytest.raises(MissingRequiredField) as exc_info:
            map_row(RecordKind.CLIENTS, {"Ragione Sociale": "   ", "Partita IVA": "123"})
        assert exc_info.value.field == "ragione_sociale"
        assert "Ragione Sociale" in str(exc_info.value)

    def test_attivo_omitted_when_absent(self):
        record = map_row(RecordKind.CLIENTS, {"Ragione Sociale": "Acme Srl"})
        assert "attivo" not in record

    def test_attivo_omitted_when_unparseable(self):
        record = map_row(RecordKind.CLIENTS, {"Ragione Sociale": "Acme Srl", "Attivo": "forse"})
        assert "attivo" not in record

    def test_attivo_kept_when_present(self):
        record = map_row(
            RecordKind.CLIENTS, {"Ragione Sociale": "Acme Srl", "Attivo (TRUE/FALSE)": "FALSE"}
        )
        assert record["attivo"] is False


class TestPersonnelMapper:
    """Tests for the personnel mapper."""

    def test_requires_first_and_last_name(self):
        with pytest.raises(MissingRequiredField) as exc_info:
            map_row(RecordKind.PERSONNEL, {"Nome": "Mario"})
        assert exc_info.value.field == "cognome"

    def test_parses_dates(self):
        row = {
            "Nome": "Mario",
            "Cognome": "Rossi",
            "Data Nascita (YYYY-MM-DD)": "1980-05-17",
            "Data Assunzione": 45352,
            "dataCessazione": "31/12/2024",
        }
        record = map_row(RecordKind.PERSONNEL, row)
        assert record["data_nascita"] == date(1980, 5, 17)
        assert record["data_assunzione"] == date(2024, 3, 1)
        assert record["data_cessazione"] == date(2024, 12, 31)

    def test_attivo_omitted_like_clients(self):
        record = map_row(RecordKind.PERSONNEL, {"Nome": "Mario", "Cognome": "Rossi"})
        assert "attivo" not in record


class TestProcedureMapper:
    """Tests for the procedure mapper."""

    def test_attivo_omitted_when_absent(self):
        record = map_row(RecordKind.PROCEDURES, {"Nome Procedura": "Apertura"})
        assert "attivo" not in record

    def test_maps_document_url(self):
        record = map_row(
            RecordKind.PROCEDURES,
            {"Nome Procedura": "Apertura", "URL Documento": "https://docs/apertura.pdf"},
        )
        assert record["documento_url"] == "https://docs/apertura.pdf"


class TestRateMapper:
    """Tests for the rate mapper."""

    def test_maps_rate(self):
        row = {
            "Tipo Servizio": "PIANTONAMENTO_ARMATO",
            "Importo": "21,50",
            "ID Cliente (UUID)": CLIENT_ID.upper(),
            "ID Punto Servizio": SERVICE_POINT_ID,
        }
        record = map_row(RecordKind.RATES, row)
        assert record["importo"] == 21.5
        assert record["client_id"] == CLIENT_ID
        assert record["punto_servizio_id"] == SERVICE_POINT_ID
        assert record["fornitore_id"] is None

    def test_non_numeric_amount_is_missing(self):
        with pytest.raises(MissingRequiredField) as exc_info:
            map_row(RecordKind.RATES, {"Tipo Servizio": "X", "Importo": "gratis"})
        assert exc_info.value.field == "importo"

    def test_zero_amount_is_valid(self):
        record = map_row(RecordKind.RATES, {"Tipo Servizio": "X", "Importo": 0})
        assert record["importo"] == 0

    def test_malformed_identifier_is_absent(self):
        record = map_row(
            RecordKind.RATES,
            {"Tipo Servizio": "X", "Importo": 10, "ID Cliente": "not-a-uuid"},
        )
        assert record["client_id"] is None


class TestContactMappers:
    """Tests for the directory mappers."""

    @pytest.mark.parametrize(
        "kind,id_header,field",
        [
            (RecordKind.CLIENT_CONTACTS, "ID Cliente", "client_id"),
            (RecordKind.SUPPLIER_CONTACTS, "ID Fornitore", "fornitore_id"),
            (RecordKind.SERVICE_POINT_CONTACTS, "ID Punto Servizio", "punto_servizio_id"),
        ],
    )
    def test_parent_identifier_required(self, kind, id_header, field):
        with pytest.raises(MissingRequiredField) as exc_info:
            map_row(kind, {"Tipo Recapito": "Reperibile", id_header: "not-a-uuid"})
        assert exc_info.value.field == field

    def test_maps_contact(self):
        row = {
            "Tipo Recapito": "Reperibile",
            "clientId": CLIENT_ID,
            "Nome Persona": "Luca Bianchi",
            "Telefono Cellulare": "3331234567",
        }
        record = map_row(RecordKind.CLIENT_CONTACTS, row)
        assert record == {
            "client_id": CLIENT_ID,
            "tipo_recapito": "Reperibile",
            "nome_persona": "Luca Bianchi",
            "telefono_fisso": None,
            "telefono_cellulare": "3331234567",
            "email_recapito": None,
            "note": None,
        }


class TestServicePointMapper:
    """Tests for the service point mapper."""

    def test_direct_identifiers(self):
        row = {
            "Nome Punto Servizio": "Magazzino",
            "ID Cliente": CLIENT_ID,
            "ID Fornitore": SUPPLIER_ID,
            "Latitudine": "45.46",
            "Longitudine": "9.19",
        }
        record = map_row(RecordKind.SERVICE_POINTS, row)
        assert record["id_cliente"] == CLIENT_ID
        assert record["fornitore_id"] == SUPPLIER_ID
        assert record["latitude"] == 45.46
        assert record["longitude"] == 9.19

    def test_resolves_client_code(self, test_db, sample_client):
        accessor = StorageAccessor(test_db())
        row = {"Nome Punto Servizio": "Magazzino", "Codice Cliente Manuale": "CL-001"}
        record = map_row(RecordKind.SERVICE_POINTS, row, accessor)
        assert record["id_cliente"] == sample_client.id

    def test_resolves_supplier_code(self, test_db, sample_supplier):
        accessor = StorageAccessor(test_db())
        row = {"Nome Punto Servizio": "Magazzino", "codiceClienteAssociato": "FO-001"}
        record = map_row(RecordKind.SERVICE_POINTS, row, accessor)
        assert record["fornitore_id"] == sample_supplier.id

    def test_malformed_identifier_falls_back_to_code(self, test_db, sample_client):
        accessor = StorageAccessor(test_db())
        row = {
            "Nome Punto Servizio": "Magazzino",
            "ID Cliente": "garbage",
            "Codice Cliente Manuale": "CL-001",
        }
        record = map_row(RecordKind.SERVICE_POINTS, row, accessor)
        assert record["id_cliente"] == sample_client.id

    def test_unknown_code_raises(self, test_db, sample_client):
        accessor = StorageAccessor(test_db())
        row = {"Nome Punto Servizio": "Magazzino", "Codice Cliente Manuale": "CL-999"}
        with pytest.raises(ReferenceNotFound) as exc_info:
            map_row(RecordKind.SERVICE_POINTS, row, accessor)
        assert exc_info.value.code == "CL-999"
        assert exc_info.value.kind == "clienti"

    def test_ambiguous_code_raises(self, test_db):
        session = test_db()
        session.add(Client(ragione_sociale="Prima Srl", codice_cliente_custom="CL-DUP"))
        session.add(Client(ragione_sociale="Seconda Srl", codice_cliente_custom="CL-DUP"))
        session.commit()
        row = {"Nome Punto Servizio": "Magazzino", "Codice Cliente Manuale": "CL-DUP"}

        with pytest.raises(ReferenceNotFound) as exc_info:
            map_row(RecordKind.SERVICE_POINTS, row, StorageAccessor(session))

        assert exc_info.value.ambiguous
        assert "More than one" in str(exc_info.value)

    def test_lookup_storage_error_is_row_scoped(self, test_db, monkeypatch):
        def fail(self, kind, field, value, limit=None):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

        monkeypatch.setattr(StorageAccessor, "select_by_field", fail)
        row = {"Nome Punto Servizio": "Magazzino", "Codice Fornitore Manuale": "FO-001"}

        with pytest.raises(ReferenceLookupFailure) as exc_info:
            map_row(RecordKind.SERVICE_POINTS, row, StorageAccessor(test_db()))

        assert exc_info.value.kind == "fornitori"
        assert isinstance(exc_info.value.original_error, OperationalError)

    def test_code_without_accessor_raises(self):
        row = {"Nome Punto Servizio": "Magazzino", "Codice Fornitore Manuale": "FO-001"}
        with pytest.raises(ReferenceNotFound):
            map_row(RecordKind.SERVICE_POINTS, row)

    def test_recovers_shifted_coordinates(self):
        row = {"Nome Punto Servizio": "Magazzino", "Note": "45.4642", "fornitore_id": "9.19"}
        record = map_row(RecordKind.SERVICE_POINTS, row)
        assert record["latitude"] == 45.4642
        assert record["longitude"] == 9.19
        assert record["note"] is None
        assert record["fornitore_id"] is None

    def test_out_of_range_shift_is_ignored(self):
        row = {"Nome Punto Servizio": "Magazzino", "Note": "120", "fornitore_id": "9.19"}
        record = map_row(RecordKind.SERVICE_POINTS, row)
        assert record["latitude"] is None
        assert record["note"] == "120"

    def test_text_note_is_kept(self):
        row = {"Nome Punto Servizio": "Magazzino", "Note": "Chiavi in portineria"}
        record = map_row(RecordKind.SERVICE_POINTS, row)
        assert record["note"] == "Chiavi in portineria"
        assert record["latitude"] is None
