"""Tests for import templates and exports."""

from datetime import date

from src.models import Personnel, Procedure
from src.models.enums import RecordKind, RowStatus
from src.services.anagrafiche_import_service import preview_import
from src.services.export_service import export_records, format_export_value, get_template_headers


class TestTemplateHeaders:
    """Tests for get_template_headers()."""

    def test_client_headers(self):
        headers = get_template_headers("clienti")
        assert headers[0] == "Ragione Sociale"
        assert "Codice Cliente Manuale" in headers
        assert "Attivo" in headers

    def test_every_kind_has_headers(self):
        for kind in RecordKind:
            headers = get_template_headers(kind)
            assert headers
            assert len(headers) == len(set(headers))


class TestFormatExportValue:
    """Tests for format_export_value()."""

    def test_values(self):
        assert format_export_value(None) == ""
        assert format_export_value(True) == "TRUE"
        assert format_export_value(False) == "FALSE"
        assert format_export_value(date(2024, 3, 1)) == "2024-03-01"
        assert format_export_value(12.5) == 12.5
        assert format_export_value("Acme") == "Acme"


class TestExportRecords:
    """Tests for export_records()."""

    def test_rows_keyed_by_label(self, test_db, sample_client):
        rows = export_records(RecordKind.CLIENTS)

        assert len(rows) == 1
        assert rows[0]["Ragione Sociale"] == "Acme Srl"
        assert rows[0]["Telefono"] == "000"
        assert rows[0]["Email"] == ""
        assert rows[0]["Attivo"] == "TRUE"

    def test_reimport_is_all_duplicates(self, test_db, sample_client, sample_service_point):
        session = test_db()
        session.add(
            Personnel(
                nome="Mario",
                cognome="Rossi",
                data_nascita=date(1980, 5, 17),
                attivo=False,
            )
        )
        session.add(Procedure(nome_procedura="Apertura", versione="2"))
        session.commit()

        for kind in (
            RecordKind.CLIENTS,
            RecordKind.SUPPLIERS,
            RecordKind.SERVICE_POINTS,
            RecordKind.PERSONNEL,
            RecordKind.PROCEDURES,
        ):
            rows = export_records(kind, session=test_db())
            preview = preview_import(kind, rows)
            assert rows, kind
            assert all(row.status == RowStatus.DUPLICATE for row in preview.rows), kind
