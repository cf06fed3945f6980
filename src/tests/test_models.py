"""
Tests for database models.

Tests cover:
- Model creation and persistence
- Identifier generation and normalization
- to_dict / update_from_dict
- Storage constraints
"""

from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from src.models import (
    MODELS_BY_KIND,
    Client,
    ClientContact,
    Personnel,
    Rate,
    RecordKind,
    ServicePoint,
)


class TestBaseModel:
    """Tests for fields and helpers shared by every model."""

    def test_id_is_generated_on_insert(self, test_db):
        session = test_db()
        client = Client(ragione_sociale="Acme Srl")
        session.add(client)
        session.commit()

        assert len(client.id) == 36
        assert client.id == client.id.lower()
        assert client.created_at is not None
        assert client.updated_at is not None

    def test_explicit_id_is_lowercased(self, test_db):
        client = Client(id="AAAAAAAA-0000-4000-8000-000000000001", ragione_sociale="Acme Srl")
        assert client.id == "aaaaaaaa-0000-4000-8000-000000000001"

    def test_attivo_defaults_to_true(self, test_db):
        session = test_db()
        client = Client(ragione_sociale="Acme Srl")
        session.add(client)
        session.commit()
        assert client.attivo is True

    def test_to_dict_keeps_calendar_dates(self, test_db):
        session = test_db()
        person = Personnel(nome="Mario", cognome="Rossi", data_nascita=date(1980, 5, 17))
        session.add(person)
        session.commit()

        data = person.to_dict()
        assert data["data_nascita"] == date(1980, 5, 17)
        assert isinstance(data["created_at"], str)
        assert data["nome"] == "Mario"

    def test_update_from_dict_leaves_absent_columns(self, test_db, sample_client):
        sample_client.update_from_dict({"telefono": "111"})
        assert sample_client.telefono == "111"
        assert sample_client.partita_iva == "01234567890"

    def test_update_from_dict_never_changes_id(self, sample_client):
        original_id = sample_client.id
        sample_client.update_from_dict({"id": "something-else", "email": "info@acme.it"})
        assert sample_client.id == original_id
        assert sample_client.email == "info@acme.it"

    def test_repr(self):
        client = Client(ragione_sociale="Acme Srl")
        assert "Acme Srl" in repr(client)


class TestModelRegistry:
    """Tests for MODELS_BY_KIND."""

    def test_every_kind_has_a_model(self):
        assert set(MODELS_BY_KIND) == set(RecordKind)

    def test_table_names_match_kinds(self):
        for kind, model in MODELS_BY_KIND.items():
            assert model.__tablename__ == kind.value


class TestConstraints:
    """Storage-level constraints surface as IntegrityError."""

    def test_client_name_is_unique(self, test_db, sample_client):
        session = test_db()
        session.add(Client(ragione_sociale="Acme Srl"))
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()

    def test_service_point_client_must_exist(self, test_db):
        session = test_db()
        session.add(
            ServicePoint(
                nome_punto_servizio="Orfano",
                id_cliente="ffffffff-ffff-4fff-8fff-ffffffffffff",
            )
        )
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()

    def test_contact_requires_parent(self, test_db):
        session = test_db()
        session.add(ClientContact(tipo_recapito="Amministrazione", client_id=None))
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()

    def test_rate_amount_required(self, test_db):
        session = test_db()
        session.add(Rate(tipo_servizio="Ronda"))
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()

    def test_rate_persists_with_references(self, test_db, sample_client):
        session = test_db()
        rate = Rate(
            client_id=sample_client.id,
            tipo_servizio="Ronda",
            importo=21.5,
            data_inizio_validita=date(2024, 1, 1),
        )
        session.add(rate)
        session.commit()

        stored = session.query(Rate).filter_by(tipo_servizio="Ronda").one()
        assert stored.importo == 21.5
        assert stored.client_id == sample_client.id
        assert RecordKind(stored.__tablename__) == RecordKind.RATES
