"""Pytest configuration and fixtures for service layer tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session

import src.models  # noqa: F401  (registers every model with Base)
import src.services.database as db_module
from src.models.base import Base
from src.utils.config import reset_config


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Creates all tables
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    # Create in-memory SQLite database for testing
    engine = create_engine("sqlite:///:memory:", echo=False)

    # Create all tables
    Base.metadata.create_all(engine)

    # Create session factory
    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    # Provide database to test
    yield Session

    # Cleanup
    Session.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()

    # Restore original session factory
    db_module.get_session_factory = original_get_session


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate every test from ANAGRAFICHE_* variables and the config singleton."""
    for name in ("ANAGRAFICHE_ENV", "ANAGRAFICHE_DATABASE_URL", "ANAGRAFICHE_MAX_REPORTED_ERRORS"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture(scope="function")
def sample_client(test_db):
    """Provide a stored client "Acme Srl" with a manual client code."""
    from src.models import Client

    session = test_db()
    client = Client(
        ragione_sociale="Acme Srl",
        partita_iva="01234567890",
        telefono="000",
        citta="Milano",
        codice_cliente_custom="CL-001",
    )
    session.add(client)
    session.commit()
    return client


@pytest.fixture(scope="function")
def sample_supplier(test_db):
    """Provide a stored supplier "Vigilanza Nord Spa" with a manual supplier code."""
    from src.models import Supplier

    session = test_db()
    supplier = Supplier(
        ragione_sociale="Vigilanza Nord Spa",
        partita_iva="09876543210",
        codice_cliente_associato="FO-001",
    )
    session.add(supplier)
    session.commit()
    return supplier


@pytest.fixture(scope="function")
def sample_service_point(test_db, sample_client, sample_supplier):
    """Provide a stored service point owned by sample_client."""
    from src.models import ServicePoint

    session = test_db()
    service_point = ServicePoint(
        nome_punto_servizio="Magazzino Centrale",
        id_cliente=sample_client.id,
        fornitore_id=sample_supplier.id,
        citta="Milano",
        latitude=45.4642,
        longitude=9.19,
    )
    session.add(service_point)
    session.commit()
    return service_point
