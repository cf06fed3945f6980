"""
Directory entry models (rubrica) for clients, suppliers and service points.

The three directories share the same contact columns and differ only in
the parent record they hang off.
"""

from sqlalchemy import Column, String, Text, ForeignKey

from .base import BaseModel


class ContactColumnsMixin:
    """Contact columns shared by every directory."""

    tipo_recapito = Column(String(100), nullable=False)
    nome_persona = Column(String(255), nullable=True)
    telefono_fisso = Column(String(50), nullable=True)
    telefono_cellulare = Column(String(50), nullable=True)
    email_recapito = Column(String(255), nullable=True)
    note = Column(Text, nullable=True)


class ServicePointContact(ContactColumnsMixin, BaseModel):
    """Directory entry for a service point."""

    __tablename__ = "rubrica_punti_servizio"

    punto_servizio_id = Column(String(36), ForeignKey("punti_servizio.id"), nullable=False)


class ClientContact(ContactColumnsMixin, BaseModel):
    """Directory entry for a client."""

    __tablename__ = "rubrica_clienti"

    client_id = Column(String(36), ForeignKey("clienti.id"), nullable=False)


class SupplierContact(ContactColumnsMixin, BaseModel):
    """Directory entry for a supplier."""

    __tablename__ = "rubrica_fornitori"

    fornitore_id = Column(String(36), ForeignKey("fornitori.id"), nullable=False)
