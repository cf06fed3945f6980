"""
Supplier model for subcontracted security providers.

Suppliers are referenced by service points and rates, either by their
identifier or by their manually assigned supplier code.
"""

from sqlalchemy import Column, String, Boolean, Text, Index

from .base import BaseModel


class Supplier(BaseModel):
    """
    Supplier (fornitore) anagraphic record.

    Attributes:
        ragione_sociale: Registered company name, unique
        partita_iva: VAT number
        codice_fiscale: Italian tax code
        indirizzo, citta, cap, provincia: Postal address
        telefono, email, pec: Contacts
        tipo_servizio: Kind of service the supplier provides
        attivo: Active flag (defaults to True)
        note: Free-form notes
        codice_cliente_associato: Manually assigned supplier code
    """

    __tablename__ = "fornitori"

    ragione_sociale = Column(String(255), nullable=False, unique=True)
    partita_iva = Column(String(32), nullable=True)
    codice_fiscale = Column(String(32), nullable=True)
    indirizzo = Column(String(255), nullable=True)
    cap = Column(String(10), nullable=True)
    citta = Column(String(100), nullable=True)
    provincia = Column(String(10), nullable=True)
    telefono = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    pec = Column(String(255), nullable=True)
    tipo_servizio = Column(String(100), nullable=True)
    attivo = Column(Boolean, nullable=False, default=True)
    note = Column(Text, nullable=True)
    codice_cliente_associato = Column(String(64), nullable=True)

    __table_args__ = (
        Index("idx_fornitori_partita_iva", "partita_iva"),
        Index("idx_fornitori_codice_cliente_associato", "codice_cliente_associato"),
    )

    def __repr__(self) -> str:
        return f"Supplier(id={self.id!r}, ragione_sociale={self.ragione_sociale!r})"
