"""
Client model for the companies that buy security services.

Example: "Acme Srl", VAT number 01234567890, with a manually assigned
         client code used by other imports to reference it.
"""

from sqlalchemy import Column, String, Boolean, Text, Index

from .base import BaseModel


class Client(BaseModel):
    """
    Client (cliente) anagraphic record.

    Attributes:
        ragione_sociale: Registered company name, unique
        codice_fiscale: Italian tax code
        partita_iva: VAT number
        indirizzo, citta, cap, provincia: Postal address
        telefono, email, pec: Contacts (pec is certified e-mail)
        sdi: E-invoicing recipient code
        attivo: Active flag (defaults to True)
        note: Free-form notes
        codice_cliente_custom: Manually assigned client code
    """

    __tablename__ = "clienti"

    ragione_sociale = Column(String(255), nullable=False, unique=True)
    codice_fiscale = Column(String(32), nullable=True)
    partita_iva = Column(String(32), nullable=True)
    indirizzo = Column(String(255), nullable=True)
    citta = Column(String(100), nullable=True)
    cap = Column(String(10), nullable=True)
    provincia = Column(String(10), nullable=True)
    telefono = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    pec = Column(String(255), nullable=True)
    sdi = Column(String(16), nullable=True)
    attivo = Column(Boolean, nullable=False, default=True)
    note = Column(Text, nullable=True)
    codice_cliente_custom = Column(String(64), nullable=True)

    __table_args__ = (
        Index("idx_clienti_partita_iva", "partita_iva"),
        Index("idx_clienti_codice_cliente_custom", "codice_cliente_custom"),
    )

    def __repr__(self) -> str:
        return f"Client(id={self.id!r}, ragione_sociale={self.ragione_sociale!r})"
