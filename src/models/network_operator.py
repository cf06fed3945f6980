"""
Network operator model for external operators attached to a client.
"""

from sqlalchemy import Column, String, Text, ForeignKey

from .base import BaseModel


class NetworkOperator(BaseModel):
    """
    Network operator (operatore network) anagraphic record.

    Attributes:
        nome, cognome: First and last name
        cliente_id: Client the operator works for (FK clienti.id)
        telefono, email: Contacts
        note: Free-form notes
    """

    __tablename__ = "operatori_network"

    nome = Column(String(100), nullable=False)
    cognome = Column(String(100), nullable=False)
    cliente_id = Column(String(36), ForeignKey("clienti.id"), nullable=True)
    telefono = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    note = Column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"NetworkOperator(id={self.id!r}, nome={self.nome!r}, cognome={self.cognome!r})"
