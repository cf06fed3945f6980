"""
Personnel model for internal staff (guards, operators, office staff).
"""

from sqlalchemy import Column, String, Boolean, Text, Date, Index

from .base import BaseModel


class Personnel(BaseModel):
    """
    Staff member (personale) anagraphic record.

    Attributes:
        nome, cognome: First and last name
        codice_fiscale: Italian tax code, unique when present
        ruolo: Job role
        telefono, email: Contacts
        data_nascita, luogo_nascita: Date and place of birth
        indirizzo, cap, citta, provincia: Home address
        data_assunzione, data_cessazione: Hire and termination dates
        attivo: Active flag (defaults to True)
        note: Free-form notes
    """

    __tablename__ = "personale"

    nome = Column(String(100), nullable=False)
    cognome = Column(String(100), nullable=False)
    codice_fiscale = Column(String(32), nullable=True, unique=True)
    ruolo = Column(String(100), nullable=True)
    telefono = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    data_nascita = Column(Date, nullable=True)
    luogo_nascita = Column(String(100), nullable=True)
    indirizzo = Column(String(255), nullable=True)
    cap = Column(String(10), nullable=True)
    citta = Column(String(100), nullable=True)
    provincia = Column(String(10), nullable=True)
    data_assunzione = Column(Date, nullable=True)
    data_cessazione = Column(Date, nullable=True)
    attivo = Column(Boolean, nullable=False, default=True)
    note = Column(Text, nullable=True)

    __table_args__ = (Index("idx_personale_nome_cognome", "nome", "cognome"),)

    @property
    def full_name(self) -> str:
        return f"{self.nome} {self.cognome}"

    def __repr__(self) -> str:
        return f"Personnel(id={self.id!r}, nome={self.nome!r}, cognome={self.cognome!r})"
