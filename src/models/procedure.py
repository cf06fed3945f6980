"""
Procedure model for documented operating procedures.
"""

from sqlalchemy import Column, String, Boolean, Text, Date

from .base import BaseModel


class Procedure(BaseModel):
    """
    Operating procedure (procedura) anagraphic record.

    Attributes:
        nome_procedura: Procedure name, unique
        descrizione: Description
        versione: Document version
        data_ultima_revisione: Date of last revision
        responsabile: Owner
        documento_url: Link to the procedure document
        attivo: Active flag (defaults to True)
        note: Free-form notes
    """

    __tablename__ = "procedure"

    nome_procedura = Column(String(255), nullable=False, unique=True)
    descrizione = Column(Text, nullable=True)
    versione = Column(String(50), nullable=True)
    data_ultima_revisione = Column(Date, nullable=True)
    responsabile = Column(String(255), nullable=True)
    documento_url = Column(String(500), nullable=True)
    attivo = Column(Boolean, nullable=False, default=True)
    note = Column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"Procedure(id={self.id!r}, nome_procedura={self.nome_procedura!r})"
