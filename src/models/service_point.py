"""
Service point model for guarded sites.

A service point belongs to a client and may be covered by a supplier.
"""

from sqlalchemy import Column, String, Float, Text, ForeignKey, Index

from .base import BaseModel


class ServicePoint(BaseModel):
    """
    Service point (punto servizio) anagraphic record.

    Attributes:
        nome_punto_servizio: Site name
        id_cliente: Owning client (FK clienti.id)
        fornitore_id: Covering supplier (FK fornitori.id)
        indirizzo, citta, cap, provincia: Site address
        referente, telefono_referente: On-site contact person
        telefono, email: Site contacts
        tempo_intervento: Agreed response time
        codice_cliente, codice_sicep, codice_fatturazione: External codes
        latitude, longitude: Coordinates
        nome_procedura: Operating procedure name
        note: Free-form notes
    """

    __tablename__ = "punti_servizio"

    nome_punto_servizio = Column(String(255), nullable=False)
    id_cliente = Column(String(36), ForeignKey("clienti.id"), nullable=True)
    indirizzo = Column(String(255), nullable=True)
    citta = Column(String(100), nullable=True)
    cap = Column(String(10), nullable=True)
    provincia = Column(String(10), nullable=True)
    referente = Column(String(255), nullable=True)
    telefono_referente = Column(String(50), nullable=True)
    telefono = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    note = Column(Text, nullable=True)
    tempo_intervento = Column(String(50), nullable=True)
    fornitore_id = Column(String(36), ForeignKey("fornitori.id"), nullable=True)
    codice_cliente = Column(String(64), nullable=True)
    codice_sicep = Column(String(64), nullable=True)
    codice_fatturazione = Column(String(64), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    nome_procedura = Column(String(255), nullable=True)

    __table_args__ = (
        Index("idx_punti_servizio_cliente", "id_cliente"),
        Index("idx_punti_servizio_nome", "nome_punto_servizio"),
    )

    def __repr__(self) -> str:
        return f"ServicePoint(id={self.id!r}, nome_punto_servizio={self.nome_punto_servizio!r})"
