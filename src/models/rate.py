"""
Rate model for price list entries.

A rate prices one service type for a client, optionally narrowed to a
service point or a supplier.
"""

from sqlalchemy import Column, String, Float, Text, Date, ForeignKey, CheckConstraint

from .base import BaseModel


class Rate(BaseModel):
    """
    Rate (tariffa) anagraphic record.

    Attributes:
        client_id: Client the rate applies to (FK clienti.id)
        tipo_servizio: Service type (e.g. "PIANTONAMENTO_ARMATO")
        importo: Price charged to the client
        supplier_rate: Cost paid to the supplier
        unita_misura: Unit of measure (e.g. "ora")
        punto_servizio_id: Service point (FK punti_servizio.id)
        fornitore_id: Supplier (FK fornitori.id)
        data_inizio_validita, data_fine_validita: Validity window
        note: Free-form notes
    """

    __tablename__ = "tariffe"

    client_id = Column(String(36), ForeignKey("clienti.id"), nullable=True)
    tipo_servizio = Column(String(100), nullable=False)
    importo = Column(Float, nullable=False)
    supplier_rate = Column(Float, nullable=True)
    unita_misura = Column(String(50), nullable=True)
    punto_servizio_id = Column(String(36), ForeignKey("punti_servizio.id"), nullable=True)
    fornitore_id = Column(String(36), ForeignKey("fornitori.id"), nullable=True)
    data_inizio_validita = Column(Date, nullable=True)
    data_fine_validita = Column(Date, nullable=True)
    note = Column(Text, nullable=True)

    __table_args__ = (CheckConstraint("importo >= 0", name="ck_tariffe_importo_non_negative"),)

    def __repr__(self) -> str:
        return f"Rate(id={self.id!r}, tipo_servizio={self.tipo_servizio!r}, importo={self.importo!r})"
