"""
Database models package.

This package contains the SQLAlchemy ORM models for every importable
anagraphic record kind, plus the registry mapping each RecordKind to
its model class.
"""

from typing import Dict, Type

from .base import Base, BaseModel
from .enums import RecordKind, RowStatus
from .client import Client
from .supplier import Supplier
from .personnel import Personnel
from .service_point import ServicePoint
from .network_operator import NetworkOperator
from .procedure import Procedure
from .rate import Rate
from .contact import ClientContact, ServicePointContact, SupplierContact

MODELS_BY_KIND: Dict[RecordKind, Type[BaseModel]] = {
    RecordKind.CLIENTS: Client,
    RecordKind.SUPPLIERS: Supplier,
    RecordKind.PERSONNEL: Personnel,
    RecordKind.SERVICE_POINTS: ServicePoint,
    RecordKind.NETWORK_OPERATORS: NetworkOperator,
    RecordKind.PROCEDURES: Procedure,
    RecordKind.RATES: Rate,
    RecordKind.SERVICE_POINT_CONTACTS: ServicePointContact,
    RecordKind.CLIENT_CONTACTS: ClientContact,
    RecordKind.SUPPLIER_CONTACTS: SupplierContact,
}

if set(MODELS_BY_KIND) != set(RecordKind):
    raise RuntimeError("every RecordKind needs a model")

__all__ = [
    "Base",
    "BaseModel",
    "RecordKind",
    "RowStatus",
    "Client",
    "Supplier",
    "Personnel",
    "ServicePoint",
    "NetworkOperator",
    "Procedure",
    "Rate",
    "ServicePointContact",
    "ClientContact",
    "SupplierContact",
    "MODELS_BY_KIND",
]
