"""
Enumerations for anagraphic record import.

This module contains enums used across models and import services:
- RecordKind: The closed set of importable record kinds (one per table)
- RowStatus: Classification outcome of one imported row
"""

from enum import Enum


class RecordKind(str, Enum):
    """
    Importable anagraphic record kinds.

    Each value is the name of the storage table holding records of
    that kind, so a kind can be used wherever a table name is expected.

    Values:
        CLIENTS: Client companies
        SUPPLIERS: Subcontracted security suppliers
        PERSONNEL: Internal staff
        SERVICE_POINTS: Guarded sites, owned by a client
        NETWORK_OPERATORS: External operators attached to a client
        PROCEDURES: Operating procedures
        RATES: Price list entries
        SERVICE_POINT_CONTACTS: Directory entries for a service point
        CLIENT_CONTACTS: Directory entries for a client
        SUPPLIER_CONTACTS: Directory entries for a supplier
    """

    CLIENTS = "clienti"
    SUPPLIERS = "fornitori"
    PERSONNEL = "personale"
    SERVICE_POINTS = "punti_servizio"
    NETWORK_OPERATORS = "operatori_network"
    PROCEDURES = "procedure"
    RATES = "tariffe"
    SERVICE_POINT_CONTACTS = "rubrica_punti_servizio"
    CLIENT_CONTACTS = "rubrica_clienti"
    SUPPLIER_CONTACTS = "rubrica_fornitori"


class RowStatus(str, Enum):
    """
    Outcome of processing one import row.

    Values:
        NEW: No stored record matches; will be inserted
        UPDATE: A stored record matches and at least one field differs
        DUPLICATE: A stored record matches and no field differs
        ERROR: The row could not be mapped (missing field, unresolved code)
        INVALID_FK: A populated foreign key points to no stored record
    """

    NEW = "NEW"
    UPDATE = "UPDATE"
    DUPLICATE = "DUPLICATE"
    ERROR = "ERROR"
    INVALID_FK = "INVALID_FK"

    @property
    def is_error(self) -> bool:
        """True for statuses that block writing the row."""
        return self in (RowStatus.ERROR, RowStatus.INVALID_FK)
