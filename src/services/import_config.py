"""
Per-kind import configuration: natural-key sets and foreign keys.

Each RecordKind has one KindConfig listing:
- key_sets: groups of canonical fields whose combined values identify a
  stored record. Order is significant - earlier key-sets win when a row
  satisfies several.
- foreign_keys: (field, referenced kind) pairs, checked in order.

Usage:
    from src.services.import_config import get_kind_config

    config = get_kind_config(RecordKind.SERVICE_POINTS)
    config.key_sets[0]          # ("nome_punto_servizio", "id_cliente")
    config.referenced_kinds     # (RecordKind.CLIENTS, RecordKind.SUPPLIERS)
"""

from dataclasses import dataclass
from typing import Dict, Tuple, Union

from src.models.enums import RecordKind
from src.services.exceptions import UnknownRecordKind

KeySet = Tuple[str, ...]


@dataclass(frozen=True)
class ForeignKeyRef:
    """A canonical field holding the identifier of another kind's record."""

    field: str
    references: RecordKind


@dataclass(frozen=True)
class KindConfig:
    """Static de-duplication and reference configuration for one kind."""

    kind: RecordKind
    key_sets: Tuple[KeySet, ...] = ()
    foreign_keys: Tuple[ForeignKeyRef, ...] = ()

    @property
    def referenced_kinds(self) -> Tuple[RecordKind, ...]:
        """Distinct referenced kinds, in first-mention order."""
        seen = []
        for fk in self.foreign_keys:
            if fk.references not in seen:
                seen.append(fk.references)
        return tuple(seen)


KIND_CONFIGS: Dict[RecordKind, KindConfig] = {
    RecordKind.CLIENTS: KindConfig(
        kind=RecordKind.CLIENTS,
        key_sets=(
            ("ragione_sociale",),
            ("partita_iva",),
            ("codice_fiscale",),
            ("codice_cliente_custom",),
        ),
    ),
    RecordKind.SUPPLIERS: KindConfig(
        kind=RecordKind.SUPPLIERS,
        key_sets=(
            ("ragione_sociale",),
            ("partita_iva",),
            ("codice_fiscale",),
            ("codice_cliente_associato",),
        ),
    ),
    RecordKind.PERSONNEL: KindConfig(
        kind=RecordKind.PERSONNEL,
        key_sets=(
            ("nome", "cognome"),
            ("codice_fiscale",),
            ("email",),
        ),
    ),
    RecordKind.SERVICE_POINTS: KindConfig(
        kind=RecordKind.SERVICE_POINTS,
        key_sets=(
            ("nome_punto_servizio", "id_cliente"),
            ("nome_punto_servizio",),
            ("codice_cliente",),
            ("codice_sicep",),
            ("codice_fatturazione",),
        ),
        foreign_keys=(
            ForeignKeyRef("id_cliente", RecordKind.CLIENTS),
            ForeignKeyRef("fornitore_id", RecordKind.SUPPLIERS),
        ),
    ),
    RecordKind.NETWORK_OPERATORS: KindConfig(
        kind=RecordKind.NETWORK_OPERATORS,
        key_sets=(
            ("nome", "cognome", "cliente_id"),
            ("email",),
        ),
        foreign_keys=(ForeignKeyRef("cliente_id", RecordKind.CLIENTS),),
    ),
    RecordKind.PROCEDURES: KindConfig(
        kind=RecordKind.PROCEDURES,
        key_sets=(("nome_procedura",),),
    ),
    RecordKind.RATES: KindConfig(
        kind=RecordKind.RATES,
        key_sets=(
            ("client_id", "tipo_servizio", "punto_servizio_id"),
            ("client_id", "tipo_servizio", "fornitore_id"),
        ),
        foreign_keys=(
            ForeignKeyRef("client_id", RecordKind.CLIENTS),
            ForeignKeyRef("punto_servizio_id", RecordKind.SERVICE_POINTS),
            ForeignKeyRef("fornitore_id", RecordKind.SUPPLIERS),
        ),
    ),
    RecordKind.SERVICE_POINT_CONTACTS: KindConfig(
        kind=RecordKind.SERVICE_POINT_CONTACTS,
        key_sets=(("punto_servizio_id", "tipo_recapito"),),
        foreign_keys=(ForeignKeyRef("punto_servizio_id", RecordKind.SERVICE_POINTS),),
    ),
    RecordKind.CLIENT_CONTACTS: KindConfig(
        kind=RecordKind.CLIENT_CONTACTS,
        key_sets=(("client_id", "tipo_recapito"),),
        foreign_keys=(ForeignKeyRef("client_id", RecordKind.CLIENTS),),
    ),
    RecordKind.SUPPLIER_CONTACTS: KindConfig(
        kind=RecordKind.SUPPLIER_CONTACTS,
        key_sets=(("fornitore_id", "tipo_recapito"),),
        foreign_keys=(ForeignKeyRef("fornitore_id", RecordKind.SUPPLIERS),),
    ),
}

if set(KIND_CONFIGS) != set(RecordKind):
    raise RuntimeError("every RecordKind needs a KindConfig")


def parse_record_kind(value: Union[str, RecordKind]) -> RecordKind:
    """
    Resolve a record kind from its table name or enum member name.

    Args:
        value: A RecordKind, a table name ("clienti") or a member name ("CLIENTS")

    Returns:
        The matching RecordKind

    Raises:
        UnknownRecordKind: If the value names no supported kind
    """
    if isinstance(value, RecordKind):
        return value
    if not isinstance(value, str):
        raise UnknownRecordKind(value)
    text = value.strip()
    try:
        return RecordKind(text.lower())
    except ValueError:
        pass
    try:
        return RecordKind[text.upper()]
    except KeyError:
        raise UnknownRecordKind(value) from None


def get_kind_config(kind: Union[str, RecordKind]) -> KindConfig:
    """Return the static configuration for a record kind."""
    return KIND_CONFIGS[parse_record_kind(kind)]
