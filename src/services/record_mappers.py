"""
Record Mappers - convert raw spreadsheet rows into canonical records.

Each RecordKind declares its fields as an ordered tuple of FieldSpec
entries. The first header of a field is its canonical column label (the
one written in templates and exports); the others are accepted
alternate spellings (snake_case, camelCase, older template variants).

A mapper takes one raw row, and optionally a StorageAccessor for
natural-key lookups, and returns a dictionary keyed by canonical field
name. It raises an ImportRowError subclass when the row cannot be mapped.

Usage:
    from src.services.record_mappers import map_row

    record = map_row(RecordKind.CLIENTS, {"Ragione Sociale": "Acme Srl"})
    # {"ragione_sociale": "Acme Srl", "codice_fiscale": None, ...}
"""

from typing import Any, Callable, Dict, Mapping, NamedTuple, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from src.models.enums import RecordKind
from src.services.exceptions import MissingRequiredField, ReferenceLookupFailure, ReferenceNotFound
from src.services.field_mapping import (
    Converter,
    get_field_value,
    is_blank,
    to_boolean,
    to_date,
    to_identifier,
    to_number,
    to_string,
)
from src.services.import_config import parse_record_kind

Record = Dict[str, Any]
RawRow = Mapping[str, Any]


class FieldSpec(NamedTuple):
    """One canonical field: its name, accepted headers and coercion."""

    name: str
    headers: Tuple[str, ...]
    converter: Converter

    @property
    def label(self) -> str:
        """Canonical column label used in templates and exports."""
        return self.headers[0]


def _field(name: str, *headers: str, converter: Converter = to_string) -> FieldSpec:
    return FieldSpec(name, headers, converter)


# Boolean columns with a NOT NULL storage default; omitted when absent
DEFAULTED_FIELDS = ("attivo",)

_ATTIVO = _field("attivo", "Attivo", "attivo", "Attivo (TRUE/FALSE)", converter=to_boolean)
_NOTE = _field("note", "Note", "note")

_ADDRESS = (
    _field("indirizzo", "Indirizzo", "indirizzo"),
    _field("citta", "Città", "citta"),
    _field("cap", "CAP", "cap"),
    _field("provincia", "Provincia", "provincia"),
)

_CLIENT_ID = ("ID Cliente", "client_id", "clientId", "ID Cliente (UUID)")
_SUPPLIER_ID = ("ID Fornitore", "fornitore_id", "fornitoreId", "ID Fornitore (UUID)")
_SERVICE_POINT_ID = (
    "ID Punto Servizio",
    "punto_servizio_id",
    "puntoServizioId",
    "ID Punto Servizio (UUID)",
)

# Natural-key headers resolved through storage, not stored on the row itself
CLIENT_CODE_HEADERS = ("Codice Cliente Manuale", "codice_cliente_custom", "codiceClienteCustom")
SUPPLIER_CODE_HEADERS = (
    "Codice Fornitore Manuale",
    "codice_cliente_associato",
    "codiceClienteAssociato",
)

_CONTACT_FIELDS = (
    _field("tipo_recapito", "Tipo Recapito", "tipo_recapito", "tipoRecapito"),
    _field("nome_persona", "Nome Persona", "nome_persona", "nomePersona"),
    _field("telefono_fisso", "Telefono Fisso", "telefono_fisso", "telefonoFisso"),
    _field("telefono_cellulare", "Telefono Cellulare", "telefono_cellulare", "telefonoCellulare"),
    _field("email_recapito", "Email Recapito", "email_recapito", "emailRecapito"),
    _NOTE,
)


FIELD_SPECS: Dict[RecordKind, Tuple[FieldSpec, ...]] = {
    RecordKind.CLIENTS: (
        _field("ragione_sociale", "Ragione Sociale", "ragione_sociale", "ragioneSociale"),
        _field("codice_fiscale", "Codice Fiscale", "codice_fiscale", "codiceFiscale"),
        _field("partita_iva", "Partita IVA", "partita_iva", "partitaIva"),
        *_ADDRESS,
        _field("telefono", "Telefono", "telefono"),
        _field("email", "Email", "email"),
        _field("pec", "PEC", "pec"),
        _field("sdi", "SDI", "sdi"),
        _ATTIVO,
        _NOTE,
        _field("codice_cliente_custom", *CLIENT_CODE_HEADERS),
    ),
    RecordKind.SUPPLIERS: (
        _field("ragione_sociale", "Ragione Sociale", "ragione_sociale", "ragioneSociale"),
        _field("codice_fiscale", "Codice Fiscale", "codice_fiscale", "codiceFiscale"),
        _field("partita_iva", "Partita IVA", "partita_iva", "partitaIva"),
        *_ADDRESS,
        _field("telefono", "Telefono", "telefono"),
        _field("email", "Email", "email"),
        _field("pec", "PEC", "pec"),
        _field("tipo_servizio", "Tipo Servizio", "tipo_servizio", "tipoServizio"),
        _ATTIVO,
        _NOTE,
        _field("codice_cliente_associato", *SUPPLIER_CODE_HEADERS),
    ),
    RecordKind.PERSONNEL: (
        _field("nome", "Nome", "nome"),
        _field("cognome", "Cognome", "cognome"),
        _field("codice_fiscale", "Codice Fiscale", "codice_fiscale", "codiceFiscale"),
        _field("ruolo", "Ruolo", "ruolo"),
        _field("telefono", "Telefono", "telefono"),
        _field("email", "Email", "email"),
        _field(
            "data_nascita",
            "Data Nascita",
            "data_nascita",
            "dataNascita",
            "Data Nascita (YYYY-MM-DD)",
            converter=to_date,
        ),
        _field("luogo_nascita", "Luogo Nascita", "luogo_nascita", "luogoNascita"),
        *_ADDRESS,
        _field(
            "data_assunzione",
            "Data Assunzione",
            "data_assunzione",
            "dataAssunzione",
            "Data Assunzione (YYYY-MM-DD)",
            converter=to_date,
        ),
        _field(
            "data_cessazione",
            "Data Cessazione",
            "data_cessazione",
            "dataCessazione",
            "Data Cessazione (YYYY-MM-DD)",
            converter=to_date,
        ),
        _ATTIVO,
        _NOTE,
    ),
    RecordKind.SERVICE_POINTS: (
        _field(
            "nome_punto_servizio", "Nome Punto Servizio", "nome_punto_servizio", "nomePuntoServizio"
        ),
        _field(
            "id_cliente",
            "ID Cliente",
            "id_cliente",
            "idCliente",
            "ID Cliente (UUID)",
            converter=to_identifier,
        ),
        *_ADDRESS,
        _field("referente", "Referente", "referente"),
        _field(
            "telefono_referente", "Telefono Referente", "telefono_referente", "telefonoReferente"
        ),
        _field("telefono", "Telefono", "telefono"),
        _field("email", "Email", "email"),
        _NOTE,
        _field("tempo_intervento", "Tempo Intervento", "tempo_intervento", "tempoIntervento"),
        _field("fornitore_id", *_SUPPLIER_ID, converter=to_identifier),
        _field("codice_cliente", "Codice Cliente", "codice_cliente", "codiceCliente"),
        _field("codice_sicep", "Codice SICEP", "codice_sicep", "codiceSicep"),
        _field(
            "codice_fatturazione", "Codice Fatturazione", "codice_fatturazione", "codiceFatturazione"
        ),
        _field("latitude", "Latitudine", "latitude", converter=to_number),
        _field("longitude", "Longitudine", "longitude", converter=to_number),
        _field("nome_procedura", "Nome Procedura", "nome_procedura", "nomeProcedura"),
    ),
    RecordKind.NETWORK_OPERATORS: (
        _field("nome", "Nome", "nome"),
        _field("cognome", "Cognome", "cognome"),
        _field(
            "cliente_id",
            "ID Cliente",
            "id_cliente",
            "idCliente",
            "ID Cliente (UUID)",
            converter=to_identifier,
        ),
        _field("telefono", "Telefono", "telefono"),
        _field("email", "Email", "email"),
        _NOTE,
    ),
    RecordKind.PROCEDURES: (
        _field("nome_procedura", "Nome Procedura", "nome_procedura", "nomeProcedura"),
        _field("descrizione", "Descrizione", "descrizione"),
        _field("versione", "Versione", "versione"),
        _field(
            "data_ultima_revisione",
            "Data Ultima Revisione",
            "data_ultima_revisione",
            "dataUltimaRevisione",
            "Data Ultima Revisione (YYYY-MM-DD)",
            converter=to_date,
        ),
        _field("responsabile", "Responsabile", "responsabile"),
        _field("documento_url", "URL Documento", "documento_url", "documentoUrl"),
        _ATTIVO,
        _NOTE,
    ),
    RecordKind.RATES: (
        _field("client_id", *_CLIENT_ID, converter=to_identifier),
        _field("tipo_servizio", "Tipo Servizio", "tipo_servizio", "tipoServizio"),
        _field("importo", "Importo", "importo", converter=to_number),
        _field("supplier_rate", "Costo Fornitore", "supplier_rate", "supplierRate", converter=to_number),
        _field("unita_misura", "Unità di Misura", "unita_misura", "unitaMisura"),
        _field("punto_servizio_id", *_SERVICE_POINT_ID, converter=to_identifier),
        _field("fornitore_id", *_SUPPLIER_ID, converter=to_identifier),
        _field(
            "data_inizio_validita",
            "Data Inizio Validità",
            "data_inizio_validita",
            "dataInizioValidita",
            "Data Inizio Validità (YYYY-MM-DD)",
            converter=to_date,
        ),
        _field(
            "data_fine_validita",
            "Data Fine Validità",
            "data_fine_validita",
            "dataFineValidita",
            "Data Fine Validità (YYYY-MM-DD)",
            converter=to_date,
        ),
        _NOTE,
    ),
    RecordKind.SERVICE_POINT_CONTACTS: (
        _field("punto_servizio_id", *_SERVICE_POINT_ID, converter=to_identifier),
        *_CONTACT_FIELDS,
    ),
    RecordKind.CLIENT_CONTACTS: (
        _field("client_id", *_CLIENT_ID, converter=to_identifier),
        *_CONTACT_FIELDS,
    ),
    RecordKind.SUPPLIER_CONTACTS: (
        _field("fornitore_id", *_SUPPLIER_ID, converter=to_identifier),
        *_CONTACT_FIELDS,
    ),
}

if set(FIELD_SPECS) != set(RecordKind):
    raise RuntimeError("every RecordKind needs field specs")


def get_field_specs(kind) -> Tuple[FieldSpec, ...]:
    """Return the ordered field specs of a kind."""
    return FIELD_SPECS[parse_record_kind(kind)]


def get_field_label(kind, field: str) -> str:
    """Return the canonical column label of a field (the field name if unknown)."""
    for spec in get_field_specs(kind):
        if spec.name == field:
            return spec.label
    return field


def _map_fields(kind: RecordKind, row: RawRow) -> Record:
    record = {}
    for spec in FIELD_SPECS[kind]:
        record[spec.name] = get_field_value(row, spec.headers, spec.converter)
    for name in DEFAULTED_FIELDS:
        if name in record and record[name] is None:
            del record[name]
    return record


def _require(kind: RecordKind, record: Record, *fields: str) -> None:
    for name in fields:
        if is_blank(record.get(name)):
            raise MissingRequiredField(name, get_field_label(kind, name))


def _resolve_by_code(
    row: RawRow,
    headers: Tuple[str, ...],
    target: RecordKind,
    target_field: str,
    accessor,
) -> Optional[str]:
    """
    Resolve a manually assigned code to the identifier of a stored record.

    Returns:
        The identifier, or None when the row carries no code

    Raises:
        ReferenceNotFound: If the code matches no stored record, or more than one
        ReferenceLookupFailure: If storage fails during the lookup
    """
    code = get_field_value(row, headers, to_string)
    if code is None:
        return None
    if accessor is None:
        raise ReferenceNotFound(code, target.value, target_field)
    try:
        matches = accessor.select_by_field(target, target_field, code, limit=2)
    except SQLAlchemyError as e:
        accessor.rollback()
        raise ReferenceLookupFailure(code, target.value, e) from e
    if not matches:
        raise ReferenceNotFound(code, target.value, target_field)
    if len(matches) > 1:
        raise ReferenceNotFound(code, target.value, target_field, ambiguous=True)
    return matches[0]["id"]


def _in_range(value: Optional[float], limit: float) -> bool:
    return value is not None and abs(value) <= limit


# ============================================================================
# Per-kind mappers
# ============================================================================


def map_client(row: RawRow, accessor=None) -> Record:
    record = _map_fields(RecordKind.CLIENTS, row)
    _require(RecordKind.CLIENTS, record, "ragione_sociale")
    return record


def map_supplier(row: RawRow, accessor=None) -> Record:
    record = _map_fields(RecordKind.SUPPLIERS, row)
    _require(RecordKind.SUPPLIERS, record, "ragione_sociale")
    return record


def map_personnel(row: RawRow, accessor=None) -> Record:
    record = _map_fields(RecordKind.PERSONNEL, row)
    _require(RecordKind.PERSONNEL, record, "nome", "cognome")
    return record


def map_service_point(row: RawRow, accessor=None) -> Record:
    """
    Map a service point row.

    When the client or supplier identifier is absent or malformed, the
    manually assigned client code ("Codice Cliente Manuale") or supplier
    code ("Codice Fornitore Manuale") is looked up through the accessor.

    Older exports shifted coordinates one column to the left: when both
    coordinates are missing but the Note cell and the raw supplier-id
    cell hold numbers within latitude/longitude range, they are taken as
    the coordinates and the note is cleared.
    """
    kind = RecordKind.SERVICE_POINTS
    record = _map_fields(kind, row)
    _require(kind, record, "nome_punto_servizio")

    if record["id_cliente"] is None:
        record["id_cliente"] = _resolve_by_code(
            row, CLIENT_CODE_HEADERS, RecordKind.CLIENTS, "codice_cliente_custom", accessor
        )
    if record["fornitore_id"] is None:
        record["fornitore_id"] = _resolve_by_code(
            row, SUPPLIER_CODE_HEADERS, RecordKind.SUPPLIERS, "codice_cliente_associato", accessor
        )

    if record["latitude"] is None and record["longitude"] is None:
        shifted_lat = get_field_value(row, ("Note", "note"), to_number)
        shifted_lon = get_field_value(row, ("fornitore_id", "fornitoreId"), to_number)
        if _in_range(shifted_lat, 90) and _in_range(shifted_lon, 180):
            record["latitude"] = shifted_lat
            record["longitude"] = shifted_lon
            record["note"] = None

    return record


def map_network_operator(row: RawRow, accessor=None) -> Record:
    record = _map_fields(RecordKind.NETWORK_OPERATORS, row)
    _require(RecordKind.NETWORK_OPERATORS, record, "nome", "cognome")
    return record


def map_procedure(row: RawRow, accessor=None) -> Record:
    record = _map_fields(RecordKind.PROCEDURES, row)
    _require(RecordKind.PROCEDURES, record, "nome_procedura")
    return record


def map_rate(row: RawRow, accessor=None) -> Record:
    """Map a rate row; a non-numeric amount counts as missing."""
    record = _map_fields(RecordKind.RATES, row)
    _require(RecordKind.RATES, record, "tipo_servizio", "importo")
    return record


def map_service_point_contact(row: RawRow, accessor=None) -> Record:
    record = _map_fields(RecordKind.SERVICE_POINT_CONTACTS, row)
    _require(RecordKind.SERVICE_POINT_CONTACTS, record, "tipo_recapito", "punto_servizio_id")
    return record


def map_client_contact(row: RawRow, accessor=None) -> Record:
    record = _map_fields(RecordKind.CLIENT_CONTACTS, row)
    _require(RecordKind.CLIENT_CONTACTS, record, "tipo_recapito", "client_id")
    return record


def map_supplier_contact(row: RawRow, accessor=None) -> Record:
    record = _map_fields(RecordKind.SUPPLIER_CONTACTS, row)
    _require(RecordKind.SUPPLIER_CONTACTS, record, "tipo_recapito", "fornitore_id")
    return record


Mapper = Callable[..., Record]

MAPPERS: Dict[RecordKind, Mapper] = {
    RecordKind.CLIENTS: map_client,
    RecordKind.SUPPLIERS: map_supplier,
    RecordKind.PERSONNEL: map_personnel,
    RecordKind.SERVICE_POINTS: map_service_point,
    RecordKind.NETWORK_OPERATORS: map_network_operator,
    RecordKind.PROCEDURES: map_procedure,
    RecordKind.RATES: map_rate,
    RecordKind.SERVICE_POINT_CONTACTS: map_service_point_contact,
    RecordKind.CLIENT_CONTACTS: map_client_contact,
    RecordKind.SUPPLIER_CONTACTS: map_supplier_contact,
}

if set(MAPPERS) != set(RecordKind):
    raise RuntimeError("every RecordKind needs a mapper")


def map_row(kind, row: RawRow, accessor=None) -> Record:
    """
    Map one raw row to a canonical record of the given kind.

    Args:
        kind: RecordKind (or table name) of the row
        row: Raw spreadsheet row keyed by column header
        accessor: Optional StorageAccessor used for natural-key lookups

    Returns:
        Canonical record keyed by field name

    Raises:
        MissingRequiredField: If a required field is blank
        ReferenceNotFound: If a manually assigned code matches no single record
        ReferenceLookupFailure: If storage fails while resolving a code
        UnknownRecordKind: If the kind is not supported
    """
    return MAPPERS[parse_record_kind(kind)](row, accessor)
