"""Pydantic schemas for records extracted from birth and baptism documents.

The wire names are the Spanish keys the model is asked to produce. Every field
is declared required-but-nullable in the response schema so the model can null
a value but never drop its key.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

# Wire name -> description sent to the model, in declaration order
RECORD_FIELDS: dict[str, str] = {
    "nombreCompleto": "Full name of the person, including first name and surnames.",
    "fechaNacimiento": "Date of birth (e.g., YYYY-MM-DD). Null if not found.",
    "fechaBautismo": "Date of baptism (e.g., YYYY-MM-DD). Null if not found.",
    "nombrePadre": "Full name of the father. Null if not found.",
    "nombreMadre": "Full name of the mother. Null if not found.",
    "abuelosPaternos": "Names of paternal grandparents. Null if not found.",
    "abuelosMaternos": "Names of maternal grandparents. Null if not found.",
}

LIST_FIELDS = frozenset({"abuelosPaternos", "abuelosMaternos"})

# Spreadsheet column labels, keyed by wire name
EXPORT_COLUMNS: dict[str, str] = {
    "nombreCompleto": "Nombre Completo",
    "fechaNacimiento": "Fecha de Nacimiento",
    "fechaBautismo": "Fecha de Bautismo",
    "nombrePadre": "Nombre del Padre",
    "nombreMadre": "Nombre de la Madre",
    "abuelosPaternos": "Abuelos Paternos",
    "abuelosMaternos": "Abuelos Maternos",
}

# On-screen labels, keyed by wire name
DISPLAY_LABELS: dict[str, str] = {
    "nombreCompleto": "Full Name",
    "fechaNacimiento": "Date of Birth",
    "fechaBautismo": "Date of Baptism",
    "nombrePadre": "Father's Name",
    "nombreMadre": "Mother's Name",
    "abuelosPaternos": "Paternal Grandparents",
    "abuelosMaternos": "Maternal Grandparents",
}

ENVELOPE_KEY = "records"


def _as_text(value: Any) -> str | None:
    """Keep any JSON value the model put in a text field, as text."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, list):
        return ", ".join(str(item) for item in value if item is not None)
    return str(value)


def _as_names(value: Any) -> list[str] | None:
    """Keep any JSON value the model put in a name-list field, as a list."""
    if value is None:
        return None
    if isinstance(value, list):
        return [item if isinstance(item, str) else str(item) for item in value if item is not None]
    return [value if isinstance(value, str) else str(value)]


Text = Annotated[str | None, BeforeValidator(_as_text)]
Names = Annotated[list[str] | None, BeforeValidator(_as_names)]


class ExtractedRecord(BaseModel):
    """One person's fields as read from a document.

    Any field may be missing. Values of an unexpected JSON type are kept
    (scalars as text, a lone name as a one-element list) rather than rejected.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    full_name: Text = Field(default=None, alias="nombreCompleto")
    birth_date: Text = Field(default=None, alias="fechaNacimiento")
    baptism_date: Text = Field(default=None, alias="fechaBautismo")
    father_name: Text = Field(default=None, alias="nombrePadre")
    mother_name: Text = Field(default=None, alias="nombreMadre")
    paternal_grandparents: Names = Field(default=None, alias="abuelosPaternos")
    maternal_grandparents: Names = Field(default=None, alias="abuelosMaternos")


def record_json_schema() -> dict[str, Any]:
    """Build the JSON schema of a single record.

    Returns:
        Object schema listing all seven fields as required and nullable
    """
    properties: dict[str, Any] = {}
    for name, description in RECORD_FIELDS.items():
        if name in LIST_FIELDS:
            properties[name] = {
                "type": ["array", "null"],
                "items": {"type": "string"},
                "description": description,
            }
        else:
            properties[name] = {"type": ["string", "null"], "description": description}

    return {
        "type": "object",
        "properties": properties,
        "required": list(RECORD_FIELDS),
        "additionalProperties": False,
    }


def document_json_schema() -> dict[str, Any]:
    """Schema of a whole document analysis: an array of records."""
    return {"type": "array", "items": record_json_schema()}


def response_format() -> dict[str, Any]:
    """OpenAI ``response_format`` carrying the document schema.

    The API only accepts an object at the root, so the array is wrapped in a
    single-property envelope that the client unwraps again. The service only
    enforces the schema in strict mode.
    """
    return {
        "type": "json_schema",
        "json_schema": {
            "name": "document_records",
            "strict": True,
            "schema": {
                "type": "object",
                "properties": {ENVELOPE_KEY: document_json_schema()},
                "required": [ENVELOPE_KEY],
                "additionalProperties": False,
            },
        },
    }


def normalize_records(payload: Any) -> list[Any]:
    """Coerce a parsed reply into a sequence of records.

    A lone object (the model's answer when it sees exactly one person) is
    wrapped in a one-element list; a list is returned as is.

    Args:
        payload: Parsed JSON value

    Returns:
        List of raw record values
    """
    if isinstance(payload, dict) and set(payload) == {ENVELOPE_KEY}:
        payload = payload[ENVELOPE_KEY]
    if isinstance(payload, list):
        return payload
    return [payload]


def _cell(value: str | list[str] | None) -> str:
    if isinstance(value, list):
        return ", ".join(value)
    return value or ""


def flatten_record(record: ExtractedRecord) -> dict[str, str]:
    """Flatten a record into a spreadsheet row keyed by column label."""
    values = record.model_dump(by_alias=True)
    return {label: _cell(values.get(name)) for name, label in EXPORT_COLUMNS.items()}


def display_fields(record: ExtractedRecord) -> list[tuple[str, str]]:
    """Return (label, value) pairs for the populated fields of a record."""
    values = record.model_dump(by_alias=True)
    return [
        (label, _cell(values.get(name)))
        for name, label in DISPLAY_LABELS.items()
        if values.get(name)
    ]


def display_title(record: ExtractedRecord, index: int) -> str:
    """Heading for a record card: the person's name or ``Person N`` (1-based)."""
    return record.full_name or f"Person {index + 1}"
