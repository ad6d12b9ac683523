"""
Field descriptors, schema inference, and schema lookup.

A schema is an ordered tuple of :class:`FieldDescriptor` entries. Dynamic
schemas are inferred from one sample record: each value runs through a fixed
decoder chain (STRING, NUMBER, BOOLEAN) and values no decoder accepts are
dropped. Static schemas are read from a YAML document shipped with the package
or supplied by the caller.

Descriptors serialise to the reporting host's shape::

    {"name": "placa", "label": "Placa", "dataType": "STRING",
     "semantics": {"conceptType": "DIMENSION"}}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from importlib import resources
from pathlib import Path
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

import yaml

from .errors import ConnectorError, FieldNotFoundError, report_error
from .naming import normalize_identifier

DEFAULT_STATIC_SCHEMA = "default.yaml"


class SchemaLoadError(ConnectorError):
    """Raised when a stored or bundled schema document cannot be parsed."""

    error_code = "SCHEMA_INVALID"


class DataType(str, Enum):
    """Column types understood by the reporting host."""

    STRING = "STRING"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"


class ConceptType(str, Enum):
    DIMENSION = "DIMENSION"


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """
    One reportable column.

    Attributes
    ----------
    name:
        Normalised key, derived from ``label``.
    label:
        Original display name, also the key used in remote records.
    data_type:
        Inferred or declared column type.
    concept_type:
        Always ``DIMENSION``.
    """

    name: str
    label: str
    data_type: DataType
    concept_type: ConceptType = ConceptType.DIMENSION

    @classmethod
    def from_label(cls, label: str, data_type: DataType) -> "FieldDescriptor":
        return cls(name=normalize_identifier(label), label=label, data_type=data_type)

    def is_complete(self) -> bool:
        return bool(self.name and self.label and self.data_type)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "dataType": self.data_type.value,
            "semantics": {"conceptType": self.concept_type.value},
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FieldDescriptor":
        semantics = payload.get("semantics")
        concept = semantics.get("conceptType") if isinstance(semantics, Mapping) else None
        label = str(payload.get("label") or payload["name"])
        return cls(
            name=str(payload.get("name") or normalize_identifier(label)),
            label=label,
            data_type=DataType(str(payload["dataType"]).upper()),
            concept_type=ConceptType(str(concept or payload.get("conceptType") or ConceptType.DIMENSION.value).upper()),
        )


Schema = Tuple[FieldDescriptor, ...]


def _decode_string(value: Any) -> bool:
    return isinstance(value, str)


def _decode_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _decode_boolean(value: Any) -> bool:
    return isinstance(value, bool)


_DECODERS: Sequence[Tuple[DataType, Callable[[Any], bool]]] = (
    (DataType.STRING, _decode_string),
    (DataType.NUMBER, _decode_number),
    (DataType.BOOLEAN, _decode_boolean),
)


def decode_value(value: Any) -> Optional[DataType]:
    """Tag ``value`` with the first matching data type, or ``None`` when unsupported."""

    for data_type, accepts in _DECODERS:
        if accepts(value):
            return data_type
    return None


def infer_schema(record: Mapping[str, Any]) -> Schema:
    """
    Derive a schema from a single sample record.

    Fields are kept in the record's key order. Values without a supported type
    (``None``, lists, nested objects) are dropped silently, as is any field whose
    key normalises to an empty name.
    """

    candidates: List[Optional[FieldDescriptor]] = []
    for label, value in record.items():
        data_type = decode_value(value)
        candidates.append(FieldDescriptor.from_label(str(label), data_type) if data_type else None)
    return tuple(field for field in candidates if field is not None and field.is_complete())


def find_field(schema: Iterable[FieldDescriptor], name: str) -> FieldDescriptor:
    """Return the descriptor named ``name``; report a field-not-found error otherwise."""

    for field in schema:
        if field.name == name:
            return field
    report_error(f"Field '{name}' was not found in the schema.", error_cls=FieldNotFoundError)


def schema_to_json(schema: Iterable[FieldDescriptor]) -> str:
    return json.dumps([field.to_dict() for field in schema], ensure_ascii=False)


def schema_from_json(text: str) -> Schema:
    """Parse a schema persisted by :func:`schema_to_json`."""

    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise SchemaLoadError("Stored schema is not valid JSON.", str(exc)) from exc
    return _schema_from_payload(payload, origin="stored schema")


def load_static_schema(path: Optional[Path | str] = None) -> Schema:
    """
    Load a static schema from YAML.

    When ``path`` is omitted the bundled ``resources/schemas/default.yaml`` is
    used. The document must be a list of mappings with at least ``label`` (or
    ``name``) and ``dataType``.
    """

    if path is None:
        schemas_pkg = "sgsst_connector.resources.schemas"
        with resources.as_file(resources.files(schemas_pkg) / DEFAULT_STATIC_SCHEMA) as resolved:
            return load_static_schema(resolved)

    location = Path(path)
    if not location.exists():
        raise SchemaLoadError(f"Schema file '{location}' does not exist.")
    try:
        with location.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise SchemaLoadError(f"Failed to parse schema file '{location}'.", str(exc)) from exc
    return _schema_from_payload(payload, origin=str(location))


def _schema_from_payload(payload: Any, *, origin: str) -> Schema:
    if not isinstance(payload, list):
        raise SchemaLoadError(f"Schema in {origin} must be a list of fields.")
    fields: List[FieldDescriptor] = []
    for entry in payload:
        if not isinstance(entry, Mapping):
            raise SchemaLoadError(f"Invalid field in {origin}: expected mapping, got {type(entry).__name__}.")
        try:
            field = FieldDescriptor.from_dict(entry)
        except KeyError as exc:
            raise SchemaLoadError(f"Missing required key {exc!s} in {origin}.") from exc
        except ValueError as exc:
            raise SchemaLoadError(f"Invalid field in {origin}: {exc}") from exc
        if not field.is_complete():
            raise SchemaLoadError(f"Field in {origin} is missing a name, label or type.")
        fields.append(field)
    return tuple(fields)


__all__ = [
    "ConceptType",
    "DataType",
    "FieldDescriptor",
    "Schema",
    "SchemaLoadError",
    "decode_value",
    "find_field",
    "infer_schema",
    "load_static_schema",
    "schema_from_json",
    "schema_to_json",
]
