"""Schema decoding for tinyformfields.

A form schema is a JSON array of field objects:

    [
      {
        "label": "Question 1",
        "name": "question_1",
        "presence": "Required",
        "description": "",
        "type": {"type": "Dropdown", "choices": ["Red", "Maybe | Not sure"]}
      }
    ]

decode_schema turns that into a list of FieldDescriptor objects in the same
order as the input. The structure is first checked against FIELD_LIST_SCHEMA
with jsonschema; the ``type.type`` discriminator is then matched explicitly
against FieldKind so unknown tags are rejected instead of defaulted.
"""

import json
import logging
import re
from typing import Any, Dict, List, Union

from jsonschema import Draft7Validator
from jsonschema.exceptions import best_match

from tinyformfields.choices import parse_choices
from tinyformfields.errors import SchemaDecodeError
from tinyformfields.types import (
    ChooseMultiple,
    ChooseOne,
    Dropdown,
    FieldDescriptor,
    FieldKind,
    FieldType,
    LongText,
    Presence,
    ShortText,
)

logger = logging.getLogger(__name__)

RawSchema = Union[bytes, bytearray, str, List[Dict[str, Any]]]

# Structural shape of a schema. Variant-specific keys are only type-checked
# here; which keys a variant needs is decided in _decode_field_type.
FIELD_LIST_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "label": {"type": "string"},
            "name": {"type": "string", "minLength": 1},
            "presence": {"type": "string"},
            "description": {"type": "string"},
            "type": {
                "type": "object",
                "properties": {
                    "type": {"type": "string"},
                    "choices": {"type": "array", "items": {"type": "string"}},
                    "maxLength": {"type": ["integer", "null"], "minimum": 0},
                    "inputType": {"type": "string"},
                    "attributes": {
                        "type": "object",
                        "additionalProperties": {"type": "string"},
                    },
                },
                "required": ["type"],
            },
        },
        "required": ["name", "presence", "type"],
    },
}

_validator = Draft7Validator(FIELD_LIST_SCHEMA)

# ASCII digits only
DIGITS_RE = re.compile(r"[0-9]+")


def decode_schema(raw: RawSchema) -> List[FieldDescriptor]:
    """Decode raw schema data into field descriptors.

    Args:
        raw: JSON text as bytes or str, or an already-parsed list of field objects

    Returns:
        Field descriptors in schema order

    Raises:
        SchemaDecodeError: If the data is not valid JSON, does not have the
            shape of a field list, names an unknown field type or presence,
            repeats a field name, or carries unusable ShortText attributes
    """
    if isinstance(raw, (bytes, bytearray, str)):
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SchemaDecodeError(f"schema is not valid JSON: {e}") from e
    else:
        data = raw

    error = best_match(_validator.iter_errors(data))
    if error is not None:
        location = "/".join(str(p) for p in error.path) or "<root>"
        raise SchemaDecodeError(f"schema is malformed at {location}: {error.message}")

    fields: List[FieldDescriptor] = []
    seen = set()
    for entry in data:
        name = entry["name"]
        if name in seen:
            raise SchemaDecodeError(f"duplicate field name '{name}'", field=name)
        seen.add(name)
        fields.append(_decode_field(entry))

    logger.debug("Decoded schema with %d fields", len(fields))
    return fields


def _decode_field(entry: Dict[str, Any]) -> FieldDescriptor:
    name = entry["name"]
    try:
        presence = Presence(entry["presence"])
    except ValueError:
        raise SchemaDecodeError(
            f"field '{name}' has unknown presence '{entry['presence']}'", field=name
        ) from None

    return FieldDescriptor(
        name=name,
        label=entry.get("label", ""),
        presence=presence,
        field_type=_decode_field_type(name, entry["type"]),
        description=entry.get("description", ""),
    )


def _decode_field_type(name: str, raw_type: Dict[str, Any]) -> FieldType:
    tag = raw_type["type"]
    try:
        kind = FieldKind(tag)
    except ValueError:
        valid = ", ".join(k.value for k in FieldKind)
        raise SchemaDecodeError(
            f"field '{name}' has unknown type '{tag}'. Valid types: {valid}", field=name
        ) from None

    if kind == FieldKind.DROPDOWN:
        return Dropdown(choices=parse_choices(raw_type.get("choices", [])))
    if kind == FieldKind.CHOOSE_ONE:
        return ChooseOne(choices=parse_choices(raw_type.get("choices", [])))
    if kind == FieldKind.CHOOSE_MULTIPLE:
        return ChooseMultiple(choices=parse_choices(raw_type.get("choices", [])))
    if kind == FieldKind.LONG_TEXT:
        return LongText(max_length=raw_type.get("maxLength"))

    short_text = ShortText(
        input_type=raw_type.get("inputType", ""),
        attributes=dict(raw_type.get("attributes") or {}),
    )
    _check_short_text(name, short_text)
    return short_text


def _check_short_text(name: str, short_text: ShortText) -> None:
    """Reject attributes that validation could not use later."""
    for key in ("maxlength", "minlength"):
        raw = short_text.attributes.get(key)
        if raw and not DIGITS_RE.fullmatch(raw):
            raise SchemaDecodeError(
                f"field '{name}' has non-numeric {key} '{raw}'", field=name
            )

    pattern = short_text.pattern
    if pattern is not None:
        try:
            re.compile(pattern)
        except re.error as e:
            raise SchemaDecodeError(
                f"field '{name}' has invalid pattern '{pattern}': {e}", field=name
            ) from e


__all__ = [
    "FIELD_LIST_SCHEMA",
    "RawSchema",
    "decode_schema",
]
