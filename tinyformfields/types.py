"""Core type definitions for tinyformfields.

This module defines the typed, in-memory representation of a form schema:
- Presence: Whether a field must be submitted
- FieldKind: The discriminator tag of a field's type
- ErrorKind: Categories of validation failure
- Choice: A value/label pair offered by the choice field types
- Dropdown, ChooseOne, ChooseMultiple, LongText, ShortText: The closed set of
  field type variants (see FieldType)
- FieldDescriptor: One decoded schema entry

All of these are immutable once decoded. A schema is decoded fresh for every
validation call and nothing here carries state between calls.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Union


class Presence(str, Enum):
    """Whether a field must carry a value in a submission."""
    REQUIRED = "Required"
    OPTIONAL = "Optional"


class FieldKind(str, Enum):
    """Discriminator values accepted in a field's ``type.type`` key."""
    DROPDOWN = "Dropdown"
    CHOOSE_ONE = "ChooseOne"
    CHOOSE_MULTIPLE = "ChooseMultiple"
    LONG_TEXT = "LongText"
    SHORT_TEXT = "ShortText"


class ErrorKind(str, Enum):
    """Validation failure categories.

    The value doubles as the prefix of the rendered error message, e.g.
    ``"invalid choice: question_1 has invalid value ..."``.
    """
    REQUIRED_FIELD_MISSING = "required field missing"
    INVALID_CHOICE = "invalid choice"
    INVALID_EMAIL = "invalid email"
    INVALID_PATTERN = "invalid pattern"
    LINE_BREAK_NOT_ALLOWED = "line break not allowed"
    TOO_LONG = "value too long"
    TOO_SHORT = "value too short"
    INVALID_FORMAT = "invalid format"


@dataclass(frozen=True)
class Choice:
    """A selectable option of a Dropdown, ChooseOne or ChooseMultiple field.

    Attributes:
        value: What must appear in the submitted data
        label: What a person sees; equal to value unless the raw choice
            string was written as ``"value | label"``

    Examples:
        >>> Choice(value="Maybe", label="I might want to go!").value
        'Maybe'
    """
    value: str
    label: str


@dataclass(frozen=True)
class Dropdown:
    """Single selection from a drop-down list."""
    choices: Tuple[Choice, ...]

    kind = FieldKind.DROPDOWN


@dataclass(frozen=True)
class ChooseOne:
    """Single selection from radio buttons."""
    choices: Tuple[Choice, ...]

    kind = FieldKind.CHOOSE_ONE


@dataclass(frozen=True)
class ChooseMultiple:
    """Any number of selections from checkboxes."""
    choices: Tuple[Choice, ...]

    kind = FieldKind.CHOOSE_MULTIPLE


@dataclass(frozen=True)
class LongText:
    """Multi-line free text, optionally capped at max_length characters."""
    max_length: Optional[int] = None

    kind = FieldKind.LONG_TEXT


@dataclass(frozen=True)
class ShortText:
    """Single-line text whose rules are driven by HTML input attributes.

    The attributes mapping is kept exactly as written in the schema. Only
    ``type``, ``pattern``, ``maxlength``, ``minlength`` and ``multiple`` drive
    validation; any other key is carried along untouched.

    Attributes:
        input_type: Builder-facing sub-kind name (e.g. "Email", "NRIC")
        attributes: HTML input attributes as string pairs
    """
    input_type: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)

    kind = FieldKind.SHORT_TEXT

    @property
    def html_type(self) -> str:
        """The ``type`` attribute, defaulting to ``"text"`` like a browser does."""
        return self.attributes.get("type", "text")

    @property
    def multiple(self) -> bool:
        return self.attributes.get("multiple") == "true"

    @property
    def pattern(self) -> Optional[str]:
        return self.attributes.get("pattern")

    @property
    def max_length(self) -> Optional[int]:
        return _int_attribute(self.attributes, "maxlength")

    @property
    def min_length(self) -> Optional[int]:
        return _int_attribute(self.attributes, "minlength")


def _int_attribute(attributes: Dict[str, str], key: str) -> Optional[int]:
    raw = attributes.get(key)
    if raw is None or raw == "":
        return None
    return int(raw)


# Closed set of field type variants. Code that branches on a FieldType must
# handle every member and end with typing_extensions.assert_never.
FieldType = Union[Dropdown, ChooseOne, ChooseMultiple, LongText, ShortText]

SINGLE_CHOICE_TYPES = (Dropdown, ChooseOne)


@dataclass(frozen=True)
class FieldDescriptor:
    """Decoded, typed representation of one schema entry.

    Attributes:
        name: Key into the submitted values; unique within a schema
        label: Human-readable question text
        presence: Whether a value must be submitted
        field_type: The field's type variant with its choices or attributes
        description: Optional help text

    Examples:
        >>> f = FieldDescriptor(
        ...     name="question_4",
        ...     label="Question 4",
        ...     presence=Presence.REQUIRED,
        ...     field_type=LongText(max_length=160),
        ... )
        >>> f.required
        True
    """
    name: str
    label: str
    presence: Presence
    field_type: FieldType
    description: str = ""

    @property
    def required(self) -> bool:
        return self.presence == Presence.REQUIRED

    @property
    def kind(self) -> FieldKind:
        return self.field_type.kind


__all__ = [
    "Presence",
    "FieldKind",
    "ErrorKind",
    "Choice",
    "Dropdown",
    "ChooseOne",
    "ChooseMultiple",
    "LongText",
    "ShortText",
    "FieldType",
    "SINGLE_CHOICE_TYPES",
    "FieldDescriptor",
]
