"""Form value validation engine for tinyformfields.

This module provides a ValidationEngine that checks submitted form values
against a decoded form schema, plus the two one-shot entry points most callers
want:

- valid_form_values: raise the first failure, in schema order, or return None
- validate_form_values: check every field and collect one FieldError per
  failing field into a ValidationResult

Fields are always visited in schema order, so for the same inputs the same
error comes back first every time.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence, Union

from tinyformfields.errors import FieldError, FormValidationError
from tinyformfields.rules import check_field
from tinyformfields.schema import RawSchema, decode_schema
from tinyformfields.types import ErrorKind, FieldDescriptor

logger = logging.getLogger(__name__)

SubmittedValues = Mapping[str, Union[str, Sequence[str]]]


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating every field of a submission.

    Attributes:
        is_valid: Whether every field passed
        errors: One FieldError per failing field, in schema order
        missing_fields: Names of required fields with no value
        invalid_fields: Names of fields whose values broke a rule

    Examples:
        >>> schema = '[{"name": "q", "presence": "Required", "type": {"type": "LongText"}}]'
        >>> result = validate_form_values(schema, {"q": ["hello"]})
        >>> result.is_valid
        True
        >>> result.errors
        []
    """
    is_valid: bool
    errors: List[FieldError]
    missing_fields: List[str] = field(default_factory=list)
    invalid_fields: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "isValid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "missingFields": self.missing_fields,
            "invalidFields": self.invalid_fields,
        }


class ValidationEngine:
    """Validates submitted form values against a form schema.

    The schema is decoded once, when the engine is built. The engine keeps no
    state between calls and never modifies the submitted values, so one
    engine may serve many submissions.

    Attributes:
        fields: The decoded field descriptors, in schema order
        check_formats: Whether ShortText input types (url, date, ...) are
            checked for well-formedness

    Examples:
        >>> schema = '''[
        ...   {"name": "colour", "presence": "Required",
        ...    "type": {"type": "Dropdown", "choices": ["Red", "Green", "Blue"]}}
        ... ]'''
        >>> engine = ValidationEngine(schema)
        >>> engine.check({"colour": ["Red"]})

        >>> engine.check({"colour": ["Purple"]})
        Traceback (most recent call last):
            ...
        tinyformfields.errors.InvalidChoiceError: invalid choice: colour has invalid value 'Purple'. Valid choices are: [Red Green Blue]
    """

    def __init__(self, schema: RawSchema, check_formats: bool = True) -> None:
        """Initialize the validation engine with a form schema.

        Args:
            schema: JSON text (bytes or str) or a parsed list of field objects
            check_formats: Whether to check ShortText input-type formats

        Raises:
            SchemaDecodeError: If the schema cannot be decoded
        """
        self.fields: List[FieldDescriptor] = decode_schema(schema)
        self.check_formats = check_formats

    def check(self, values: SubmittedValues) -> None:
        """Validate values, stopping at the first failing field.

        Args:
            values: Field name to submitted value(s)

        Raises:
            FormValidationError: The failure of the first field, in schema
                order, that does not pass
        """
        for form_field in self.fields:
            try:
                check_field(form_field, submitted_values(values, form_field.name), self.check_formats)
            except FormValidationError as e:
                logger.debug("Field %s failed validation: %s", form_field.name, e)
                raise

    def validate(self, values: SubmittedValues) -> ValidationResult:
        """Validate every field and collect the failures.

        Args:
            values: Field name to submitted value(s)

        Returns:
            ValidationResult with one error per failing field
        """
        field_errors: List[FieldError] = []
        missing_fields: List[str] = []
        invalid_fields: List[str] = []

        for form_field in self.fields:
            try:
                check_field(form_field, submitted_values(values, form_field.name), self.check_formats)
            except FormValidationError as e:
                logger.debug("Field %s failed validation: %s", form_field.name, e)
                field_errors.append(e.to_field_error())
                if e.kind == ErrorKind.REQUIRED_FIELD_MISSING:
                    missing_fields.append(form_field.name)
                else:
                    invalid_fields.append(form_field.name)

        return ValidationResult(
            is_valid=not field_errors,
            errors=field_errors,
            missing_fields=missing_fields,
            invalid_fields=invalid_fields,
        )


def submitted_values(values: SubmittedValues, name: str) -> List[str]:
    """Return every value submitted under name.

    Multi-dicts exposing ``getlist`` (as web frameworks provide) are read
    through it; a bare string counts as a single value.
    """
    getlist = getattr(values, "getlist", None)
    if callable(getlist):
        return list(getlist(name))
    raw = values.get(name)
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw]
    return list(raw)


def valid_form_values(schema: RawSchema, values: SubmittedValues) -> None:
    """Validate values against schema and raise the first failure.

    Raises:
        SchemaDecodeError: If the schema cannot be decoded
        FormValidationError: If any field fails; the first one in schema order
    """
    ValidationEngine(schema).check(values)


def validate_form_values(schema: RawSchema, values: SubmittedValues) -> ValidationResult:
    """Validate values against schema, collecting every failing field.

    Raises:
        SchemaDecodeError: If the schema cannot be decoded
    """
    return ValidationEngine(schema).validate(values)


__all__ = [
    "SubmittedValues",
    "ValidationResult",
    "ValidationEngine",
    "submitted_values",
    "valid_form_values",
    "validate_form_values",
]
