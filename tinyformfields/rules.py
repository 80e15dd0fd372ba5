"""Per-field validation rules.

check_field applies the presence rule and then the rule belonging to the
field's type variant:

- Dropdown / ChooseOne: exactly one submitted value, equal to a choice value
- ChooseMultiple: every submitted value equal to some choice value
- LongText: every value within max_length characters
- ShortText: no line breaks (checked ahead of presence), then length
  attributes, email syntax, pattern and input-type format, in that order

Rules raise the matching FormValidationError subclass and return None when
the field passes.
"""

import re
from typing import List, Sequence, Union
from urllib.parse import urlsplit

from dateutil.parser import isoparser
from typing_extensions import assert_never

from tinyformfields.choices import choice_values
from tinyformfields.errors import (
    InvalidChoiceError,
    InvalidEmailError,
    InvalidFormatError,
    InvalidPatternError,
    LineBreakNotAllowedError,
    RequiredFieldMissingError,
    TooLongError,
    TooShortError,
)
from tinyformfields.types import (
    SINGLE_CHOICE_TYPES,
    ChooseMultiple,
    ChooseOne,
    Dropdown,
    FieldDescriptor,
    LongText,
    ShortText,
)

# local-part@domain, at least one dot in the domain, no whitespace anywhere
EMAIL_RE = re.compile(r"[^@\s]+@[^@\s.]+(\.[^@\s.]+)+")

LINE_BREAKS = ("\n", "\r")

_DATE = r"\d{4}-\d{2}-\d{2}"
_TIME = r"([01]\d|2[0-3]):[0-5]\d(:\d{2}(\.\d{1,3})?)?"
DATE_RE = re.compile(_DATE)
TIME_RE = re.compile(_TIME)
DATETIME_LOCAL_RE = re.compile(f"{_DATE}T{_TIME}")
COLOR_RE = re.compile(r"#[0-9a-fA-F]{6}")
TEL_RE = re.compile(r"\+?[0-9()\-. ]*[0-9][0-9()\-. ]*")

_iso = isoparser()


def is_present(field: FieldDescriptor, values: Sequence[str]) -> bool:
    """Whether a field counts as answered.

    Single-choice fields are present only when exactly one non-blank value
    was submitted. Every other field is present when any value is non-blank.
    """
    if isinstance(field.field_type, SINGLE_CHOICE_TYPES):
        return len(values) == 1 and values[0].strip() != ""
    return any(value.strip() for value in values)


def check_field(field: FieldDescriptor, values: Sequence[str], check_formats: bool = True) -> None:
    """Validate the submitted values of one field.

    Args:
        field: The decoded field
        values: Every value submitted under the field's name, in order
        check_formats: Whether ShortText input types such as date and url
            are checked for well-formedness

    Raises:
        FormValidationError: The first rule the values break
    """
    # A lone "\n" is a line-break error, never a blank value
    if isinstance(field.field_type, ShortText):
        _check_line_breaks(field, values)

    if not is_present(field, values):
        if field.required:
            raise RequiredFieldMissingError(field.name, label=field.label)
        return

    field_type = field.field_type
    if isinstance(field_type, (Dropdown, ChooseOne)):
        _check_single_choice(field, field_type, values[0])
    elif isinstance(field_type, ChooseMultiple):
        _check_multiple_choice(field, field_type, values)
    elif isinstance(field_type, LongText):
        _check_long_text(field, field_type, values)
    elif isinstance(field_type, ShortText):
        _check_short_text(field, field_type, values, check_formats)
    else:
        assert_never(field_type)


def _check_single_choice(field: FieldDescriptor, field_type: Union[Dropdown, ChooseOne], value: str) -> None:
    valid = choice_values(field_type.choices)
    if value not in valid:
        raise InvalidChoiceError(field.name, value, valid, label=field.label)


def _check_multiple_choice(field: FieldDescriptor, field_type: ChooseMultiple, values: Sequence[str]) -> None:
    valid = choice_values(field_type.choices)
    for value in values:
        if value not in valid:
            raise InvalidChoiceError(field.name, value, valid, label=field.label)


def _check_long_text(field: FieldDescriptor, field_type: LongText, values: Sequence[str]) -> None:
    if field_type.max_length is None:
        return
    for value in values:
        if len(value) > field_type.max_length:
            raise TooLongError(field.name, value, expected=field_type.max_length, label=field.label)


def _check_line_breaks(field: FieldDescriptor, values: Sequence[str]) -> None:
    for value in values:
        if any(brk in value for brk in LINE_BREAKS):
            raise LineBreakNotAllowedError(field.name, value, label=field.label)


def _check_short_text(
    field: FieldDescriptor,
    field_type: ShortText,
    values: Sequence[str],
    check_formats: bool,
) -> None:
    max_length = field_type.max_length
    min_length = field_type.min_length
    for value in values:
        if max_length is not None and len(value) > max_length:
            raise TooLongError(field.name, value, expected=max_length, label=field.label)
        if min_length is not None and len(value) < min_length:
            raise TooShortError(field.name, value, expected=min_length, label=field.label)

    if field_type.html_type == "email":
        _check_emails(field, field_type, values)

    pattern = field_type.pattern
    if pattern is not None:
        for value in values:
            if re.search(pattern, value) is None:
                raise InvalidPatternError(field.name, value, expected=pattern, label=field.label)

    if check_formats:
        for value in values:
            if not is_well_formed(field_type.html_type, value):
                raise InvalidFormatError(
                    field.name, value, expected=field_type.html_type, label=field.label
                )


def _check_emails(field: FieldDescriptor, field_type: ShortText, values: Sequence[str]) -> None:
    if field_type.multiple:
        for value in values:
            for address in split_addresses(value):
                if not is_email(address):
                    raise InvalidEmailError(field.name, address, label=field.label)
        return

    if len(values) != 1:
        raise InvalidEmailError(field.name, ",".join(values), label=field.label)
    if not is_email(values[0]):
        raise InvalidEmailError(field.name, values[0], label=field.label)


def split_addresses(value: str) -> List[str]:
    """Split a comma-separated list of email addresses, trimming each one."""
    return [address.strip() for address in value.split(",")]


def is_email(value: str) -> bool:
    return EMAIL_RE.fullmatch(value) is not None


def is_well_formed(html_type: str, value: str) -> bool:
    """Check a ShortText value against its HTML input type.

    Types without a known format (text, email, search, password and anything
    unrecognised) always pass; email has its own rule.
    """
    if html_type == "url":
        try:
            parts = urlsplit(value)
        except ValueError:
            return False
        return bool(parts.scheme and parts.netloc)
    if html_type == "tel":
        return TEL_RE.fullmatch(value) is not None
    if html_type == "color":
        return COLOR_RE.fullmatch(value) is not None
    if html_type == "date":
        return DATE_RE.fullmatch(value) is not None and _parses(_iso.parse_isodate, value)
    if html_type == "time":
        return TIME_RE.fullmatch(value) is not None and _parses(_iso.parse_isotime, value)
    if html_type == "datetime-local":
        return DATETIME_LOCAL_RE.fullmatch(value) is not None and _parses(_iso.isoparse, value)
    return True


def _parses(parse, value: str) -> bool:
    try:
        parse(value)
    except (ValueError, OverflowError):
        return False
    return True


__all__ = [
    "EMAIL_RE",
    "is_present",
    "check_field",
    "split_addresses",
    "is_email",
    "is_well_formed",
]
