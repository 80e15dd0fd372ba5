"""Error types for tinyformfields.

Two families of errors are raised:

- SchemaDecodeError: the schema itself could not be turned into field
  descriptors. Nothing is validated when this is raised.
- FormValidationError and its subclasses: a submitted value broke a field
  rule. There is one subclass per ErrorKind so callers can branch with
  ``except InvalidChoiceError`` or ``isinstance`` instead of parsing messages.

Every FormValidationError can be flattened into a FieldError, the structured
per-field record collected by the aggregate validation mode.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from tinyformfields.types import ErrorKind


class SchemaDecodeError(ValueError):
    """Raised when schema data is malformed or names an unknown field type.

    Attributes:
        field: Name of the offending field, when the failure is tied to one
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


@dataclass(frozen=True)
class FieldError:
    """Per-field validation error details.

    Attributes:
        field: Name of the field the error applies to
        kind: Category of the failure
        message: Human-readable error description
        label: Optional - the field's label
        expected: Optional - what was expected (choice values, pattern, limit)
        received: Optional - what was actually submitted

    Examples:
        >>> err = FieldError(
        ...     field="email",
        ...     kind=ErrorKind.INVALID_EMAIL,
        ...     message="invalid email: email has invalid value 'nope'",
        ...     received="nope",
        ... )
        >>> err.to_dict()["kind"]
        'invalid email'
    """
    field: str
    kind: ErrorKind
    message: str
    label: Optional[str] = None
    expected: Optional[Any] = None
    received: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "field": self.field,
            "kind": self.kind.value if isinstance(self.kind, ErrorKind) else self.kind,
            "message": self.message,
        }
        if self.label:
            result["label"] = self.label
        if self.expected is not None:
            result["expected"] = self.expected
        if self.received is not None:
            result["received"] = self.received
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldError":
        """Create FieldError from dict."""
        kind = data["kind"]
        if isinstance(kind, str):
            kind = ErrorKind(kind)
        return cls(
            field=data["field"],
            kind=kind,
            message=data["message"],
            label=data.get("label"),
            expected=data.get("expected"),
            received=data.get("received"),
        )


class FormValidationError(Exception):
    """Base class for a submitted value that breaks a field rule.

    Attributes:
        kind: Category of the failure
        field: Name of the offending field
        label: Label of the offending field
        value: The offending submitted value, if there is one
        expected: Context needed to explain the failure
    """

    kind: ErrorKind

    def __init__(
        self,
        field: str,
        value: Optional[str] = None,
        expected: Optional[Any] = None,
        label: str = "",
    ):
        self.field = field
        self.value = value
        self.expected = expected
        self.label = label
        super().__init__(f"{self.kind.value}: {self.describe()}")

    def describe(self) -> str:
        return f"{self.field} has invalid value '{self.value}'"

    def to_field_error(self) -> FieldError:
        return FieldError(
            field=self.field,
            kind=self.kind,
            message=str(self),
            label=self.label or None,
            expected=self.expected,
            received=self.value,
        )


class RequiredFieldMissingError(FormValidationError):
    kind = ErrorKind.REQUIRED_FIELD_MISSING

    def describe(self) -> str:
        return f"{self.field} is required but was not provided"


class InvalidChoiceError(FormValidationError):
    """A submitted value is not the value of any of the field's choices.

    ``expected`` holds the valid values in schema order.
    """

    kind = ErrorKind.INVALID_CHOICE

    def __init__(self, field: str, value: Optional[str], choices: Sequence[str], label: str = ""):
        super().__init__(field, value, expected=list(choices), label=label)

    @property
    def choices(self) -> List[str]:
        return self.expected

    def describe(self) -> str:
        return (
            f"{self.field} has invalid value '{self.value}'. "
            f"Valid choices are: [{' '.join(self.expected)}]"
        )


class InvalidEmailError(FormValidationError):
    kind = ErrorKind.INVALID_EMAIL


class InvalidPatternError(FormValidationError):
    kind = ErrorKind.INVALID_PATTERN

    def describe(self) -> str:
        return f"{self.field} has invalid value '{self.value}'. Value must match {self.expected}"


class LineBreakNotAllowedError(FormValidationError):
    kind = ErrorKind.LINE_BREAK_NOT_ALLOWED

    def describe(self) -> str:
        return f"{self.field} has a value containing a line break"


class TooLongError(FormValidationError):
    """A value exceeds the field's maximum length. ``expected`` is the limit."""

    kind = ErrorKind.TOO_LONG

    def describe(self) -> str:
        return (
            f"{self.field} allows at most {self.expected} characters, "
            f"got {len(self.value or '')}"
        )


class TooShortError(FormValidationError):
    """A value is under the field's minimum length. ``expected`` is the limit."""

    kind = ErrorKind.TOO_SHORT

    def describe(self) -> str:
        return (
            f"{self.field} requires at least {self.expected} characters, "
            f"got {len(self.value or '')}"
        )


class InvalidFormatError(FormValidationError):
    """A value does not parse as its input type. ``expected`` is the type."""

    kind = ErrorKind.INVALID_FORMAT

    def describe(self) -> str:
        return f"{self.field} has invalid value '{self.value}'. Expected {self.expected}"


__all__ = [
    "SchemaDecodeError",
    "FieldError",
    "FormValidationError",
    "RequiredFieldMissingError",
    "InvalidChoiceError",
    "InvalidEmailError",
    "InvalidPatternError",
    "LineBreakNotAllowedError",
    "TooLongError",
    "TooShortError",
    "InvalidFormatError",
]
