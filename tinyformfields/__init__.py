"""tinyformfields: validation of submitted form values against a form schema.

A form schema is a JSON list of typed fields (Dropdown, ChooseOne,
ChooseMultiple, LongText, ShortText). tinyformfields provides:
- Schema decoding into immutable field descriptors
- Choice strings with separate value and label ("value | label")
- Per-type validation rules with one exception class per failure kind
- First-error and collect-all validation modes

Basic usage:
    >>> from tinyformfields import valid_form_values
    >>> schema = '''[
    ...   {"label": "Question 1", "name": "question_1", "presence": "Required",
    ...    "type": {"type": "ChooseOne", "choices": ["Yes", "No"]}}
    ... ]'''
    >>> valid_form_values(schema, {"question_1": ["No"]}) is None
    True
"""

__version__ = "0.1.0"
__author__ = "tinyformfields contributors"

# Version info
VERSION = (0, 1, 0)

# Core exports
from tinyformfields.errors import (
    FieldError,
    FormValidationError,
    InvalidChoiceError,
    InvalidEmailError,
    InvalidFormatError,
    InvalidPatternError,
    LineBreakNotAllowedError,
    RequiredFieldMissingError,
    SchemaDecodeError,
    TooLongError,
    TooShortError,
)
from tinyformfields.schema import decode_schema
from tinyformfields.validation import (
    ValidationEngine,
    ValidationResult,
    valid_form_values,
    validate_form_values,
)

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "decode_schema",
    "ValidationEngine",
    "ValidationResult",
    "valid_form_values",
    "validate_form_values",
    "FieldError",
    "SchemaDecodeError",
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
