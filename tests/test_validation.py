"""Unit tests for the validation engine.

Tests cover:
- A complete form using every field type
- Choice values written with labels
- First-error ordering and short-circuiting
- Collect-all validation and ValidationResult structure
- Submitted value shapes (lists, bare strings, multi-dicts)
- Purity: repeated calls agree and inputs are left untouched
"""

import copy
import json

import pytest

from tinyformfields import (
    FormValidationError,
    InvalidChoiceError,
    InvalidEmailError,
    InvalidPatternError,
    LineBreakNotAllowedError,
    RequiredFieldMissingError,
    SchemaDecodeError,
    ValidationEngine,
    ValidationResult,
    valid_form_values,
    validate_form_values,
)
from tinyformfields.types import ErrorKind


def short_text(label, name, input_type, presence="Required", **attributes):
    return {
        "label": label,
        "name": name,
        "presence": presence,
        "description": "",
        "type": {"type": "ShortText", "inputType": input_type, "attributes": attributes},
    }


FULL_FORM = json.dumps([
    {
        "label": "Question 1",
        "name": "question_1",
        "presence": "Required",
        "description": "",
        "type": {
            "type": "Dropdown",
            "choices": ["Red", "Orange", "Yellow", "Green", "Blue", "Indigo", "Violet"],
        },
    },
    {
        "label": "Question 2",
        "name": "question_2",
        "presence": "Required",
        "description": "",
        "type": {"type": "ChooseOne", "choices": ["Yes", "No"]},
    },
    {
        "label": "Question 3",
        "name": "question_3",
        "presence": "Optional",
        "description": "",
        "type": {"type": "ChooseMultiple", "choices": ["Apple", "Banana", "Cantaloupe", "Durian"]},
    },
    {
        "label": "Question 4",
        "name": "question_4",
        "presence": "Required",
        "description": "",
        "type": {"type": "LongText", "maxLength": 160},
    },
    short_text("Question 5", "question_5", "Single-line free text", type="text"),
    short_text("Question 6", "question_6", "Email", type="email"),
    short_text("Question 7", "question_7", "Emails", presence="Optional", multiple="true", type="email"),
    short_text(
        "Question 8", "question_8", "NRIC",
        maxlength="9", minlength="9", pattern="^[STGM][0-9]{7}[ABCDEFGHIZJ]$", type="text",
    ),
    short_text("Question 9", "question_9", "Telephone", type="tel"),
    short_text("Question 10", "question_10", "URL", type="url"),
    short_text("Question 11", "question_11", "Color", type="color"),
    short_text("Question 12", "question_12", "Date", type="date"),
    short_text("Question 13", "question_13", "Time", type="time"),
    short_text("Question 14", "question_14", "Date & Time", type="datetime-local"),
]).encode("utf-8")

FULL_FORM_VALUES = {
    "question_1": ["Red"],
    "question_2": ["No"],
    "question_3": ["Apple", "Banana", "Cantaloupe", "Durian"],
    "question_4": ["multiple lines\r\nare accepted\r\nhere"],
    "question_5": ["single line only"],
    "question_6": ["alice@example.com"],
    "question_7": ["alice@example.com,bob@example.com"],
    "question_8": ["S1234567A"],
    "question_9": ["123"],
    "question_10": ["ftp://example.com"],
    "question_11": ["#000000"],
    "question_12": ["2024-09-19"],
    "question_13": ["19:18"],
    "question_14": ["2024-09-19T21:01"],
}

CHOICE_FORM = """[
  {
    "label": "Question 1",
    "name": "question_1",
    "presence": "Required",
    "type": {"type": "Dropdown", "choices": ["Yes", "Maybe | I might want to go!", "No"]}
  },
  {
    "label": "Question 2",
    "name": "question_2",
    "presence": "Required",
    "type": {
      "type": "ChooseMultiple",
      "choices": ["Option1 | First Option", "Option2 | Second Option", "Option3"]
    }
  }
]"""


def single_field(presence="Required", **field_type):
    return json.dumps([
        {"label": "Question 1", "name": "question_1", "presence": presence, "type": field_type}
    ])


class TestFullForm:
    """Test a form that uses every field type."""

    def test_valid_submission(self):
        """Should accept a submission where every field is valid."""
        assert valid_form_values(FULL_FORM, FULL_FORM_VALUES) is None

    def test_optional_fields_omitted(self):
        values = {k: v for k, v in FULL_FORM_VALUES.items() if k not in ("question_3", "question_7")}
        assert valid_form_values(FULL_FORM, values) is None

    def test_optional_fields_blank(self):
        values = dict(FULL_FORM_VALUES, question_3=[], question_7=[""])
        assert valid_form_values(FULL_FORM, values) is None

    def test_collect_all_valid(self):
        result = validate_form_values(FULL_FORM, FULL_FORM_VALUES)
        assert result.is_valid is True
        assert result.errors == []
        assert result.missing_fields == []
        assert result.invalid_fields == []


class TestChoiceLabels:
    """Test that choices written as "value | label" accept the value only."""

    def test_values_accepted(self):
        values = {"question_1": ["Maybe"], "question_2": ["Option1", "Option3"]}
        assert valid_form_values(CHOICE_FORM, values) is None

    def test_label_rejected(self):
        with pytest.raises(InvalidChoiceError) as exc_info:
            valid_form_values(CHOICE_FORM, {"question_1": ["I might want to go!"]})

        assert str(exc_info.value) == (
            "invalid choice: question_1 has invalid value 'I might want to go!'. "
            "Valid choices are: [Yes Maybe No]"
        )
        assert exc_info.value.label == "Question 1"


class TestScenarios:
    """Test single-field forms against each error kind."""

    def test_invalid_dropdown_choice(self):
        schema = single_field(type="Dropdown", choices=["Red", "Green", "Blue"])
        with pytest.raises(InvalidChoiceError) as exc_info:
            valid_form_values(schema, {"question_1": ["Purple"]})
        assert "[Red Green Blue]" in str(exc_info.value)

    def test_choose_multiple_with_labels(self):
        schema = single_field(
            type="ChooseMultiple",
            choices=["Option1 | First Option", "Option2 | Second Option", "Option3"],
        )
        assert valid_form_values(schema, {"question_1": ["Option1", "Option3"]}) is None

    def test_missing_required_field(self):
        schema = single_field(type="ShortText", attributes={"type": "text"})
        with pytest.raises(RequiredFieldMissingError):
            valid_form_values(schema, {})

    def test_optional_field_missing(self):
        schema = single_field(presence="Optional", type="ShortText", attributes={"type": "text"})
        assert valid_form_values(schema, {}) is None

    def test_invalid_email(self):
        schema = single_field(type="ShortText", attributes={"type": "email"})
        with pytest.raises(InvalidEmailError):
            valid_form_values(schema, {"question_1": ["invalid-email"]})

    def test_invalid_pattern(self):
        schema = single_field(type="ShortText", attributes={"type": "text", "pattern": "^[0-9]{3}$"})
        with pytest.raises(InvalidPatternError):
            valid_form_values(schema, {"question_1": ["12a"]})

    def test_line_break(self):
        schema = single_field(type="ShortText", attributes={"type": "text"})
        with pytest.raises(LineBreakNotAllowedError):
            valid_form_values(schema, {"question_1": ["Line1\nLine2"]})

    def test_line_break_only_value(self):
        """A bare line break fails as a line break, required or optional."""
        for presence in ("Required", "Optional"):
            schema = single_field(presence=presence, type="ShortText", attributes={"type": "text"})
            with pytest.raises(LineBreakNotAllowedError):
                valid_form_values(schema, {"question_1": ["\n"]})

    def test_multiple_emails(self):
        schema = single_field(type="ShortText", attributes={"multiple": "true", "type": "email"})
        assert valid_form_values(schema, {"question_1": ["a@x.com,b@x.com"]}) is None
        with pytest.raises(InvalidEmailError):
            valid_form_values(schema, {"question_1": ["a@x.com,not-an-email"]})

    def test_errors_share_base_class(self):
        schema = single_field(type="ShortText", attributes={"type": "email"})
        with pytest.raises(FormValidationError) as exc_info:
            valid_form_values(schema, {"question_1": ["invalid-email"]})
        assert exc_info.value.kind == ErrorKind.INVALID_EMAIL


class TestFirstError:
    """Test that the first failing field in schema order is reported."""

    def test_first_field_in_schema_order_wins(self):
        values = dict(FULL_FORM_VALUES, question_2=["Maybe"], question_6=["nope"])
        with pytest.raises(InvalidChoiceError) as exc_info:
            valid_form_values(FULL_FORM, values)
        assert exc_info.value.field == "question_2"

    def test_order_follows_schema_not_values(self):
        values = {"question_2": ["Maybe"], "question_1": ["Purple"]}
        with pytest.raises(InvalidChoiceError) as exc_info:
            valid_form_values(CHOICE_FORM, values)
        assert exc_info.value.field == "question_1"

    def test_missing_field_reported_in_order(self):
        values = dict(FULL_FORM_VALUES)
        del values["question_5"]
        values["question_8"] = ["bad"]
        with pytest.raises(RequiredFieldMissingError) as exc_info:
            valid_form_values(FULL_FORM, values)
        assert exc_info.value.field == "question_5"


class TestCollectAll:
    """Test validate_form_values, which checks every field."""

    def test_reports_every_failing_field(self):
        values = dict(FULL_FORM_VALUES, question_2=["Maybe"], question_6=["nope"])
        del values["question_9"]

        result = validate_form_values(FULL_FORM, values)

        assert isinstance(result, ValidationResult)
        assert result.is_valid is False
        assert [e.field for e in result.errors] == ["question_2", "question_6", "question_9"]
        assert [e.kind for e in result.errors] == [
            ErrorKind.INVALID_CHOICE,
            ErrorKind.INVALID_EMAIL,
            ErrorKind.REQUIRED_FIELD_MISSING,
        ]
        assert result.missing_fields == ["question_9"]
        assert result.invalid_fields == ["question_2", "question_6"]

    def test_to_dict(self):
        result = validate_form_values(single_field(type="LongText"), {})
        data = result.to_dict()

        assert data["isValid"] is False
        assert data["missingFields"] == ["question_1"]
        assert data["invalidFields"] == []
        assert data["errors"][0]["kind"] == "required field missing"
        assert data["errors"][0]["label"] == "Question 1"

    def test_result_defaults(self):
        result = ValidationResult(is_valid=True, errors=[])
        assert result.missing_fields == []
        assert result.invalid_fields == []
        assert result.to_dict() == {
            "isValid": True,
            "errors": [],
            "missingFields": [],
            "invalidFields": [],
        }

    def test_schema_errors_still_raise(self):
        with pytest.raises(SchemaDecodeError):
            validate_form_values(single_field(type="Unknown"), {})


class TestSubmittedValueShapes:
    """Test the forms submitted values may take."""

    def test_bare_string(self):
        schema = single_field(type="Dropdown", choices=["Red"])
        assert valid_form_values(schema, {"question_1": "Red"}) is None

    def test_tuple(self):
        schema = single_field(type="ChooseMultiple", choices=["A", "B"])
        assert valid_form_values(schema, {"question_1": ("A", "B")}) is None

    def test_multidict_getlist(self):
        """Objects exposing getlist are read through it."""

        class MultiDict:
            def __init__(self, pairs):
                self.pairs = pairs

            def getlist(self, key):
                return [v for k, v in self.pairs if k == key]

        schema = single_field(type="ChooseMultiple", choices=["A", "B"])
        assert valid_form_values(schema, MultiDict([("question_1", "A"), ("question_1", "B")])) is None
        with pytest.raises(InvalidChoiceError):
            valid_form_values(schema, MultiDict([("question_1", "A"), ("question_1", "C")]))

    def test_unknown_keys_ignored(self):
        schema = single_field(type="Dropdown", choices=["Red"])
        assert valid_form_values(schema, {"question_1": ["Red"], "extra": ["x"]}) is None


class TestEngine:
    """Test ValidationEngine directly."""

    def test_schema_decoded_once(self):
        engine = ValidationEngine(FULL_FORM)
        assert [f.name for f in engine.fields][:2] == ["question_1", "question_2"]
        assert len(engine.fields) == 14

    def test_reusable(self):
        engine = ValidationEngine(CHOICE_FORM)
        engine.check({"question_1": ["Yes"], "question_2": ["Option2"]})
        with pytest.raises(RequiredFieldMissingError):
            engine.check({"question_1": ["Yes"]})
        engine.check({"question_1": ["No"], "question_2": ["Option3"]})

    def test_check_formats_disabled(self):
        schema = single_field(type="ShortText", attributes={"type": "date"})
        ValidationEngine(schema, check_formats=False).check({"question_1": ["tomorrow"]})

    def test_invalid_schema_raises_on_construction(self):
        with pytest.raises(SchemaDecodeError):
            ValidationEngine(b"not json")

    def test_idempotent(self):
        values = {"question_1": ["I might want to go!"]}
        messages = []
        for _ in range(2):
            with pytest.raises(InvalidChoiceError) as exc_info:
                valid_form_values(CHOICE_FORM, values)
            messages.append(str(exc_info.value))
        assert messages[0] == messages[1]

    def test_values_not_modified(self):
        values = copy.deepcopy(FULL_FORM_VALUES)
        valid_form_values(FULL_FORM, values)
        validate_form_values(FULL_FORM, values)
        assert values == FULL_FORM_VALUES
