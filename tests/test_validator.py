"""Tests for the validation session and annotation-driven validation."""

from dataclasses import dataclass, field, fields

import pytest

from fieldcheck import Schema, Validator, evaluate, evaluate_field, rule_field, rules
from fieldcheck.constraints import FieldConstraints, Required
from fieldcheck.exceptions import UnknownRuleError
from fieldcheck.fields import external_name, iter_record_fields
from fieldcheck.result import Violation


@dataclass
class Account:
    id: int = rule_field("required,min=1", default=0)
    username: str = rule_field("required,min_len=3,max_len=20,alphanum", default="")
    email: str = rule_field("required,email", default="")
    age: int = rule_field("min:18,max:120", default=0)
    password: str = rule_field("required,min_len:8", default="")
    phone: str = ""
    created_at: str = rule_field("datetime", alias="createdAt", default="")


def valid_account(**changes):
    values = {
        "id": 1,
        "username": "john123",
        "email": "john@example.com",
        "age": 25,
        "password": "password123",
        "created_at": "2023-01-01T12:00:00Z",
    }
    values.update(changes)
    return Account(**values)


class TestAnnotatedValidation:
    """Test Validator.validate on annotated dataclasses."""

    def test_valid_record(self):
        """Test a record that satisfies every rule."""
        validator = Validator()
        assert validator.validate(valid_account()) is True
        assert validator.has_errors() is False
        assert validator.field_errors() == {}

    def test_missing_required_fields(self):
        """Test that every empty required field is reported once."""
        validator = Validator()
        assert validator.validate(Account(age=25)) is False
        assert validator.field_errors() == {
            "id": ["This field is required"],
            "username": ["This field is required"],
            "email": ["This field is required"],
            "password": ["This field is required"],
        }

    @pytest.mark.parametrize(
        "changes,field_name,message",
        [
            ({"email": "invalid-email"}, "email", "Must be a valid email address"),
            ({"age": 15}, "age", "Must be at least 18"),
            ({"age": 150}, "age", "Must be at most 120"),
            ({"password": "123"}, "password", "Must be at least 8 characters"),
            ({"username": "john@123"}, "username", "Must contain only letters and numbers"),
            ({"created_at": "yesterday"}, "createdAt", "Must be a valid datetime (RFC3339)"),
        ],
    )
    def test_single_field_failures(self, changes, field_name, message):
        """Test that one bad field yields exactly its own violation."""
        validator = Validator()
        assert validator.validate(valid_account(**changes)) is False
        assert validator.field_errors() == {field_name: [message]}

    def test_unannotated_fields_ignored(self):
        """Test that fields without rules are never checked."""
        validator = Validator()
        assert validator.validate(valid_account(phone="not checked")) is True

    def test_plain_metadata_annotation(self):
        """Test annotating with dataclasses.field metadata directly."""

        @dataclass
        class Contact:
            email: str = field(default="", metadata={"validate": "required|email", "alias": "-"})

        validator = Validator()
        assert validator.validate(Contact(email="nope")) is False
        assert validator.field_errors() == {"email": ["Must be a valid email address"]}

    def test_non_dataclass_rejected(self):
        """Test that mappings are not accepted for annotation-driven validation."""
        with pytest.raises(TypeError):
            Validator().validate({"email": "john@example.com"})
        with pytest.raises(TypeError):
            Validator().validate(Account)

    def test_strict_session(self):
        """Test that a strict session raises on unknown rule names."""

        @dataclass
        class Odd:
            name: str = rule_field("required|frobnicate", default="x")

        assert Validator().validate(Odd()) is True
        with pytest.raises(UnknownRuleError):
            Validator(strict=True).validate(Odd())


class TestValidateField:
    """Test single-value validation."""

    def test_results(self):
        """Test pass and fail outcomes for common rules."""
        validator = Validator()
        assert validator.validate_field("name", "", "required") is False
        assert validator.validate_field("name", "John", "required") is True
        assert validator.validate_field("password", "123", "min_len:8") is False
        assert validator.validate_field("password", "password123", "min_len:8") is True
        assert validator.validate_field("email", "invalid", "email") is False
        assert validator.validate_field("email", "test@example.com", "email") is True
        assert validator.validate_field("age", "15", "min:18") is False
        assert validator.validate_field("age", "25", "min:18") is True

    def test_errors_accumulate(self):
        """Test that the session keeps earlier errors."""
        validator = Validator()
        validator.validate_field("name", "", "required")
        validator.validate_field("name", "John", "required")
        assert validator.field_errors() == {"name": ["This field is required"]}

    def test_extra_rules(self):
        """Test session-level rule extensions."""
        validator = Validator(
            extra_rules={"even": lambda arg: rules.custom(lambda v: int(v) % 2 == 0, "Must be even")}
        )
        assert validator.validate_field("n", 3, "required|even") is False
        assert validator.field_errors() == {"n": ["Must be even"]}


class TestAggregation:
    """Test the error aggregation surface."""

    def test_add_and_read(self):
        """Test insertion order and rendering."""
        validator = Validator()
        validator.add_error("b", "first")
        validator.add_error("a", "second")
        validator.add_error("b", "third")

        assert validator.has_errors() is True
        assert list(validator.field_errors()) == ["b", "a"]
        assert validator.flat_list() == [
            Violation("b", "first"),
            Violation("b", "third"),
            Violation("a", "second"),
        ]
        assert validator.error_string() == "b: first; b: third; a: second"

    def test_field_errors_is_a_copy(self):
        """Test that callers cannot mutate session state."""
        validator = Validator()
        validator.add_error("name", "bad")
        errors = validator.field_errors()
        errors["name"].append("mutated")
        errors["other"] = ["added"]
        assert validator.field_errors() == {"name": ["bad"]}

    def test_clear_and_reuse(self):
        """Test sequential reuse of one session."""
        validator = Validator()
        validator.add_error("name", "bad")
        validator.clear()
        assert validator.has_errors() is False
        assert validator.result().valid is True

    def test_result_snapshot(self):
        """Test that results are independent of later session changes."""
        validator = Validator()
        validator.add_error("name", "bad")
        result = validator.result()
        validator.add_error("name", "worse")
        assert result.errors == {"name": ["bad"]}


class TestEvaluate:
    """Test the evaluator entry points."""

    def test_evaluate_field_required_gate(self):
        """Test that an empty required value records one message only."""
        validator = Validator()
        constraints = FieldConstraints((rules.min_length(3), Required(), rules.email()))
        evaluate_field(validator, "email", "", constraints)
        assert validator.field_errors() == {"email": ["This field is required"]}

    def test_evaluate_field_optional_empty(self):
        """Test that an empty optional value records nothing."""
        validator = Validator()
        evaluate_field(validator, "nick", None, FieldConstraints((rules.min_length(3),)))
        assert validator.has_errors() is False

    def test_evaluate_into_session(self):
        """Test recording into a caller-supplied session."""
        schema = Schema().rules("email", "required|email")
        validator = Validator()
        validator.add_error("earlier", "kept")

        result = evaluate(schema, {"email": "nope"}, validator)
        assert result.errors == {"earlier": ["kept"], "email": ["Must be a valid email address"]}

    def test_misuse_raises(self):
        """Test programmer errors."""
        with pytest.raises(TypeError):
            evaluate(None, {})
        with pytest.raises(TypeError):
            evaluate(Schema(), 42)


class TestRecordFields:
    """Test dataclass field introspection."""

    def test_iter_record_fields(self):
        """Test names, aliases, values and rules in declaration order."""
        record_fields = list(iter_record_fields(valid_account()))

        assert [f.name for f in record_fields][:2] == ["id", "username"]
        created = record_fields[-1]
        assert created.name == "created_at"
        assert created.external_name == "createdAt"
        assert created.value == "2023-01-01T12:00:00Z"
        assert created.rules == "datetime"
        assert record_fields[5].rules is None

    def test_alias_options_and_ignored_alias(self):
        """Test alias parsing."""

        @dataclass
        class Tagged:
            a: str = field(default="", metadata={"alias": "userName,omitempty"})
            b: str = field(default="", metadata={"alias": "-"})
            c: str = field(default="", metadata={"alias": ""})

        names = [external_name(f) for f in fields(Tagged)]
        assert names == ["userName", "b", "c"]

    def test_rule_field_merges_metadata(self):
        """Test that extra metadata is preserved."""

        @dataclass
        class Item:
            sku: str = rule_field("required", alias="SKU", default="", metadata={"doc": "stock unit"})

        metadata = dict(fields(Item)[0].metadata)
        assert metadata == {"doc": "stock unit", "validate": "required", "alias": "SKU"}
