"""Tests for constraint objects and their messages."""

from datetime import date, datetime, timezone

import pytest

from fieldcheck.constraints import (
    IP,
    URL,
    UUID,
    Alpha,
    AlphaNum,
    Custom,
    DateOnly,
    DateTimeOnly,
    Email,
    Equal,
    FieldConstraints,
    IPv4,
    IPv6,
    Max,
    MaxLength,
    Min,
    MinLength,
    NotEqual,
    NotOneOf,
    Numeric,
    OneOf,
    Pattern,
    Required,
    TimeAfter,
    TimeBefore,
    TimeFormat,
    TimeOnly,
)
from fieldcheck.exceptions import RuleSyntaxError


class TestNumericBounds:
    """Test Min and Max."""

    def test_min(self):
        """Test lower bound messages."""
        assert Min(18).check(15) == "Must be at least 18"
        assert Min(18).check(18) is None
        assert Min(18).check("25") is None

    def test_max(self):
        """Test upper bound messages."""
        assert Max(30).check(35) == "Must be at most 30"
        assert Max(30).check(30) is None

    def test_float_is_truncated(self):
        """Test that 17.9 counts as 17."""
        assert Min(18).check(17.9) == "Must be at least 18"

    def test_non_numeric_is_skipped(self, caplog):
        """Test that a value with no integer form is not a violation."""
        caplog.set_level("DEBUG", logger="fieldcheck.constraints")
        assert Min(18).check("eighteen") is None
        assert Max(1).check(True) is None
        assert "no integer form" in caplog.text


class TestLengths:
    """Test MinLength and MaxLength."""

    def test_min_length(self):
        """Test the lower length bound."""
        assert MinLength(3).check("ab") == "Must be at least 3 characters"
        assert MinLength(3).check("abc") is None

    def test_max_length(self):
        """Test the upper length bound on non-text values."""
        assert MaxLength(2).check(123) == "Must be at most 2 characters"
        assert MaxLength(3).check(123) is None

    def test_negative_length_rejected(self):
        """Test construction-time validation."""
        with pytest.raises(RuleSyntaxError):
            MinLength(-1)
        with pytest.raises(RuleSyntaxError):
            MaxLength(-5)


class TestPattern:
    """Test regular expression constraints."""

    def test_search_semantics(self):
        """Test that the pattern may match anywhere unless anchored."""
        assert Pattern("[0-9]").check("abc1") is None
        assert Pattern("^[0-9]+$").check("abc1") == "Does not match required pattern"

    def test_malformed_pattern_raises(self):
        """Test that a bad expression fails at construction."""
        with pytest.raises(RuleSyntaxError) as exc_info:
            Pattern("[unclosed")
        assert exc_info.value.rule == "regex"
        assert exc_info.value.argument == "[unclosed"


class TestTextFormats:
    """Test the fixed-format constraints and their messages."""

    @pytest.mark.parametrize(
        "constraint,bad,good,message",
        [
            (Email(), "invalid", "john@example.com", "Must be a valid email address"),
            (URL(), "not a url", "https://example.com", "Must be a valid URL"),
            (Alpha(), "abc1", "abc", "Must contain only letters"),
            (AlphaNum(), "ab-1", "ab1", "Must contain only letters and numbers"),
            (Numeric(), "12a", "-12.5", "Must be a valid number"),
            (UUID(), "1234", "550e8400-e29b-41d4-a716-446655440000", "Must be a valid UUID"),
            (IP(), "1.2.3", "1.2.3.4", "Must be a valid IP address"),
            (IPv4(), "::1", "10.0.0.1", "Must be a valid IPv4 address"),
            (IPv6(), "10.0.0.1", "fe80:0000:0000:0000:0202:b3ff:fe1e:8329", "Must be a valid IPv6 address"),
        ],
    )
    def test_format(self, constraint, bad, good, message):
        """Test failing and passing values for each format."""
        assert constraint.check(bad) == message
        assert constraint.check(good) is None


class TestMembership:
    """Test OneOf, NotOneOf, Equal and NotEqual."""

    def test_one_of_lists_options(self):
        """Test the options message."""
        assert OneOf(("A", "B", "C")).check("D") == "Must be one of: A, B, C"
        assert OneOf(("A", "B", "C")).check("B") is None

    def test_options_compare_by_text(self):
        """Test that non-text options are stored by text form."""
        constraint = OneOf((1, 2, 3))
        assert constraint.options == ("1", "2", "3")
        assert constraint.check(2) is None
        assert constraint.check("2") is None

    def test_not_one_of_names_value(self):
        """Test that the rejected value is named."""
        assert NotOneOf(("root", "admin")).check("root") == "Must not be: root"
        assert NotOneOf(("root", "admin")).check("jane") is None

    def test_empty_options_rejected(self):
        """Test construction-time validation of option lists."""
        with pytest.raises(RuleSyntaxError):
            OneOf(())
        with pytest.raises(RuleSyntaxError):
            NotOneOf(("",))

    def test_equal(self):
        """Test text equality."""
        assert Equal("yes").check("no") == "Must be equal to yes"
        assert Equal("1").check(1) is None
        assert NotEqual("admin").check("admin") == "Must not be equal to admin"
        assert NotEqual("admin").check("jane") is None


class TestTemporal:
    """Test layout and ordering constraints."""

    def test_fixed_layouts(self):
        """Test date, datetime and time messages."""
        assert DateOnly().check("2024-02-30") == "Must be a valid date (YYYY-MM-DD)"
        assert DateOnly().check("2024-02-29") is None
        assert DateTimeOnly().check("2023-01-01 12:00:00") == "Must be a valid datetime (RFC3339)"
        assert DateTimeOnly().check("2023-01-01T12:00:00Z") is None
        assert TimeOnly().check("25:00:00") == "Must be a valid time (HH:MM:SS)"
        assert TimeOnly().check("12:30:00") is None

    @pytest.mark.parametrize(
        "constraint, value",
        [
            (DateOnly(), "2023-1-5"),
            (DateOnly(), "2023-13-01"),
            (DateOnly(), "2023-01-05T00:00:00Z"),
            (TimeOnly(), "1:2:3"),
            (TimeOnly(), "24:00:00"),
            (TimeOnly(), "12:30"),
            (DateTimeOnly(), "2023-01-01T00:00:00+25:00"),
            (DateTimeOnly(), "2023-01-01T00:00:00+05:60"),
            (DateTimeOnly(), "2023-01-01T24:00:00Z"),
            (DateTimeOnly(), "2023-1-1T00:00:00Z"),
        ],
    )
    def test_malformed_layout_values(self, constraint, value):
        """Test that malformed text fails with the layout message."""
        assert constraint.check(value) == constraint.message

    def test_native_values_satisfy_layouts(self):
        """Test that datetime and date objects pass layout checks."""
        assert DateOnly().check(date(2024, 1, 1)) is None
        assert TimeOnly().check(datetime(2024, 1, 1, 12)) is None

    def test_custom_layout(self):
        """Test a caller-supplied strptime layout."""
        constraint = TimeFormat("%d/%m/%Y")
        assert constraint.check("31/12/2024") is None
        assert constraint.check("2024-12-31") == "Must be a valid date/time in format: %d/%m/%Y"

    def test_after_and_before(self):
        """Test strict ordering against a fixed boundary."""
        boundary = datetime(2024, 1, 1, tzinfo=timezone.utc)
        earlier = datetime(2023, 6, 1, tzinfo=timezone.utc)
        later = datetime(2024, 6, 1, tzinfo=timezone.utc)

        assert TimeAfter(boundary).check(earlier) == "Must be after 2024-01-01T00:00:00Z"
        assert TimeAfter(boundary).check(later) is None
        assert TimeAfter(boundary).check(boundary) == "Must be after 2024-01-01T00:00:00Z"
        assert TimeBefore(boundary).check(later) == "Must be before 2024-01-01T00:00:00Z"
        assert TimeBefore(boundary).check(earlier) is None

    def test_ordering_ignores_text(self):
        """Test that only native datetimes are compared."""
        boundary = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert TimeAfter(boundary).check("2000-01-01T00:00:00Z") is None


class TestCustom:
    """Test predicate-backed constraints."""

    def test_passing_outcomes(self):
        """Test None, True and empty string all pass."""
        assert Custom(lambda v: None).check("x") is None
        assert Custom(lambda v: True).check("x") is None
        assert Custom(lambda v: "").check("x") is None

    def test_failing_outcomes(self):
        """Test message strings, False and raised errors."""
        assert Custom(lambda v: "too plain").check("x") == "too plain"
        assert Custom(lambda v: False).check("x") == "Custom validation failed"

        def must_be_int(value):
            int(value)

        assert Custom(must_be_int).check("abc") == "invalid literal for int() with base 10: 'abc'"

    def test_override_message_wins(self):
        """Test that a configured message replaces every failure description."""
        def raises(value):
            raise ValueError("internal detail")

        assert Custom(lambda v: "own", message="Override").check("x") == "Override"
        assert Custom(raises, message="Override").check("x") == "Override"
        assert Custom(lambda v: True, message="Override").check("x") is None


class TestFieldConstraints:
    """Test the per-field constraint container."""

    def test_required_flag_and_order(self):
        """Test required detection and declaration order."""
        constraints = FieldConstraints((MinLength(3), Required()))
        assert constraints.required is True
        assert [c.kind for c in constraints] == ["min_len", "required"]
        assert len(constraints) == 2

    def test_empty_container(self):
        """Test that an empty container is falsy and optional."""
        constraints = FieldConstraints()
        assert not constraints
        assert constraints.required is False

    def test_with_constraint_returns_copy(self):
        """Test immutability of the container."""
        original = FieldConstraints((Required(),))
        extended = original.with_constraint(Email())
        assert len(original) == 1
        assert len(extended) == 2

    def test_constraints_are_immutable(self):
        """Test that constraint parameters cannot be reassigned."""
        constraint = Min(5)
        with pytest.raises(AttributeError):
            constraint.bound = 10
