"""Constraint implementations.

A constraint is one atomic, immutable rule attached to a field. ``check``
returns the violation message for a value, or ``None`` when the value
passes or the rule does not apply to it. Rules that need a numeric or
textual view of the value coerce it first; a numeric rule applied to a
value with no integer form is skipped, not failed.

Both the rule grammar (``grammar.parse_rules``) and the builder functions
(``fieldcheck.rules``) produce these classes, so the two authoring styles
evaluate identically.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from re import Pattern as RegexPattern
from typing import Any, Callable, ClassVar, Iterator

from . import predicates
from .coercion import (
    DATE_LAYOUT,
    RFC3339_LAYOUT,
    TIME_LAYOUT,
    format_rfc3339,
    is_empty,
    to_integer,
    to_text,
)
from .exceptions import RuleSyntaxError

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = "This field is required"
CUSTOM_FAILED_MESSAGE = "Custom validation failed"


class Constraint(ABC):
    """Base class for all constraints."""

    kind: ClassVar[str]

    @abstractmethod
    def check(self, value: Any) -> str | None:
        """Check a value against this constraint.

        Args:
            value: Value to check (never empty when called by the evaluator)

        Returns:
            Violation message, or None if the value passes
        """


@dataclass(frozen=True)
class Required(Constraint):
    """Value must be present and non-empty."""

    kind: ClassVar[str] = "required"

    def check(self, value: Any) -> str | None:
        if is_empty(value):
            return REQUIRED_MESSAGE
        return None


@dataclass(frozen=True)
class Min(Constraint):
    """Integer form of the value must be at least ``bound``."""

    bound: int
    kind: ClassVar[str] = "min"

    def check(self, value: Any) -> str | None:
        number, ok = to_integer(value)
        if not ok:
            logger.debug("Skipping %s: %r has no integer form", self.kind, value)
            return None
        if number < self.bound:
            return f"Must be at least {self.bound}"
        return None


@dataclass(frozen=True)
class Max(Constraint):
    """Integer form of the value must be at most ``bound``."""

    bound: int
    kind: ClassVar[str] = "max"

    def check(self, value: Any) -> str | None:
        number, ok = to_integer(value)
        if not ok:
            logger.debug("Skipping %s: %r has no integer form", self.kind, value)
            return None
        if number > self.bound:
            return f"Must be at most {self.bound}"
        return None


@dataclass(frozen=True)
class MinLength(Constraint):
    """Text form must have at least ``length`` characters."""

    length: int
    kind: ClassVar[str] = "min_len"

    def __post_init__(self) -> None:
        if self.length < 0:
            raise RuleSyntaxError(self.kind, f"length cannot be negative: {self.length}")

    def check(self, value: Any) -> str | None:
        text, _ = to_text(value)
        if not predicates.length_at_least(text, self.length):
            return f"Must be at least {self.length} characters"
        return None


@dataclass(frozen=True)
class MaxLength(Constraint):
    """Text form must have at most ``length`` characters."""

    length: int
    kind: ClassVar[str] = "max_len"

    def __post_init__(self) -> None:
        if self.length < 0:
            raise RuleSyntaxError(self.kind, f"length cannot be negative: {self.length}")

    def check(self, value: Any) -> str | None:
        text, _ = to_text(value)
        if not predicates.length_at_most(text, self.length):
            return f"Must be at most {self.length} characters"
        return None


@dataclass(frozen=True)
class Pattern(Constraint):
    """Text form must contain a match for a regular expression.

    The expression is compiled on construction; a malformed expression
    raises ``RuleSyntaxError`` here rather than at evaluation time.
    """

    pattern: str | RegexPattern
    regex: RegexPattern = field(init=False, repr=False, compare=False)
    kind: ClassVar[str] = "regex"

    def __post_init__(self) -> None:
        if isinstance(self.pattern, str):
            try:
                compiled = re.compile(self.pattern)
            except re.error as e:
                raise RuleSyntaxError(self.kind, f"invalid pattern: {e}", self.pattern) from e
        else:
            compiled = self.pattern
        object.__setattr__(self, "regex", compiled)

    def check(self, value: Any) -> str | None:
        text, _ = to_text(value)
        if self.regex.search(text) is None:
            return "Does not match required pattern"
        return None


@dataclass(frozen=True)
class _TextFormat(Constraint):
    """Text form must satisfy a fixed format predicate."""

    predicate: ClassVar[Callable[[str], bool]]
    message: ClassVar[str]

    def check(self, value: Any) -> str | None:
        text, _ = to_text(value)
        if not type(self).predicate(text):
            return self.message
        return None


@dataclass(frozen=True)
class Email(_TextFormat):
    kind: ClassVar[str] = "email"
    predicate = staticmethod(predicates.is_email)
    message: ClassVar[str] = "Must be a valid email address"


@dataclass(frozen=True)
class URL(_TextFormat):
    kind: ClassVar[str] = "url"
    predicate = staticmethod(predicates.is_url)
    message: ClassVar[str] = "Must be a valid URL"


@dataclass(frozen=True)
class Alpha(_TextFormat):
    kind: ClassVar[str] = "alpha"
    predicate = staticmethod(predicates.is_alpha)
    message: ClassVar[str] = "Must contain only letters"


@dataclass(frozen=True)
class AlphaNum(_TextFormat):
    kind: ClassVar[str] = "alphanum"
    predicate = staticmethod(predicates.is_alphanum)
    message: ClassVar[str] = "Must contain only letters and numbers"


@dataclass(frozen=True)
class Numeric(_TextFormat):
    kind: ClassVar[str] = "numeric"
    predicate = staticmethod(predicates.is_numeric)
    message: ClassVar[str] = "Must be a valid number"


@dataclass(frozen=True)
class UUID(_TextFormat):
    kind: ClassVar[str] = "uuid"
    predicate = staticmethod(predicates.is_uuid)
    message: ClassVar[str] = "Must be a valid UUID"


@dataclass(frozen=True)
class IP(_TextFormat):
    kind: ClassVar[str] = "ip"
    predicate = staticmethod(predicates.is_ip)
    message: ClassVar[str] = "Must be a valid IP address"


@dataclass(frozen=True)
class IPv4(_TextFormat):
    kind: ClassVar[str] = "ipv4"
    predicate = staticmethod(predicates.is_ipv4)
    message: ClassVar[str] = "Must be a valid IPv4 address"


@dataclass(frozen=True)
class IPv6(_TextFormat):
    kind: ClassVar[str] = "ipv6"
    predicate = staticmethod(predicates.is_ipv6)
    message: ClassVar[str] = "Must be a valid IPv6 address"


def _as_options(kind: str, values: Any) -> tuple[str, ...]:
    options = tuple(to_text(v)[0] for v in values)
    options = tuple(option for option in options if option != "")
    if not options:
        raise RuleSyntaxError(kind, "at least one option is required")
    return options


@dataclass(frozen=True)
class OneOf(Constraint):
    """Text form must equal one of the options.

    Options of any type are stored by their text form.
    """

    options: tuple[str, ...]
    kind: ClassVar[str] = "in"

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", _as_options(self.kind, self.options))

    def check(self, value: Any) -> str | None:
        text, _ = to_text(value)
        if not predicates.is_one_of(text, self.options):
            return f"Must be one of: {', '.join(self.options)}"
        return None


@dataclass(frozen=True)
class NotOneOf(Constraint):
    """Text form must not equal any of the options."""

    options: tuple[str, ...]
    kind: ClassVar[str] = "not_in"

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", _as_options(self.kind, self.options))

    def check(self, value: Any) -> str | None:
        text, _ = to_text(value)
        if not predicates.is_not_one_of(text, self.options):
            return f"Must not be: {text}"
        return None


@dataclass(frozen=True)
class Equal(Constraint):
    """Text form must equal ``expected``."""

    expected: str
    kind: ClassVar[str] = "equal"

    def check(self, value: Any) -> str | None:
        text, _ = to_text(value)
        if text != self.expected:
            return f"Must be equal to {self.expected}"
        return None


@dataclass(frozen=True)
class NotEqual(Constraint):
    """Text form must differ from ``expected``."""

    expected: str
    kind: ClassVar[str] = "not_equal"

    def check(self, value: Any) -> str | None:
        text, _ = to_text(value)
        if text == self.expected:
            return f"Must not be equal to {self.expected}"
        return None


@dataclass(frozen=True)
class TimeFormat(Constraint):
    """Value must parse with a ``strptime`` layout (native datetimes always do)."""

    layout: str
    kind: ClassVar[str] = "time_format"

    def check(self, value: Any) -> str | None:
        if not predicates.matches_layout(value, self.layout):
            return f"Must be a valid date/time in format: {self.layout}"
        return None


@dataclass(frozen=True)
class _FixedLayout(Constraint):
    layout: ClassVar[str]
    message: ClassVar[str]

    def check(self, value: Any) -> str | None:
        if not predicates.matches_layout(value, self.layout):
            return self.message
        return None


@dataclass(frozen=True)
class DateOnly(_FixedLayout):
    kind: ClassVar[str] = "date"
    layout: ClassVar[str] = DATE_LAYOUT
    message: ClassVar[str] = "Must be a valid date (YYYY-MM-DD)"


@dataclass(frozen=True)
class DateTimeOnly(_FixedLayout):
    kind: ClassVar[str] = "datetime"
    layout: ClassVar[str] = RFC3339_LAYOUT
    message: ClassVar[str] = "Must be a valid datetime (RFC3339)"


@dataclass(frozen=True)
class TimeOnly(_FixedLayout):
    kind: ClassVar[str] = "time"
    layout: ClassVar[str] = TIME_LAYOUT
    message: ClassVar[str] = "Must be a valid time (HH:MM:SS)"


@dataclass(frozen=True)
class TimeAfter(Constraint):
    """A native datetime value must be strictly after ``boundary``.

    Values that are not datetimes are not checked; text is never parsed.
    """

    boundary: datetime
    kind: ClassVar[str] = "after"

    def check(self, value: Any) -> str | None:
        if not isinstance(value, datetime):
            return None
        if not predicates.is_after(value, self.boundary):
            return f"Must be after {format_rfc3339(self.boundary)}"
        return None


@dataclass(frozen=True)
class TimeBefore(Constraint):
    """A native datetime value must be strictly before ``boundary``."""

    boundary: datetime
    kind: ClassVar[str] = "before"

    def check(self, value: Any) -> str | None:
        if not isinstance(value, datetime):
            return None
        if not predicates.is_before(value, self.boundary):
            return f"Must be before {format_rfc3339(self.boundary)}"
        return None


@dataclass(frozen=True)
class Custom(Constraint):
    """Constraint backed by a caller-supplied predicate.

    The predicate receives the raw value and may:
        - return ``None``, ``True`` or an empty string to pass
        - return a string describing the failure
        - return ``False`` to fail with a generic message
        - raise ``ValueError`` or ``TypeError``, whose text becomes the message

    When ``message`` is set it replaces whatever the predicate reported.
    """

    predicate: Callable[[Any], Any]
    message: str | None = None
    kind: ClassVar[str] = "custom"

    def check(self, value: Any) -> str | None:
        try:
            outcome = self.predicate(value)
        except (ValueError, TypeError) as e:
            outcome = str(e) or CUSTOM_FAILED_MESSAGE

        if outcome is None or outcome is True or outcome == "":
            return None
        if outcome is False:
            description = CUSTOM_FAILED_MESSAGE
        else:
            description = str(outcome)
        return self.message or description


@dataclass(frozen=True)
class FieldConstraints:
    """Ordered, immutable set of constraints for one field."""

    constraints: tuple[Constraint, ...] = ()

    @property
    def required(self) -> bool:
        return any(isinstance(c, Required) for c in self.constraints)

    def with_constraint(self, constraint: Constraint) -> FieldConstraints:
        """Return a copy with ``constraint`` appended."""
        return FieldConstraints(self.constraints + (constraint,))

    def __iter__(self) -> Iterator[Constraint]:
        return iter(self.constraints)

    def __len__(self) -> int:
        return len(self.constraints)

    def __bool__(self) -> bool:
        return bool(self.constraints)
