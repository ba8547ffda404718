"""Rule constructors for building schemas in code.

Each function returns a constraint object for ``Schema.field``::

    schema = (
        Schema("signup")
        .field("email", rules.required(), rules.email())
        .field("age", rules.minimum(18), rules.maximum(120))
        .field("role", rules.one_of("admin", "user"))
    )

The objects are the same classes the rule grammar produces, so a schema
built here and one built from ``"required|email"`` strings behave
identically.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from .coercion import to_text
from .constraints import (
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
from .exceptions import RuleSyntaxError

logger = logging.getLogger(__name__)


def required() -> Required:
    return Required()


def minimum(bound: int) -> Min:
    return Min(bound)


def maximum(bound: int) -> Max:
    return Max(bound)


def min_length(length: int) -> MinLength:
    return MinLength(length)


def max_length(length: int) -> MaxLength:
    return MaxLength(length)


def pattern(expression: str) -> Pattern | None:
    """Build a regular expression constraint.

    A malformed expression is logged and yields None, which
    ``Schema.field`` skips; the rest of the field's constraints still apply.

    Args:
        expression: Regular expression searched for in the value's text form

    Returns:
        Pattern constraint, or None if the expression does not compile
    """
    try:
        return Pattern(expression)
    except RuleSyntaxError as e:
        logger.warning("Dropping regex constraint: %s", e)
        return None


def email() -> Email:
    return Email()


def url() -> URL:
    return URL()


def alpha() -> Alpha:
    return Alpha()


def alphanum() -> AlphaNum:
    return AlphaNum()


def numeric() -> Numeric:
    return Numeric()


def uuid() -> UUID:
    return UUID()


def ip() -> IP:
    return IP()


def ipv4() -> IPv4:
    return IPv4()


def ipv6() -> IPv6:
    return IPv6()


def one_of(*values: Any) -> OneOf:
    """Value's text form must equal one of ``values``."""
    return OneOf(values)


def not_one_of(*values: Any) -> NotOneOf:
    return NotOneOf(values)


def equal(expected: Any) -> Equal:
    return Equal(to_text(expected)[0])


def not_equal(expected: Any) -> NotEqual:
    return NotEqual(to_text(expected)[0])


def custom(predicate: Callable[[Any], Any], message: str | None = None) -> Custom:
    """Wrap a predicate as a constraint.

    Args:
        predicate: Called with the raw value. Returns None/True to pass, a
            string or False to fail, or raises ValueError/TypeError to fail
            with the exception's text
        message: Optional message that replaces the predicate's own

    Returns:
        Custom constraint
    """
    return Custom(predicate, message)


def time_format(layout: str) -> TimeFormat:
    """Value must parse with a ``strptime`` layout such as ``"%d/%m/%Y"``."""
    return TimeFormat(layout)


def time_after(boundary: datetime) -> TimeAfter:
    return TimeAfter(boundary)


def time_before(boundary: datetime) -> TimeBefore:
    return TimeBefore(boundary)


def date_only() -> DateOnly:
    return DateOnly()


def datetime_only() -> DateTimeOnly:
    return DateTimeOnly()


def time_only() -> TimeOnly:
    return TimeOnly()


__all__ = [
    "required",
    "minimum",
    "maximum",
    "min_length",
    "max_length",
    "pattern",
    "email",
    "url",
    "alpha",
    "alphanum",
    "numeric",
    "uuid",
    "ip",
    "ipv4",
    "ipv6",
    "one_of",
    "not_one_of",
    "equal",
    "not_equal",
    "custom",
    "time_format",
    "time_after",
    "time_before",
    "date_only",
    "datetime_only",
    "time_only",
]
