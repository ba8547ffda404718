"""Exception hierarchy for fieldcheck.

Ordinary invalid input never raises: violations are returned as data in a
``ValidationResult``. The exceptions below cover malformed rule
specifications (raised only when strict parsing is requested), coercion
failures inside the coercion layer, configuration problems, and the
opt-in ``ValidationFailure`` produced by
``ValidationResult.raise_for_errors()``.

Example:
    ```python
    from fieldcheck.exceptions import FieldcheckError, RuleSyntaxError

    try:
        parse_rules("min:abc", strict=True)
    except RuleSyntaxError as e:
        logger.error(f"Bad rule: {e}")
        logger.error(f"Context: {e.context}")
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .result import Violation


class FieldcheckError(Exception):
    """Base exception for all fieldcheck errors.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (rule names, fields, etc.)
        details: Alternative to context (takes precedence when both are given)
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class ValidationError(FieldcheckError):
    """Raised when data fails validation and the caller asked for an exception."""

    pass


class ConfigurationError(FieldcheckError):
    """Raised when a schema or rule configuration is invalid."""

    pass


class NotFoundError(FieldcheckError):
    """Raised when a named item (schema, setting) does not exist."""

    pass


class CoercionError(ValidationError):
    """Raised when a value cannot be converted to the representation a rule needs."""

    def __init__(self, value: Any, target: str, reason: str | None = None):
        self.value = value
        self.target = target
        message = f"Cannot coerce {type(value).__name__} to {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, context={"value": value, "target": target})


class RuleSyntaxError(ConfigurationError):
    """Raised when a rule token or constraint parameter is malformed."""

    def __init__(self, rule: str, message: str, argument: str | None = None):
        self.rule = rule
        self.argument = argument
        super().__init__(
            f"Rule '{rule}': {message}",
            context={"rule": rule, "argument": argument},
        )


class UnknownRuleError(RuleSyntaxError):
    """Raised in strict parsing mode when a rule name is not recognized."""

    def __init__(self, rule: str):
        super().__init__(rule, "unknown rule name")


class ValidationFailure(ValidationError):
    """Raised by ``ValidationResult.raise_for_errors()`` for an invalid result.

    The string form is every violation rendered as ``field: message``,
    joined by ``"; "``.
    """

    def __init__(self, violations: Sequence[Violation]):
        from .result import render_violations

        self.violations = list(violations)
        super().__init__(
            render_violations(self.violations),
            context={"fields": sorted({v.field for v in self.violations})},
        )


class SchemaNotFoundError(NotFoundError):
    """Raised when a configured schema name is not found."""

    def __init__(self, name: str, available: Sequence[str] = ()):
        self.name = name
        super().__init__(
            f"Schema '{name}' not found",
            context={"name": name, "available": list(available)},
        )


__all__ = [
    "FieldcheckError",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
    "CoercionError",
    "RuleSyntaxError",
    "UnknownRuleError",
    "ValidationFailure",
    "SchemaNotFoundError",
]
