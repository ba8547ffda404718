"""Validation result types.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .exceptions import ValidationFailure

VIOLATION_SEPARATOR = "; "


@dataclass(frozen=True)
class Violation:
    """A single failed constraint, scoped to a field."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


def render_violations(violations: Iterable[Violation]) -> str:
    """Render violations as ``field: message`` pairs joined by ``"; "``."""
    return VIOLATION_SEPARATOR.join(str(v) for v in violations)


@dataclass
class ValidationResult:
    """Outcome of validating one record.

    ``errors`` maps each failing field to its messages. Fields appear in the
    order their first violation was recorded; messages within a field keep
    constraint declaration order.
    """

    valid: bool
    errors: dict[str, list[str]] = field(default_factory=dict)

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.valid

    def flat_list(self) -> list[Violation]:
        """Flatten errors into ``Violation`` pairs, field by field."""
        return [
            Violation(field_name, message)
            for field_name, messages in self.errors.items()
            for message in messages
        ]

    def error_string(self) -> str:
        return render_violations(self.flat_list())

    def field_errors(self, name: str) -> list[str]:
        """Messages recorded for one field (empty if it passed)."""
        return list(self.errors.get(name, ()))

    def merge(self, other: ValidationResult) -> ValidationResult:
        """Combine two results; messages for a shared field are concatenated.

        Args:
            other: Another ValidationResult to merge with this one

        Returns:
            New ValidationResult with combined state
        """
        errors = {name: list(messages) for name, messages in self.errors.items()}
        for name, messages in other.errors.items():
            errors.setdefault(name, []).extend(messages)
        return ValidationResult(valid=self.valid and other.valid, errors=errors)

    def raise_for_errors(self) -> ValidationResult:
        """Raise ``ValidationFailure`` if the result is invalid.

        Returns:
            Self, when valid, for chaining

        Raises:
            ValidationFailure: With every violation attached
        """
        if not self.valid:
            raise ValidationFailure(self.flat_list())
        return self

    def to_dict(self) -> dict[str, object]:
        return {
            "valid": self.valid,
            "errors": {name: list(messages) for name, messages in self.errors.items()},
        }

    @classmethod
    def success(cls) -> ValidationResult:
        return cls(valid=True, errors={})

    @classmethod
    def failure(cls, errors: dict[str, list[str]]) -> ValidationResult:
        """Create a failed result from a field-to-messages mapping.

        Args:
            errors: Messages keyed by field name

        Returns:
            Failed ValidationResult
        """
        return cls(valid=False, errors={name: list(messages) for name, messages in errors.items()})
