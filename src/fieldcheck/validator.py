"""Validation session: error aggregation and annotation-driven validation.

A ``Validator`` collects violations for one validation pass. Create one per
call (or ``clear()`` it between sequential passes); it is not meant to be
shared between threads.

Example:
    ```python
    @dataclass
    class Signup:
        email: str = rule_field("required|email")
        age: int = rule_field("min:18", default=0)

    v = Validator()
    if not v.validate(Signup(email="nope", age=12)):
        print(v.error_string())
        # email: Must be a valid email address; age: Must be at least 18
    ```
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .evaluator import evaluate_field
from .fields import iter_record_fields
from .grammar import RuleBuilder, parse_rules
from .result import ValidationResult, Violation, render_violations


class Validator:
    """Accumulates field-scoped violations.

    Args:
        strict: Raise on unknown rule names and malformed rule arguments
            instead of skipping them
        extra_rules: Additional rule names for the grammar, mapped to
            builders taking the raw argument text
    """

    def __init__(
        self,
        strict: bool = False,
        extra_rules: Mapping[str, RuleBuilder] | None = None,
    ):
        self.strict = strict
        self.extra_rules = dict(extra_rules) if extra_rules else None
        self._errors: dict[str, list[str]] = {}

    def add_error(self, field: str, message: str) -> None:
        self._errors.setdefault(field, []).append(message)

    def has_errors(self) -> bool:
        return bool(self._errors)

    def field_errors(self) -> dict[str, list[str]]:
        """Copy of the errors collected so far, keyed by field."""
        return {name: list(messages) for name, messages in self._errors.items()}

    def flat_list(self) -> list[Violation]:
        return [
            Violation(name, message)
            for name, messages in self._errors.items()
            for message in messages
        ]

    def error_string(self) -> str:
        return render_violations(self.flat_list())

    def clear(self) -> None:
        self._errors.clear()

    def result(self) -> ValidationResult:
        if self._errors:
            return ValidationResult.failure(self._errors)
        return ValidationResult.success()

    def validate(self, record: Any) -> bool:
        """Validate a dataclass instance using its fields' rule annotations.

        Fields without a ``validate`` annotation are not checked. Errors are
        keyed by each field's external name.

        Args:
            record: Dataclass instance

        Returns:
            True if no violations were recorded in this session

        Raises:
            TypeError: If ``record`` is not a dataclass instance
        """
        for record_field in iter_record_fields(record):
            if not record_field.rules:
                continue
            constraints = parse_rules(record_field.rules, self.strict, self.extra_rules)
            evaluate_field(self, record_field.external_name, record_field.value, constraints)
        return not self.has_errors()

    def validate_field(self, field: str, value: Any, rules: str) -> bool:
        """Validate a single value against a rule spec.

        Args:
            field: Name to record violations under
            value: Value to check
            rules: Rule spec, e.g. ``"required|min_len:3"``

        Returns:
            True if this call recorded no violation for ``field``
        """
        before = len(self._errors.get(field, ()))
        evaluate_field(self, field, value, parse_rules(rules, self.strict, self.extra_rules))
        return len(self._errors.get(field, ())) == before
