"""Schema definition with fluent API for record validation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from .constraints import Constraint, FieldConstraints
from .evaluator import evaluate
from .grammar import parse_rules
from .result import ValidationResult

logger = logging.getLogger(__name__)


class Schema:
    """Named mapping from field name to constraints.

    Fields are validated in the order they were declared. Declaring a field
    again replaces its constraints.

    Example:
        ```python
        schema = (
            Schema("user")
            .field("email", rules.required(), rules.email())
            .rules("age", "min:18|max:120")
        )
        result = schema.validate({"email": "a@b.co", "age": 30})
        ```
    """

    def __init__(self, name: str = "unnamed"):
        """Initialize schema.

        Args:
            name: Schema name for identification
        """
        self.name = name
        self.fields: dict[str, FieldConstraints] = {}
        self.description: str | None = None

    def field(self, name: str, *constraints: Constraint | None) -> Schema:
        """Set a field's constraints (fluent API).

        ``None`` entries are skipped, so a builder that rejects its
        arguments (``rules.pattern`` with a bad expression) drops only
        itself.

        Args:
            name: Field name
            *constraints: Constraints in evaluation order

        Returns:
            Self for chaining
        """
        kept: list[Constraint] = []
        for constraint in constraints:
            if constraint is None:
                logger.debug("Skipping empty constraint for field '%s'", name)
                continue
            if not isinstance(constraint, Constraint):
                raise TypeError(
                    f"Field '{name}' expects Constraint objects, got {type(constraint).__name__}"
                )
            kept.append(constraint)

        self.fields[name] = FieldConstraints(tuple(kept))
        return self

    def rules(self, name: str, spec: str, strict: bool = False) -> Schema:
        """Set a field's constraints from a rule spec (fluent API).

        Args:
            name: Field name
            spec: Rule spec, e.g. ``"required|email"``
            strict: Raise on unknown or malformed rules instead of skipping

        Returns:
            Self for chaining
        """
        self.fields[name] = parse_rules(spec, strict=strict)
        return self

    def with_description(self, description: str) -> Schema:
        self.description = description
        return self

    def get(self, name: str) -> FieldConstraints | None:
        return self.fields.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __repr__(self) -> str:
        return f"Schema(name={self.name!r}, fields={list(self.fields)!r})"

    def validate(self, record: Mapping[str, Any] | Any) -> ValidationResult:
        """Validate a record against this schema.

        Args:
            record: Mapping or dataclass instance to validate

        Returns:
            ValidationResult with validation outcome
        """
        return evaluate(self, record)

    def validate_many(
        self,
        records: Iterable[Mapping[str, Any] | Any],
        stop_on_error: bool = False,
    ) -> list[ValidationResult]:
        """Validate multiple records.

        Args:
            records: Records to validate
            stop_on_error: If True, stop after the first invalid record

        Returns:
            List of ValidationResults, one per validated record
        """
        results = []

        for record in records:
            result = self.validate(record)
            results.append(result)

            if not result.valid and stop_on_error:
                break

        return results

    def to_dict(self) -> dict[str, Any]:
        """Describe the schema: each field's constraint kinds in order."""
        return {
            "name": self.name,
            "description": self.description,
            "fields": {
                name: [constraint.kind for constraint in constraints]
                for name, constraints in self.fields.items()
            },
        }
