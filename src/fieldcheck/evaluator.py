"""Rule evaluation over records.

The evaluator is the one place where a value meets its constraints, and
both authoring styles (rule specs and code-built schemas) go through
``evaluate_field``:

    - an empty value on a required field records one required violation
      and nothing else
    - an empty value on an optional field is not checked
    - otherwise every constraint runs in declaration order and each
      failure records exactly one message
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

from .coercion import is_empty
from .constraints import REQUIRED_MESSAGE, FieldConstraints
from .fields import iter_record_fields

if TYPE_CHECKING:
    from .result import ValidationResult
    from .schema import Schema
    from .validator import Validator

logger = logging.getLogger(__name__)


class ErrorSink(Protocol):
    def add_error(self, field: str, message: str) -> None: ...


def evaluate_field(
    validator: ErrorSink,
    field: str,
    value: Any,
    constraints: FieldConstraints,
) -> None:
    """Evaluate one field's constraints and record any violations.

    Args:
        validator: Receives violations through ``add_error``
        field: Field name used as the error key
        value: Field value
        constraints: Constraints in declaration order
    """
    if is_empty(value):
        if constraints.required:
            validator.add_error(field, REQUIRED_MESSAGE)
        return

    for constraint in constraints:
        message = constraint.check(value)
        if message is not None:
            validator.add_error(field, message)


def evaluate(
    schema: Schema,
    record: Mapping[str, Any] | Any,
    validator: Validator | None = None,
) -> ValidationResult:
    """Validate a record against a schema.

    Mapping records are walked in schema declaration order; a required
    field missing from the mapping is reported as required, an optional one
    is skipped. Dataclass records are walked in field declaration order and
    each field is matched to the schema by its external name.

    Args:
        schema: Field constraints to apply
        record: A mapping or a dataclass instance
        validator: Session to record into. A fresh one is used if omitted.

    Returns:
        ValidationResult for the session

    Raises:
        TypeError: If the schema is None or the record is neither a mapping
            nor a dataclass instance
    """
    if schema is None:
        raise TypeError("A schema is required to evaluate a record")

    if validator is None:
        from .validator import Validator

        validator = Validator()

    if isinstance(record, Mapping):
        for name, constraints in schema.fields.items():
            if name in record:
                evaluate_field(validator, name, record[name], constraints)
            elif constraints.required:
                validator.add_error(name, REQUIRED_MESSAGE)
    else:
        for record_field in iter_record_fields(record):
            constraints = schema.get(record_field.external_name)
            if constraints is None:
                logger.debug("No constraints for field '%s'", record_field.external_name)
                continue
            evaluate_field(validator, record_field.external_name, record_field.value, constraints)

    return validator.result()
