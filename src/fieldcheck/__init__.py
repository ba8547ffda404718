"""fieldcheck - field-scoped validation for records.

Constraints can be written two ways, and both evaluate identically:
- compact rule specs (``"required|min_len:3|email"``) on dataclass fields
  or via ``Schema.rules``
- builder functions from ``fieldcheck.rules`` via ``Schema.field``

Invalid input never raises; every violation comes back in a
``ValidationResult`` keyed by field.
"""

from . import rules
from .config import SchemaConfig
from .constraints import Constraint, FieldConstraints
from .evaluator import evaluate, evaluate_field
from .exceptions import (
    CoercionError,
    ConfigurationError,
    FieldcheckError,
    NotFoundError,
    RuleSyntaxError,
    SchemaNotFoundError,
    UnknownRuleError,
    ValidationError,
    ValidationFailure,
)
from .factory import FactoryBase, SchemaFactory, schema_factory
from .fields import rule_field
from .grammar import parse_rules
from .result import ValidationResult, Violation, render_violations
from .schema import Schema
from .validator import Validator

__version__ = "0.1.0"

__all__ = [
    # Validation
    "Schema",
    "Validator",
    "ValidationResult",
    "Violation",
    "render_violations",
    "evaluate",
    "evaluate_field",
    # Authoring
    "rules",
    "rule_field",
    "parse_rules",
    "Constraint",
    "FieldConstraints",
    # Configuration
    "SchemaConfig",
    "SchemaFactory",
    "FactoryBase",
    "schema_factory",
    # Exceptions
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
