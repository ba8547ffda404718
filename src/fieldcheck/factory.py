"""Factory classes for building schemas from configuration."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from .coercion import RFC3339_LAYOUT, to_integer, to_text, to_timestamp
from .constraints import (
    IP,
    URL,
    UUID,
    Alpha,
    AlphaNum,
    Constraint,
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
from .exceptions import CoercionError, RuleSyntaxError, UnknownRuleError
from .grammar import parse_rules
from .schema import Schema

logger = logging.getLogger(__name__)


class FactoryBase:
    """Base class for factory objects.

    Factories that inherit from this should implement
    the create method.
    """

    def create(self, **config: Any) -> Any:
        """Create an object from configuration.

        Args:
            **config: Configuration parameters

        Returns:
            Created object
        """
        raise NotImplementedError("Subclasses must implement create method")


def _param(kind: str, config: dict[str, Any], key: str) -> Any:
    if key not in config:
        raise RuleSyntaxError(kind, f"missing '{key}' parameter")
    return config[key]


def _int_param(kind: str, config: dict[str, Any], key: str = "value") -> int:
    raw = _param(kind, config, key)
    number, ok = to_integer(raw)
    if not ok:
        raise RuleSyntaxError(kind, f"'{key}' must be an integer", to_text(raw)[0])
    return number


def _list_param(kind: str, config: dict[str, Any]) -> tuple[Any, ...]:
    values = _param(kind, config, "values")
    if isinstance(values, str):
        return tuple(v.strip() for v in values.split(","))
    return tuple(values)


def _time_param(kind: str, config: dict[str, Any]) -> Any:
    raw = _param(kind, config, "value")
    try:
        return to_timestamp(raw, RFC3339_LAYOUT)
    except CoercionError as e:
        raise RuleSyntaxError(kind, str(e), to_text(raw)[0]) from e


ConstraintBuilder = Callable[[Dict[str, Any]], Constraint]

CONSTRAINT_BUILDERS: Dict[str, ConstraintBuilder] = {
    "required": lambda c: Required(),
    "min": lambda c: Min(_int_param("min", c)),
    "max": lambda c: Max(_int_param("max", c)),
    "min_len": lambda c: MinLength(_int_param("min_len", c)),
    "max_len": lambda c: MaxLength(_int_param("max_len", c)),
    "regex": lambda c: Pattern(to_text(_param("regex", c, "pattern"))[0]),
    "email": lambda c: Email(),
    "url": lambda c: URL(),
    "alpha": lambda c: Alpha(),
    "alphanum": lambda c: AlphaNum(),
    "numeric": lambda c: Numeric(),
    "uuid": lambda c: UUID(),
    "ip": lambda c: IP(),
    "ipv4": lambda c: IPv4(),
    "ipv6": lambda c: IPv6(),
    "in": lambda c: OneOf(_list_param("in", c)),
    "not_in": lambda c: NotOneOf(_list_param("not_in", c)),
    "equal": lambda c: Equal(to_text(_param("equal", c, "value"))[0]),
    "not_equal": lambda c: NotEqual(to_text(_param("not_equal", c, "value"))[0]),
    "date": lambda c: DateOnly(),
    "datetime": lambda c: DateTimeOnly(),
    "time": lambda c: TimeOnly(),
    "time_format": lambda c: TimeFormat(_param("time_format", c, "layout")),
    "after": lambda c: TimeAfter(_time_param("after", c)),
    "before": lambda c: TimeBefore(_time_param("before", c)),
}

# Longer spellings accepted in configuration files
CONSTRAINT_ALIASES = {
    "min_length": "min_len",
    "max_length": "max_len",
    "pattern": "regex",
    "one_of": "in",
    "not_one_of": "not_in",
}


class SchemaFactory(FactoryBase):
    """Factory for creating validation schemas from configuration.

    Configuration Options:
        name (str): Schema name
        description (str): Optional schema description
        strict_rules (bool): Raise on unknown or malformed rules (default: False)
        fields (list): List of field definitions

    Field Definition Options:
        name (str): Field name
        rules (str): Rule spec in the compact grammar
        required (bool): Shorthand for a leading ``required`` constraint
        constraints (list): Constraint definitions, applied after ``rules``

    Example Configuration:
        schemas:
          - name: signup
            strict_rules: false
            fields:
              - name: username
                rules: "required|min_len:3|max_len:20|alphanum"
              - name: role
                constraints:
                  - type: in
                    values: [admin, editor, viewer]
              - name: starts_at
                constraints:
                  - type: after
                    value: "2024-01-01T00:00:00Z"
    """

    def create(self, **config: Any) -> Schema:
        """Create a Schema instance from configuration.

        Args:
            **config: Schema configuration

        Returns:
            Schema instance

        Raises:
            RuleSyntaxError: With ``strict_rules``, for any unknown or
                malformed constraint
        """
        name = config.get("name", "unnamed_schema")
        strict = bool(config.get("strict_rules", False))
        description = config.get("description")

        logger.info(f"Creating schema: {name}")

        schema = Schema(name)
        if description:
            schema.with_description(description)

        for field_config in config.get("fields", []):
            self._add_field_to_schema(schema, field_config, strict)

        return schema

    def _add_field_to_schema(
        self, schema: Schema, field_config: dict[str, Any], strict: bool
    ) -> None:
        field_name = field_config.get("name")
        if not field_name:
            logger.warning("Field configuration missing 'name', skipping")
            return

        constraints: list[Constraint] = []
        rules_spec = field_config.get("rules")
        if rules_spec:
            constraints.extend(parse_rules(rules_spec, strict=strict))

        constraints.extend(self._build_constraints(field_config.get("constraints", []), strict))

        if field_config.get("required") and not any(isinstance(c, Required) for c in constraints):
            constraints.insert(0, Required())

        schema.field(field_name, *constraints)

    def _build_constraints(
        self, constraint_configs: list[dict[str, Any]], strict: bool
    ) -> list[Constraint]:
        """Build constraint objects from configuration.

        Args:
            constraint_configs: List of constraint configurations
            strict: Raise instead of skipping unknown or malformed entries

        Returns:
            List of Constraint objects
        """
        constraints: list[Constraint] = []

        for config in constraint_configs:
            constraint_type = str(config.get("type", "")).lower()
            constraint_type = CONSTRAINT_ALIASES.get(constraint_type, constraint_type)

            builder = CONSTRAINT_BUILDERS.get(constraint_type)
            if builder is None:
                if strict:
                    raise UnknownRuleError(constraint_type)
                logger.warning(f"Unknown constraint type: {constraint_type}")
                continue

            try:
                constraints.append(builder(config))
            except RuleSyntaxError as e:
                if strict:
                    raise
                logger.warning(f"Skipping malformed constraint: {e}")

        return constraints


# Create singleton instance for registration
schema_factory = SchemaFactory()
