"""Rule annotations on dataclass fields.

A dataclass opts into annotation-driven validation by putting a rule spec
under the ``validate`` metadata key. The ``alias`` key gives the field's
external name, the one used for error keys and schema lookups::

    @dataclass
    class Signup:
        email: str = rule_field("required|email")
        display_name: str = rule_field("max_len:40", alias="displayName", default="")

``rule_field`` is a thin wrapper over ``dataclasses.field``; writing
``field(metadata={"validate": "required|email"})`` by hand works the same.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

VALIDATE_KEY = "validate"
ALIAS_KEY = "alias"
IGNORED_ALIAS = "-"


@dataclass(frozen=True)
class RecordField:
    """One field of a record, as seen by the evaluator."""

    name: str
    external_name: str
    value: Any
    rules: str | None = None


def rule_field(rules: str | None = None, *, alias: str | None = None, **kwargs: Any) -> Any:
    """Declare a dataclass field carrying a rule spec.

    Args:
        rules: Rule spec in the compact grammar, e.g. ``"required|min_len:3"``
        alias: External name used in error keys and schema lookups
        **kwargs: Passed through to ``dataclasses.field`` (``default``,
            ``default_factory``, ``metadata``, ...)

    Returns:
        A ``dataclasses.Field``
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    if rules is not None:
        metadata[VALIDATE_KEY] = rules
    if alias is not None:
        metadata[ALIAS_KEY] = alias
    return dataclasses.field(metadata=metadata, **kwargs)


def external_name(dc_field: dataclasses.Field) -> str:
    """Resolve a field's external name.

    The alias may carry options after a comma (``"userName,omitempty"``);
    only the part before the comma is the name. An empty alias or ``"-"``
    falls back to the declared name.
    """
    alias = dc_field.metadata.get(ALIAS_KEY)
    if isinstance(alias, str):
        name = alias.split(",", 1)[0].strip()
        if name and name != IGNORED_ALIAS:
            return name
    return dc_field.name


def iter_record_fields(record: Any) -> Iterator[RecordField]:
    """Yield a dataclass instance's fields in declaration order.

    Raises:
        TypeError: If ``record`` is not a dataclass instance
    """
    if not dataclasses.is_dataclass(record) or isinstance(record, type):
        raise TypeError(f"Expected a dataclass instance, got {type(record).__name__}")

    for dc_field in dataclasses.fields(record):
        rules = dc_field.metadata.get(VALIDATE_KEY)
        yield RecordField(
            name=dc_field.name,
            external_name=external_name(dc_field),
            value=getattr(record, dc_field.name),
            rules=rules if isinstance(rules, str) else None,
        )
