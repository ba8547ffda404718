"""Parser for the compact rule grammar.

A rule spec is a ``|``-separated list of tokens, each ``name`` or
``name:argument`` (``name=argument`` is accepted too)::

    "required|min_len:3|max_len:20|alphanum"
    "in:draft, published, archived"

Commas also separate rules when the next piece names a known rule, so the
tag style ``"required,min:18,max:120"`` parses as three rules. Inside an
``in``/``not_in`` option list a piece only starts a new rule when it
carries an argument (``"in:A,B,max_len:1"``).

Parsing is permissive by default: unknown names are ignored and malformed
arguments (a non-integer bound, a regex that does not compile) drop only
that one rule. ``strict=True`` raises instead.
"""

from __future__ import annotations

import functools
import logging
from typing import Callable, Dict, Mapping

from .coercion import to_integer
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
    FieldConstraints,
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
    TimeOnly,
    TimeFormat,
)
from .exceptions import RuleSyntaxError, UnknownRuleError

logger = logging.getLogger(__name__)

RULE_SEPARATOR = "|"
LIST_SEPARATOR = ","
ARGUMENT_SEPARATORS = (":", "=")
LIST_RULES = frozenset({"in", "not_in"})

RuleBuilder = Callable[[str], Constraint]


def _integer_argument(rule: str, argument: str) -> int:
    number, ok = to_integer(argument)
    if not ok:
        raise RuleSyntaxError(rule, "expected an integer argument", argument)
    return number


def _list_argument(argument: str) -> tuple[str, ...]:
    return tuple(option.strip() for option in argument.split(LIST_SEPARATOR))


RULE_BUILDERS: Dict[str, RuleBuilder] = {
    "required": lambda arg: Required(),
    "min": lambda arg: Min(_integer_argument("min", arg)),
    "max": lambda arg: Max(_integer_argument("max", arg)),
    "min_len": lambda arg: MinLength(_integer_argument("min_len", arg)),
    "max_len": lambda arg: MaxLength(_integer_argument("max_len", arg)),
    "email": lambda arg: Email(),
    "url": lambda arg: URL(),
    "alpha": lambda arg: Alpha(),
    "alphanum": lambda arg: AlphaNum(),
    "numeric": lambda arg: Numeric(),
    "uuid": lambda arg: UUID(),
    "ip": lambda arg: IP(),
    "ipv4": lambda arg: IPv4(),
    "ipv6": lambda arg: IPv6(),
    "regex": lambda arg: Pattern(arg),
    "in": lambda arg: OneOf(_list_argument(arg)),
    "not_in": lambda arg: NotOneOf(_list_argument(arg)),
    "date": lambda arg: DateOnly(),
    "datetime": lambda arg: DateTimeOnly(),
    "time": lambda arg: TimeOnly(),
    "time_format": lambda arg: TimeFormat(arg),
    "equal": lambda arg: Equal(arg),
    "not_equal": lambda arg: NotEqual(arg),
}

RULE_NAMES = frozenset(RULE_BUILDERS)


def split_token(token: str) -> tuple[str, str | None]:
    """Split a token into its rule name and optional argument.

    The earliest ``:`` or ``=`` separates the two; whitespace around both
    parts is trimmed.

    Args:
        token: A single rule token, e.g. ``"min_len : 3"``

    Returns:
        Tuple of (name, argument). ``argument`` is None for bare names.
    """
    positions = [token.find(sep) for sep in ARGUMENT_SEPARATORS if sep in token]
    if not positions:
        return token.strip(), None
    position = min(positions)
    return token[:position].strip(), token[position + 1:].strip()


def tokenize(spec: str, known: frozenset[str] = RULE_NAMES) -> list[str]:
    """Split a rule spec into rule tokens.

    Args:
        spec: Full rule spec
        known: Rule names that may start a new token after a comma

    Returns:
        Non-empty, trimmed tokens in spec order
    """
    tokens: list[str] = []
    for chunk in spec.split(RULE_SEPARATOR):
        pieces = chunk.split(LIST_SEPARATOR)
        current = pieces[0]
        for piece in pieces[1:]:
            in_list = split_token(current)[0] in LIST_RULES
            name, argument = split_token(piece)
            starts_rule = name in known and (argument is not None or not in_list)
            if starts_rule:
                tokens.append(current)
                current = piece
            else:
                current = f"{current}{LIST_SEPARATOR}{piece}"
        tokens.append(current)
    return [token.strip() for token in tokens if token.strip()]


def _parse(
    spec: str,
    strict: bool,
    extra_rules: Mapping[str, RuleBuilder] | None = None,
) -> FieldConstraints:
    builders: Mapping[str, RuleBuilder] = RULE_BUILDERS
    if extra_rules:
        builders = {**RULE_BUILDERS, **extra_rules}

    constraints: list[Constraint] = []
    for token in tokenize(spec, frozenset(builders)):
        name, argument = split_token(token)
        builder = builders.get(name)
        if builder is None:
            if strict:
                raise UnknownRuleError(name)
            logger.debug("Ignoring unknown rule '%s' in spec %r", name, spec)
            continue

        try:
            constraints.append(builder(argument if argument is not None else ""))
        except RuleSyntaxError as e:
            if strict:
                raise
            logger.warning("Dropping malformed rule %r: %s", token, e)

    return FieldConstraints(tuple(constraints))


@functools.lru_cache(maxsize=1024)
def _parse_permissive(spec: str) -> FieldConstraints:
    return _parse(spec, strict=False)


def parse_rules(
    spec: str,
    strict: bool = False,
    extra_rules: Mapping[str, RuleBuilder] | None = None,
) -> FieldConstraints:
    """Parse a rule spec into field constraints.

    Permissive parses of the built-in grammar are cached per spec string;
    the result is immutable, so sharing it is safe.

    Args:
        spec: Rule spec, e.g. ``"required|email"``
        strict: If True, raise on unknown names and malformed arguments
        extra_rules: Additional rule names mapped to builders taking the
            raw argument text

    Returns:
        FieldConstraints in spec order

    Raises:
        UnknownRuleError: In strict mode, for an unrecognized rule name
        RuleSyntaxError: In strict mode, for a malformed argument
    """
    if strict or extra_rules:
        return _parse(spec, strict, extra_rules)
    return _parse_permissive(spec)
