"""Type coercion layer for rule evaluation.

Rules see heterogeneous input (text, numbers, bytes, timestamps), so each
rule converts its value into the one representation it needs before
checking it. Numeric and text coercion report failure with a flag instead
of raising, because a value that cannot be coerced makes a rule
inapplicable rather than violated. Timestamp parsing raises
``CoercionError`` so the caller can tell a parse failure from a pass.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from numbers import Number, Real
from typing import Any, Callable, Dict

from .exceptions import CoercionError

DATE_LAYOUT = "%Y-%m-%d"
TIME_LAYOUT = "%H:%M:%S"
# Not a strptime format: full timestamp with mandatory offset, parsed by _parse_rfc3339
RFC3339_LAYOUT = "RFC3339"

_INTEGER_TEXT = re.compile(r"\s*([+-]?[0-9]+)\s*")
_RFC3339 = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})[Tt]"
    r"([0-9]{2}):([0-9]{2}):([0-9]{2})(\.[0-9]+)?"
    r"([Zz]|[+-][0-9]{2}:[0-9]{2})"
)
# strptime accepts unpadded fields; the fixed layouts require exact widths
_LAYOUT_SHAPES = {
    DATE_LAYOUT: re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}"),
    TIME_LAYOUT: re.compile(r"[0-9]{2}:[0-9]{2}:[0-9]{2}"),
}


def to_integer(value: Any) -> tuple[int, bool]:
    """Convert a value to an integer.

    Integers pass through, other real numbers are truncated toward zero and
    text of base-10 digits (optionally signed, optionally padded with
    whitespace) is parsed. Booleans are not numbers here.

    Args:
        value: Value to convert

    Returns:
        Tuple of (integer, ok). ``ok`` is False when the value has no integer form.
    """
    if isinstance(value, bool):
        return 0, False
    if isinstance(value, int):
        return value, True
    if isinstance(value, (Real, Decimal)):
        as_float = float(value)
        if math.isnan(as_float) or math.isinf(as_float):
            return 0, False
        return int(value), True
    if isinstance(value, str):
        match = _INTEGER_TEXT.fullmatch(value)
        if match:
            return int(match.group(1)), True
    return 0, False


def to_text(value: Any) -> tuple[str, bool]:
    """Convert a value to text. Always succeeds.

    Booleans render as ``"true"``/``"false"``, so they compare equal to the
    options written in rule specs such as ``in:true,false``.

    Args:
        value: Value to convert

    Returns:
        Tuple of (text, True)
    """
    if isinstance(value, str):
        return value, True
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace"), True
    if isinstance(value, bool):
        return ("true" if value else "false"), True
    return str(value), True


def to_timestamp(value: Any, layout: str) -> datetime:
    """Convert a value to a datetime using a layout.

    Native datetimes (and dates) pass through untouched; anything else is
    rendered as text and parsed.

    Args:
        value: Value to convert
        layout: A ``strptime`` format, or ``RFC3339_LAYOUT``

    Returns:
        Parsed datetime

    Raises:
        CoercionError: If the text does not match the layout
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())

    text, _ = to_text(value)
    if layout == RFC3339_LAYOUT:
        return _parse_rfc3339(text)
    shape = _LAYOUT_SHAPES.get(layout)
    if shape is not None and not shape.fullmatch(text):
        raise CoercionError(value, "datetime", f"does not match layout {layout}")
    try:
        return datetime.strptime(text, layout)
    except ValueError as e:
        raise CoercionError(value, "datetime", str(e)) from e


def _parse_rfc3339(text: str) -> datetime:
    match = _RFC3339.fullmatch(text)
    if not match:
        raise CoercionError(text, "datetime", "not an RFC3339 timestamp")

    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction, offset = match.group(7), match.group(8)
    microsecond = int((fraction[1:] + "000000")[:6]) if fraction else 0

    if offset in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        if hours > 23 or minutes > 59:
            raise CoercionError(text, "datetime", f"offset out of range: {offset}")
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))

    try:
        return datetime(year, month, day, hour, minute, second, microsecond, tzinfo=tz)
    except ValueError as e:
        raise CoercionError(text, "datetime", str(e)) from e


def format_rfc3339(moment: datetime) -> str:
    """Render a datetime at second precision, using ``Z`` for UTC."""
    if moment.tzinfo is not None and moment.utcoffset() == timedelta(0):
        return moment.strftime("%Y-%m-%dT%H:%M:%S") + "Z"
    return moment.isoformat(timespec="seconds")


def is_empty(value: Any) -> bool:
    """Check whether a value counts as absent.

    ``None``, zero-length text, bytes and collections, and the numeric zero
    value of the value's own type (``0``, ``0.0``, ``False``) are empty.
    """
    if value is None:
        return True
    if isinstance(value, (str, bytes, bytearray, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    if isinstance(value, Number):
        return value == 0
    if hasattr(value, "__len__"):
        try:
            return len(value) == 0
        except TypeError:
            return False
    return False


class TypeCoercer:
    """Coerce values to a target type, raising on failure.

    A thin object wrapper over the module functions for callers that want
    exception-style coercion.
    """

    def __init__(self) -> None:
        self._coercion_map: Dict[Any, Callable[[Any], Any]] = {
            int: self._to_int,
            str: self._to_str,
        }

    def coerce(self, value: Any, target_type: type, layout: str = RFC3339_LAYOUT) -> Any:
        """Coerce a value to the target type.

        Args:
            value: Value to coerce
            target_type: One of ``int``, ``str`` or ``datetime``
            layout: Layout used when the target is ``datetime``

        Returns:
            Coerced value

        Raises:
            CoercionError: If coercion fails or the target type is unsupported
        """
        if target_type is datetime:
            return to_timestamp(value, layout)
        coercion_func = self._coercion_map.get(target_type)
        if coercion_func is None:
            raise CoercionError(value, getattr(target_type, "__name__", str(target_type)),
                                "unsupported target type")
        return coercion_func(value)

    def _to_int(self, value: Any) -> int:
        number, ok = to_integer(value)
        if not ok:
            raise CoercionError(value, "int")
        return number

    def _to_str(self, value: Any) -> str:
        text, _ = to_text(value)
        return text
