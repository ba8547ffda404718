"""Stateless predicates behind every rule.

Each predicate takes an already-coerced value and answers pass/fail. The
compiled patterns are module constants shared read-only by every
validation, so predicates are safe to call from any thread.

The ``is_valid_*`` helpers at the bottom are standalone checks for common
formats (phone numbers, card numbers, ISBNs, ...). They are not wired to
rule names; use them from ``rules.custom`` predicates.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from datetime import datetime
from email.utils import parseaddr
from urllib.parse import urlparse

from .coercion import to_timestamp
from .exceptions import CoercionError

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
URL_PATTERN = re.compile(r"(https?://)?([a-zA-Z0-9.-]+\.[a-zA-Z]{2,})(:[0-9]+)?(/.*)?")
ALPHA_PATTERN = re.compile(r"[a-zA-Z]+")
ALPHANUM_PATTERN = re.compile(r"[a-zA-Z0-9]+")
NUMERIC_PATTERN = re.compile(r"-?[0-9]+(\.[0-9]+)?")
UUID_PATTERN = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}")
IPV4_PATTERN = re.compile(r"([0-9]{1,3}\.){3}[0-9]{1,3}")
IPV6_PATTERN = re.compile(r"([0-9a-fA-F]{1,4}:){7}[0-9a-fA-F]{1,4}")

_PASSWORD_SPECIALS = "!@#$%^&*()_+-=[]{}|;:,.<>?"


def is_email(text: str) -> bool:
    return EMAIL_PATTERN.fullmatch(text) is not None


def is_url(text: str) -> bool:
    return URL_PATTERN.fullmatch(text) is not None


def is_alpha(text: str) -> bool:
    return ALPHA_PATTERN.fullmatch(text) is not None


def is_alphanum(text: str) -> bool:
    return ALPHANUM_PATTERN.fullmatch(text) is not None


def is_numeric(text: str) -> bool:
    return NUMERIC_PATTERN.fullmatch(text) is not None


def is_uuid(text: str) -> bool:
    """Check for an RFC 4122 shaped UUID (version 1-5), case-insensitively."""
    return UUID_PATTERN.fullmatch(text.lower()) is not None


def is_ipv4(text: str) -> bool:
    return IPV4_PATTERN.fullmatch(text) is not None


def is_ipv6(text: str) -> bool:
    """Check for a fully expanded IPv6 address (eight groups, no ``::``)."""
    return IPV6_PATTERN.fullmatch(text) is not None


def is_ip(text: str) -> bool:
    return is_ipv4(text) or is_ipv6(text)


def is_one_of(text: str, options: Iterable[str]) -> bool:
    return any(text == option for option in options)


def is_not_one_of(text: str, options: Iterable[str]) -> bool:
    return not is_one_of(text, options)


def length_at_least(text: str, minimum: int) -> bool:
    """Compare the code point count (not the byte count) to a lower bound."""
    return len(text) >= minimum


def length_at_most(text: str, maximum: int) -> bool:
    """Compare the code point count (not the byte count) to an upper bound."""
    return len(text) <= maximum


def matches_layout(value: object, layout: str) -> bool:
    """Check whether a value parses with a time layout."""
    try:
        to_timestamp(value, layout)
    except CoercionError:
        return False
    return True


def _comparable(moment: datetime, other: datetime) -> tuple[datetime, datetime]:
    # Naive datetimes are local time; align awareness before comparing
    if (moment.tzinfo is None) != (other.tzinfo is None):
        return moment.astimezone(), other.astimezone()
    return moment, other


def is_after(moment: datetime, boundary: datetime) -> bool:
    """Check that a timestamp is strictly after a boundary."""
    moment, boundary = _comparable(moment, boundary)
    return moment > boundary


def is_before(moment: datetime, boundary: datetime) -> bool:
    """Check that a timestamp is strictly before a boundary."""
    moment, boundary = _comparable(moment, boundary)
    return moment < boundary


def is_valid_email(email: str) -> bool:
    """Check an address the way a mail header parser would.

    Accepts display-name forms such as ``"Jane <jane@example.com>"``.
    """
    _, address = parseaddr(email)
    if not address or address.count("@") != 1:
        return False
    local, domain = address.split("@")
    return bool(local) and bool(domain) and not any(ch.isspace() for ch in address)


def is_valid_url(url: str) -> bool:
    """Check that a URL has both a scheme and a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def is_valid_phone(phone: str) -> bool:
    """Loose phone check: 10 to 15 digits once punctuation is removed."""
    clean = "".join(ch for ch in phone if "0" <= ch <= "9" or ch == "+")
    return 10 <= len(clean) <= 15


def is_valid_credit_card(card_number: str) -> bool:
    """Check a card number with the Luhn checksum."""
    digits = card_number.replace(" ", "")
    if not re.fullmatch(r"[0-9]+", digits):
        return False

    total = 0
    for index, char in enumerate(reversed(digits)):
        digit = int(char)
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def is_valid_password(password: str, min_length: int) -> tuple[bool, list[str]]:
    """Check password strength.

    Args:
        password: Password to check
        min_length: Minimum number of characters

    Returns:
        Tuple of (is_valid, list of problems)
    """
    problems = []
    if len(password) < min_length:
        problems.append(f"Password must be at least {min_length} characters")

    if not any("A" <= ch <= "Z" for ch in password):
        problems.append("Password must contain at least one uppercase letter")
    if not any("a" <= ch <= "z" for ch in password):
        problems.append("Password must contain at least one lowercase letter")
    if not any("0" <= ch <= "9" for ch in password):
        problems.append("Password must contain at least one digit")
    if not any(ch in _PASSWORD_SPECIALS for ch in password):
        problems.append("Password must contain at least one special character")

    return len(problems) == 0, problems


def is_valid_domain(domain: str) -> bool:
    if len(domain) > 253:
        return False

    labels = domain.split(".")
    if len(labels) < 2:
        return False

    for label in labels:
        if not label or len(label) > 63:
            return False
        if label.startswith("-") or label.endswith("-"):
            return False
        if not all(ch.isascii() and (ch.isalnum() or ch == "-") for ch in label):
            return False
    return True


def is_valid_hex_color(color: str) -> bool:
    """Check for a ``#rrggbb`` color code."""
    return re.fullmatch(r"#[0-9a-fA-F]{6}", color) is not None


def is_valid_json(text: str) -> bool:
    """Check that text is a JSON object or array."""
    try:
        parsed = json.loads(text)
    except (ValueError, TypeError):
        return False
    return isinstance(parsed, (dict, list))


def is_valid_isbn(isbn: str) -> bool:
    """Check an ISBN-10 or ISBN-13 checksum. Hyphens and spaces are ignored."""
    isbn = isbn.replace("-", "").replace(" ", "")
    if len(isbn) == 10:
        return _is_valid_isbn10(isbn)
    if len(isbn) == 13:
        return _is_valid_isbn13(isbn)
    return False


def _is_valid_isbn10(isbn: str) -> bool:
    if not re.fullmatch(r"[0-9]{9}", isbn[:9]):
        return False
    total = sum(int(ch) * (10 - i) for i, ch in enumerate(isbn[:9]))

    last = isbn[9]
    if last in ("X", "x"):
        total += 10
    elif "0" <= last <= "9":
        total += int(last)
    else:
        return False
    return total % 11 == 0


def _is_valid_isbn13(isbn: str) -> bool:
    if not re.fullmatch(r"[0-9]{13}", isbn):
        return False
    total = sum(int(ch) * (1 if i % 2 == 0 else 3) for i, ch in enumerate(isbn[:12]))
    check_digit = (10 - total % 10) % 10
    return int(isbn[12]) == check_digit
