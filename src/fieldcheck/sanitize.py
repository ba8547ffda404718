"""Input clean-up helpers.

These transform values. The validation engine never modifies the data it
checks; run them before validating when normalized input is wanted.
"""

from __future__ import annotations

import re

_TAG = re.compile(r"<[^>]*>?")


def sanitize_string(text: str) -> str:
    """Drop NUL and other control characters (including DEL), then trim."""
    kept = "".join(ch for ch in text if ord(ch) >= 32 and ord(ch) != 127)
    return kept.strip()


def sanitize_html(html: str) -> str:
    """Remove anything between ``<`` and ``>``, keeping the text around it.

    An unterminated ``<`` drops the rest of the input.
    """
    return _TAG.sub("", html).replace(">", "")


def sanitize_email(email: str) -> str:
    """Lowercase, trim and collapse internal whitespace runs to one space."""
    return " ".join(email.lower().split())


def normalize_phone(phone: str) -> str:
    """Keep only ASCII digits and ``+``."""
    return "".join(ch for ch in phone if "0" <= ch <= "9" or ch == "+")
