from __future__ import annotations

import re
from typing import Any

"""Numeric token classifier.

A token is a numeric candidate when it is a single digit, or two or more
characters drawn from digits and the separator alphabet (``,`` ``.`` and
whitespace) containing at least one digit. Candidates shaped like dotted dates
(``DD.MM.YYYY`` / ``YYYY.MM.DD``) are rejected so they never get normalized
into a number.
"""

__all__ = [
    "SEPARATOR_ALPHABET",
    "is_numeric",
    "is_date_like",
]

# 空白は \s で扱う (NBSP 等も含む)
SEPARATOR_ALPHABET = (",", ".")

_NUMERIC_CANDIDATE = re.compile(r"^(?:\d|(?=.*\d)[\d,.\s]{2,})$")
_DATE_SHAPES = (
    re.compile(r"^\d{2}\.\d{2}\.\d{4}$"),  # DD.MM.YYYY
    re.compile(r"^\d{4}\.\d{2}\.\d{2}$"),  # YYYY.MM.DD
)


def is_date_like(token: str) -> bool:
    stripped = token.strip()
    return any(p.match(stripped) for p in _DATE_SHAPES)


def is_numeric(token: Any) -> bool:
    """Return True when ``token`` is a string denoting a number.

    Never raises; non-string values are simply not numeric tokens.

    >>> is_numeric("1 234,50")
    True
    >>> is_numeric("31.12.2024")
    False
    """
    if not isinstance(token, str):
        return False
    if not _NUMERIC_CANDIDATE.match(token):
        return False
    return not is_date_like(token)
