from __future__ import annotations

import re

from ..models.separators import Separators

"""Separator resolver.

Infers which punctuation character of a numeric token groups thousands and
which one marks decimals. Best effort only: ``"1,234"`` is genuinely ambiguous
and resolves to nothing, leaving the caller to apply its configured defaults.

Rules, for tokens already classified numeric:

- length <= 4: at most one separator fits, it is the decimal one ("1,1").
- two or more distinct separator kinds: the kind found first (lowest index)
  groups thousands, the kind found last (highest index) marks decimals.
- exactly one kind: three or more parts means recurring grouping (thousand);
  with two parts a positional heuristic decides (see ``_resolve_single``).
"""

__all__ = [
    "resolve_separators",
]

_WHITESPACE = re.compile(r"\s")

UNRESOLVED = Separators()


def _first_positions(token: str) -> dict[str, int]:
    """Map each separator character present in ``token`` to its first index."""
    found: dict[str, int] = {}
    for ch in (",", "."):
        idx = token.find(ch)
        if idx >= 0:
            found[ch] = idx
    m = _WHITESPACE.search(token)
    if m:
        found[m.group(0)] = m.start()
    return found


def _resolve_single(token: str, sep: str, index: int) -> Separators:
    parts = token.split(sep)
    if len(parts) >= 3:
        return Separators(thousand=sep)

    length = len(token)
    if 5 <= length <= 7:
        if length == 5 and token.startswith("0"):
            # "0,123"
            return Separators(decimal=sep)
        if index != length - 4:
            return Separators(decimal=sep)
        # "1,234" / "12.345": grouping or decimals, cannot tell
        return UNRESOLVED
    return Separators(decimal=sep)


def resolve_separators(token: str) -> Separators:
    """Infer the separators of a numeric token.

    Returns ``Separators(None, None)`` when no separator is present or the
    token is ambiguous. Never raises.

    >>> resolve_separators("1.234,56")
    Separators(thousand='.', decimal=',')
    """
    positions = _first_positions(token)
    if not positions:
        return UNRESOLVED

    if len(token) <= 4:
        sep = min(positions, key=positions.__getitem__)
        return Separators(decimal=sep)

    if len(positions) >= 2:
        ordered = sorted(positions, key=positions.__getitem__)
        return Separators(thousand=ordered[0], decimal=ordered[-1])

    sep, index = next(iter(positions.items()))
    return _resolve_single(token, sep, index)
