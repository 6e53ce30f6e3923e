from __future__ import annotations

from dataclasses import dataclass

"""Separators value type.

A pair of optional single characters resolved per numeric token, or supplied
as per-direction defaults by the formatter configuration.
"""

__all__ = [
    "Separators",
]


@dataclass(frozen=True)
class Separators:
    """Thousand-grouping and decimal characters of a numeric token.

    ``None`` means the role is not played by any character in the token.
    """
    thousand: str | None = None
    decimal: str | None = None

    @property
    def is_resolved(self) -> bool:
        """True when at least one role could be assigned."""
        return self.thousand is not None or self.decimal is not None
