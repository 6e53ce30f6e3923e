from __future__ import annotations

import logging
from typing import Any

from ..models.config_models import FormatterConfig
from ..models.separators import Separators
from .classifier import is_numeric
from .separators import resolve_separators

"""Numeric formatter between grid values and host values.

``to_host`` turns numeric grid text into a float with '.' as the only decimal
marker. ``to_external`` prepares a host value for the grid.

Conversions are not symmetric:

- ``to_external`` strips the grouping character of numeric text but keeps the
  decimal marker as found; it does not rewrite it to ``output_decimal``.
- both directions fall back to the *input* defaults when a token's separators
  cannot be resolved.

So ``to_host(to_external(x))`` is not guaranteed to give ``x`` back for text
values written with a different convention than the input defaults.
"""

__all__ = [
    "NumericFormatter",
]

logger = logging.getLogger(__name__)


class NumericFormatter:
    """Convert values between grid representation and host representation.

    Separator defaults are per direction and independently settable::

        fmt = NumericFormatter()
        fmt.input_decimal = ","
        fmt.input_thousand = "."
    """

    def __init__(self, config: FormatterConfig | None = None) -> None:
        config = config or FormatterConfig()
        self.input_decimal: str | None = config.input.decimal
        self.input_thousand: str | None = config.input.thousand
        self.output_decimal: str | None = config.output.decimal
        self.output_thousand: str | None = config.output.thousand

    @property
    def input_defaults(self) -> Separators:
        return Separators(thousand=self.input_thousand, decimal=self.input_decimal)

    @property
    def output_defaults(self) -> Separators:
        return Separators(thousand=self.output_thousand, decimal=self.output_decimal)

    def separators_for(self, token: str) -> Separators:
        """Resolve separators of ``token``, falling back to the input defaults."""
        resolved = resolve_separators(token)
        if resolved.is_resolved:
            return resolved
        logger.debug(f"separators unresolved for {token!r} -> input defaults")
        return self.input_defaults

    def to_host(self, external: Any) -> Any:
        """Convert a grid value to its host form.

        Numeric text becomes a float; everything else passes through unchanged,
        including numeric-looking text that still fails to parse.
        """
        if not isinstance(external, str) or not is_numeric(external):
            return external

        token = external.strip()
        seps = self.separators_for(token)
        normalized = token
        if seps.thousand:
            normalized = normalized.replace(seps.thousand, "")
        if seps.decimal and seps.decimal != ".":
            normalized = normalized.replace(seps.decimal, ".")
        try:
            return float(normalized)
        except ValueError:
            logger.debug(f"numeric token {external!r} not parseable as {normalized!r}; kept as text")
            return external

    def to_external(self, host: Any) -> Any:
        """Convert a host value to the form written into the grid.

        Numeric text loses its grouping character, the decimal marker is kept
        as is. Other values are returned as text; ``None`` stays ``None`` so the
        target cell is cleared.
        """
        if host is None:
            return None
        if not isinstance(host, str):
            return str(host)
        if not is_numeric(host):
            return host

        token = host.strip()
        seps = self.separators_for(token)
        if seps.thousand:
            token = token.replace(seps.thousand, "")
        return token
