from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for rowsync.

These are the typed form of ``config/rowsync.yml`` once the loader in
``rowsync.config.loader`` has validated it against the JSON schema.
"""


@dataclass(frozen=True)
class SeparatorConfig:
    """Default separators for one conversion direction."""
    decimal: str | None
    thousand: str | None


def _default_input() -> SeparatorConfig:
    return SeparatorConfig(decimal=".", thousand=",")


def _default_output() -> SeparatorConfig:
    return SeparatorConfig(decimal=",", thousand=" ")


@dataclass(frozen=True)
class FormatterConfig:
    """Per-direction separator defaults used by NumericFormatter.

    ``input`` applies when reading values from the grid into the host,
    ``output`` describes the grid's preferred formatting. Only ``input`` is
    consulted when resolution of a token is inconclusive (both directions).
    """
    input: SeparatorConfig = field(default_factory=_default_input)
    output: SeparatorConfig = field(default_factory=_default_output)


@dataclass(frozen=True)
class SheetConfig:
    """Static column map and key fields for one sheet."""
    title: str
    columns: dict[str, str] = field(default_factory=dict)  # logical name -> column letter
    keys: tuple[str, ...] = ()


@dataclass(frozen=True)
class SessionConfig:
    """Root configuration object for a workbook session."""
    workbook: str  # path to the .xlsx file
    has_headers: bool = True
    first_data_row: int | None = None  # None -> 2 with headers, 1 without
    formatter: FormatterConfig = field(default_factory=FormatterConfig)
    sheets: dict[str, SheetConfig] = field(default_factory=dict)  # title -> config
