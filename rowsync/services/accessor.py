from __future__ import annotations

import logging
from typing import Any

from ..excel.grid import Sheet, column_number
from ..numeric.formatter import NumericFormatter
from ..table.record_table import RecordTable
from .row_index import RowIndex

"""Synchronized cell accessor.

Reads and writes one cell at a time while keeping the grid and the record table
consistent. The grid is always written; the record table is a derived view that
is written too whenever the row has, or can be given, a backing record.

``column`` arguments accept either a logical column name or a column letter;
the static column map resolves one to the other.
"""

__all__ = [
    "ColumnMappingError",
    "SynchronizedCellAccessor",
]

logger = logging.getLogger(__name__)


class ColumnMappingError(Exception):
    """Raised when a column name resolves to no valid column letter."""


class SynchronizedCellAccessor:
    """Cell level read/write for one sheet / record table pairing.

    Holds non-owning references to the sheet and the table; it never opens,
    saves or closes anything.
    """

    def __init__(
        self,
        sheet: Sheet,
        formatter: NumericFormatter | None = None,
        table: RecordTable | None = None,
        first_data_row: int = 2,
        columns: dict[str, str] | None = None,
        names: dict[str, str] | None = None,
    ) -> None:
        self.sheet = sheet
        self.formatter = formatter or NumericFormatter()
        self.table = table
        self.first_data_row = first_data_row
        self.columns: dict[str, str] = columns if columns is not None else {}  # logical name -> letter
        if names is None:
            names = {letter: logical for logical, letter in self.columns.items() if logical != letter}
        self.names: dict[str, str] = names  # letter -> field name
        self.index = RowIndex()

    # ----------------------------------------------------------- column map
    def letter_for(self, column: str) -> str:
        letter = self.columns.get(column, column)
        try:
            # 未登録の名前 ("Qty" 等) を列記号として解釈しない
            if letter != letter.upper():
                raise ValueError(f"{letter} is not an upper case column letter")
            column_number(letter)
        except ValueError as e:
            raise ColumnMappingError(f"unknown column '{column}' on sheet {self.sheet.title}") from e
        return letter

    def name_for(self, column: str) -> str:
        """Field name bound to the column ``column`` resolves to."""
        letter = self.letter_for(column)
        return self.names.get(letter, letter)

    # ---------------------------------------------------------------- index
    def rebuild_index(self) -> RowIndex:
        if self.table is None:
            self.index.clear()
        else:
            self.index.build(self.table.records(), self.first_data_row)
        return self.index

    def _table_field(self, column: str) -> str | None:
        if self.table is None:
            return None
        name = self.name_for(column)
        return name if self.table.has_field(name) else None

    def _grow_to(self, table: RecordTable, row: int) -> None:
        """Append blank records to ``table`` until ``row`` has a backing record."""
        last = self.index.last_position()
        missing = (row - self.first_data_row) - (last if last is not None else -1)
        if missing <= 0:
            return
        for _ in range(missing):
            table.append_blank()
        logger.info(f"sheet={self.sheet.title} appended {missing} blank records to reach row {row}")
        self.rebuild_index()

    # ----------------------------------------------------------- operations
    def read(self, column: str, row: int) -> Any:
        if self.table is not None:
            self.rebuild_index()
        field = self._table_field(column)
        if field is not None and self.index.is_row_indexed(row):
            position = self.index.row_to_position(row)
            return self.formatter.to_host(self.table.get(position, field))
        return self.formatter.to_host(self.sheet.get(self.letter_for(column), row))

    def write(self, column: str, row: int, value: Any) -> None:
        external = self.formatter.to_external(value)
        if self.table is not None:
            self.rebuild_index()
            if not self.index.is_row_indexed(row) and row >= self.first_data_row:
                self._grow_to(self.table, row)
            field = self._table_field(column)
            if field is not None and self.index.is_row_indexed(row):
                self.table.set(self.index.row_to_position(row), field, external)
        self.sheet.set(self.letter_for(column), row, external)

    def column_values(self, column: str) -> list[Any]:
        """Values of ``column`` from the first data row down to the last grid row."""
        return [self.read(column, r) for r in range(self.first_data_row, self.sheet.row_count + 1)]
