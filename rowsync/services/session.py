from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from ..excel.grid import GridUnavailableError, Sheet, Workbook, column_letter, column_number
from ..models.config_models import SessionConfig
from ..numeric.formatter import NumericFormatter
from ..table.record_table import RecordTable
from .accessor import ColumnMappingError, SynchronizedCellAccessor

"""Workbook session: spreadsheet rows as records.

Typical flow::

    session = WorkbookSession("ExcelFile.xlsx").open().sheet("DATA").row_start_at(2)
    session.cols({"Updated": "F"})
    session.value("Warehouse", 2)        # header "Warehouse" in column A
    session.value("Quantity", 2, 12)     # write then read back
    session.table(keys=["ProdOrd"])      # RecordTable of the sheet rows
    session.save(with_close=True)

All per-workbook state (active sheet, column maps, tables, separator settings)
lives on the session instance.
"""

__all__ = [
    "ColumnMappingError",
    "WorkbookSession",
]

logger = logging.getLogger(__name__)

_HEADER_NAME = re.compile(r"^[a-zA-Z]")
_WHITESPACE = re.compile(r"\s")


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


class WorkbookSession:
    """Per-workbook context owning the column maps and record tables of its sheets."""

    def __init__(
        self,
        path: Path | str,
        has_headers: bool = True,
        formatter: NumericFormatter | None = None,
        first_data_row: int | None = None,
    ) -> None:
        self.path = Path(path)
        self.has_headers = has_headers
        self.formatter = formatter or NumericFormatter()
        self.first_data_row = first_data_row if first_data_row is not None else (2 if has_headers else 1)
        self._workbook: Workbook | None = None
        self._sheet: Sheet | None = None
        self._active: str | None = None
        self._columns: dict[str, dict[str, str]] = {}  # title -> logical name -> letter
        self._names: dict[str, dict[str, str]] = {}  # title -> letter -> field name
        self._analyzed: set[str] = set()
        self._tables: dict[str, RecordTable] = {}
        self._default_keys: dict[str, tuple[str, ...]] = {}
        self._accessors: dict[str, SynchronizedCellAccessor] = {}

    @classmethod
    def from_config(cls, config: SessionConfig) -> WorkbookSession:
        session = cls(
            config.workbook,
            has_headers=config.has_headers,
            formatter=NumericFormatter(config.formatter),
            first_data_row=config.first_data_row,
        )
        for title, sheet_cfg in config.sheets.items():
            if sheet_cfg.columns:
                session.cols(sheet_cfg.columns, sheet=title)
            if sheet_cfg.keys:
                session._default_keys[title] = tuple(sheet_cfg.keys)
        return session

    # ------------------------------------------------------------ lifecycle
    def open(self) -> WorkbookSession:
        self._workbook = Workbook.open(self.path)
        return self

    def close(self, with_save: bool = False) -> None:
        if with_save:
            self.save()
        if self._workbook is not None:
            self._workbook.close()
        self._workbook = None
        self._sheet = None

    def save(self, with_close: bool = False) -> Path:
        """Write every record table back to its sheet, then persist the workbook."""
        workbook = self._require_workbook()
        active = self._active

        for title, table in self._tables.items():
            self.sheet(title)
            sheet = self._require_sheet()
            names = self._ordered_names(title)

            if self.has_headers:
                # 新規列のヘッダ補完
                for letter, name in names:
                    if _is_empty(sheet.get(letter, 1)):
                        sheet.set(letter, 1, name)

            # テーブルは外部表現 (to_external 済み) を保持しているのでそのまま書き戻す
            for record in table.records():
                row = self.first_data_row + record.position
                for letter, name in names:
                    # テーブルにない列 (テーブル構築後に追加された列等) は grid のまま
                    if table.has_field(name):
                        sheet.set(letter, row, record.values[name])
            logger.debug(f"sheet={title} wrote {len(table)} records back to grid")

        if active is not None:
            self.sheet(active)

        target = workbook.save()
        if with_close:
            self.close()
        return target

    def _require_workbook(self) -> Workbook:
        if self._workbook is None or not self._workbook.is_open:
            raise GridUnavailableError(f"Excel file {self.path} is not open")
        return self._workbook

    def _require_sheet(self) -> Sheet:
        self._require_workbook()
        if self._sheet is None:
            raise GridUnavailableError("no active sheet; call sheet() first")
        return self._sheet

    # ---------------------------------------------------------------- sheets
    @property
    def active_sheet(self) -> str | None:
        return self._active

    @property
    def sheet_titles(self) -> list[str]:
        return self._require_workbook().sheet_titles

    def sheet(self, title: str) -> WorkbookSession:
        """Activate ``title``. UnresolvedSheetError propagates to the caller."""
        sheet = self._require_workbook().sheet(title)
        if title not in self._analyzed:
            self._analyze_columns(title, sheet)
        self._sheet = sheet
        self._active = title
        self._accessors[title] = SynchronizedCellAccessor(
            sheet,
            formatter=self.formatter,
            table=self._tables.get(title),
            first_data_row=self.first_data_row,
            columns=self._columns[title],
            names=self._names[title],
        )
        return self

    def _analyze_columns(self, title: str, sheet: Sheet) -> None:
        generated: dict[str, str] = {}
        for i in range(1, sheet.column_count + 1):
            letter = column_letter(i)
            generated[letter] = letter
            if not self.has_headers:
                continue
            header = sheet.get(letter, 1)
            if isinstance(header, str) and _HEADER_NAME.match(header):
                generated[_WHITESPACE.sub("", header)] = letter

        # 事前定義 (cols / config) を優先
        merged = {**generated, **self._columns.get(title, {})}
        self._columns[title] = merged
        names: dict[str, str] = {}
        for logical, letter in merged.items():
            names[letter] = logical
        self._names[title] = names
        self._analyzed.add(title)
        logger.debug(f"sheet={title} columns={merged}")

    def _ordered_names(self, title: str) -> list[tuple[str, str]]:
        return sorted(self._names[title].items(), key=lambda item: column_number(item[0]))

    @property
    def columns(self) -> dict[str, str]:
        """Logical name -> column letter map of the active sheet."""
        self._require_sheet()
        return dict(self._columns[self._active])

    def field_names(self) -> list[str]:
        """Record field names of the active sheet, in column order."""
        self._require_sheet()
        return [name for _, name in self._ordered_names(self._active)]

    # -------------------------------------------------------------- settings
    def row_start_at(self, start_at: Any) -> WorkbookSession:
        """Set the row where data starts (1-based). Invalid values are ignored."""
        try:
            value = int(start_at)
        except (TypeError, ValueError):
            logger.warning(f"row_start_at ignored invalid value {start_at!r}; keeping {self.first_data_row}")
            return self
        if value < 1:
            logger.warning(f"row_start_at ignored non-positive value {value}; keeping {self.first_data_row}")
            return self
        self.first_data_row = value
        for accessor in self._accessors.values():
            accessor.first_data_row = value
        return self

    def cols(self, mapping: Mapping[str, str], sheet: str | None = None) -> WorkbookSession:
        """Merge a logical name -> column letter mapping into a sheet's column map.

        ``sheet`` defaults to the active sheet; naming a sheet that has not been
        activated yet registers the mapping ahead of header analysis.
        """
        title = sheet if sheet is not None else self._active
        if title is None:
            raise GridUnavailableError("no active sheet; call sheet() first or pass sheet=")

        checked: dict[str, str] = {}
        for name, letter in mapping.items():
            if not isinstance(name, str) or not name.strip():
                raise ColumnMappingError(f"invalid column name {name!r} for column {letter!r}")
            try:
                column_number(str(letter))
            except ValueError as e:
                raise ColumnMappingError(
                    f"can not map column '{name}' to {letter!r}; set a valid column letter with cols()"
                ) from e
            checked[name] = str(letter).upper()

        if title not in self._analyzed:
            self._columns.setdefault(title, {}).update(checked)
            return self
        for name, letter in checked.items():
            self._bind(title, name, letter)
        return self

    def _bind(self, title: str, name: str, letter: str) -> None:
        """Bind ``name`` to ``letter`` on an analyzed sheet.

        A letter carries one field name at a time. When ``name`` moves away from
        another letter, that letter falls back to its own letter as field name.
        A built record table has its fields renamed to match.
        """
        # accessor と同じ dict を共有しているため in-place 更新
        columns = self._columns[title]
        names = self._names[title]
        renames: dict[str, str] = {}

        previous = columns.get(name)
        moved = previous is not None and previous != letter and names.get(previous) == name
        if moved:
            renames[name] = previous
        current = names.get(letter, letter)
        if current != name:
            renames[current] = name

        # 衝突する場合は TableKeyError で中断し、列マップは変更しない
        table = self._tables.get(title)
        if table is not None:
            renames = {old: new for old, new in renames.items() if table.has_field(old)}
            if renames:
                table.rename_fields(renames)
                logger.info(f"sheet={title} table fields renamed: {renames}")

        if moved:
            names[previous] = previous
            columns[previous] = previous
        names[letter] = name
        columns[name] = letter
        columns.setdefault(letter, letter)

    # ---------------------------------------------------------------- values
    def _accessor(self) -> SynchronizedCellAccessor:
        self._require_sheet()
        return self._accessors[self._active]

    def read(self, column: str, row: int) -> Any:
        return self._accessor().read(column, row)

    def write(self, column: str, row: int, value: Any) -> None:
        self._accessor().write(column, row, value)

    def value(self, column: str, row: int | None = None, new_value: Any = None) -> Any:
        """Read a cell, write-then-read it, or list a whole column.

        Without ``row`` the values of ``column`` from the first data row down
        to the last grid row are returned.
        """
        accessor = self._accessor()
        if row is None:
            return accessor.column_values(column)
        if new_value is not None:
            accessor.write(column, row, new_value)
        return accessor.read(column, row)

    # ---------------------------------------------------------------- tables
    def table(self, keys: Iterable[str] | None = None) -> RecordTable:
        """Record table of the active sheet, built from grid rows on first call.

        Later calls return the same table and only re-specify its key fields
        when ``keys`` is given. Values are kept in grid form (trimmed text,
        empty cells as ""); reads through the session convert them to host form.
        """
        accessor = self._accessor()
        title = self._active
        existing = self._tables.get(title)
        if existing is not None:
            if keys is not None:
                existing.set_keys(keys)
            return existing

        sheet = self._require_sheet()
        names = self._ordered_names(title)
        data: list[list[Any]] = []
        for r in range(self.first_data_row, sheet.row_count + 1):
            row: list[Any] = []
            for letter, _ in names:
                value = sheet.get(letter, r)
                if value is None:
                    value = ""
                elif isinstance(value, str):
                    value = value.strip()
                row.append(value)
            data.append(row)

        # 末尾の空行は除外
        while data and all(_is_empty(v) for v in data[-1]):
            data.pop()

        if keys is None:
            keys = self._default_keys.get(title, ())
        table = RecordTable([name for _, name in names], keys, data)
        self._tables[title] = table
        accessor.table = table
        logger.info(f"sheet={title} table built: fields={table.fields} records={len(table)}")
        return table
