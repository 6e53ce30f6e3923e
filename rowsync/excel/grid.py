from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import openpyxl
from openpyxl.utils import column_index_from_string, get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

"""Grid collaborator: cell addressed access to an .xlsx workbook.

Cells are addressed by (column letter, 1-based row number). The workbook is
opened and saved here; the accessor and session never own it beyond holding a
reference.
"""

__all__ = [
    "GridUnavailableError",
    "UnresolvedSheetError",
    "Sheet",
    "Workbook",
    "column_letter",
    "column_number",
]

logger = logging.getLogger(__name__)


class GridUnavailableError(Exception):
    """Raised when the workbook is missing, closed or has no active sheet."""


class UnresolvedSheetError(Exception):
    """Raised when a sheet title cannot be found in the workbook."""

    def __init__(self, title: str, path: Path | str | None = None) -> None:
        self.title = title
        self.path = path
        where = f" in Excel file {path}" if path else ""
        super().__init__(f"Sheet {title} not found{where}")


def column_letter(number: int) -> str:
    """1 -> 'A', 27 -> 'AA'."""
    return get_column_letter(number)


def column_number(letter: str) -> int:
    """'A' -> 1. Raises ValueError for anything that is not a column letter."""
    return column_index_from_string(letter.upper())


class Sheet:
    """Handle on one worksheet."""

    def __init__(self, worksheet: Worksheet) -> None:
        self._ws = worksheet

    @property
    def title(self) -> str:
        return self._ws.title

    @property
    def row_count(self) -> int:
        return self._ws.max_row

    @property
    def column_count(self) -> int:
        return self._ws.max_column

    def get(self, column: str, row: int) -> Any:
        col = column_number(column)
        # openpyxl はアクセスしただけでセルを生成するので範囲外は読まない
        if row > self._ws.max_row or col > self._ws.max_column:
            return None
        return self._ws.cell(row=row, column=col).value

    def set(self, column: str, row: int, value: Any) -> None:
        # cell(value=None) では消去されないため代入する
        self._ws.cell(row=row, column=column_number(column)).value = value


class Workbook:
    """Handle on an .xlsx workbook loaded with openpyxl."""

    def __init__(self, book: openpyxl.Workbook, path: Path | None = None) -> None:
        self._book: openpyxl.Workbook | None = book
        self.path = path

    @classmethod
    def open(cls, path: Path | str) -> Workbook:
        path = Path(path)
        if not path.exists():
            raise GridUnavailableError(f"Excel data file not found: {path}")
        logger.debug(f"opening workbook {path}")
        return cls(openpyxl.load_workbook(path), path)

    @property
    def is_open(self) -> bool:
        return self._book is not None

    def _require_book(self) -> openpyxl.Workbook:
        if self._book is None:
            raise GridUnavailableError(f"workbook {self.path} is closed")
        return self._book

    @property
    def sheet_titles(self) -> list[str]:
        return list(self._require_book().sheetnames)

    def sheet(self, title: str) -> Sheet:
        book = self._require_book()
        if title not in book.sheetnames:
            raise UnresolvedSheetError(title, self.path)
        return Sheet(book[title])

    def save(self, path: Path | str | None = None) -> Path:
        book = self._require_book()
        target = Path(path) if path is not None else self.path
        if target is None:
            raise GridUnavailableError("no path to save workbook to")
        book.save(target)
        logger.debug(f"saved workbook {target}")
        return target

    def close(self) -> None:
        self._book = None
