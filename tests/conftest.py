# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
from typing import Any

import openpyxl
import pytest


class FakeSheet:
    """Dict backed stand-in for rowsync.excel.grid.Sheet."""

    def __init__(self, title: str = "DATA", cells: dict[tuple[str, int], Any] | None = None):
        self.title = title
        self.cells: dict[tuple[str, int], Any] = dict(cells or {})

    @property
    def row_count(self) -> int:
        return max((r for _, r in self.cells), default=0)

    @property
    def column_count(self) -> int:
        return len({c for c, _ in self.cells})

    def get(self, column: str, row: int) -> Any:
        return self.cells.get((column, row))

    def set(self, column: str, row: int, value: Any) -> None:
        self.cells[(column, row)] = value


def make_workbook(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    """Create an .xlsx file; each sheet is a list of rows starting at row 1."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for title, rows in sheets.items():
        ws = wb.create_sheet(title)
        for row in rows:
            ws.append(row)
    wb.save(path)
    return path


PROD_ORDERS = [
    ["Warehouse", "Material", "Prod Ord", "Description", "Quantity"],
    ["SA1", "K00289", "20001467", "Bolt M8", "6"],
    ["SA2", "K00300", "20001468", "Nut M8", "1 234,50"],
]


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def fake_sheet() -> FakeSheet:
    return FakeSheet()


@pytest.fixture()
def orders_xlsx(temp_workdir: Path) -> Path:
    return make_workbook(
        temp_workdir / "data" / "orders.xlsx",
        {"DATA": [list(r) for r in PROD_ORDERS], "Notes": [["Note"], ["keep me"]]},
    )


@pytest.fixture()
def sample_config_yaml(orders_xlsx: Path) -> str:
    return f"""workbook: {orders_xlsx.as_posix()}
has_headers: true
first_data_row: 2
separators:
  input:
    decimal: "."
    thousand: ","
  output:
    decimal: ","
    thousand: " "
sheets:
  DATA:
    columns:
      Updated: F
    keys: [ProdOrd]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "rowsync.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def workbook_factory():
    return make_workbook


@pytest.fixture()
def sheet_factory():
    return FakeSheet
