from __future__ import annotations

import pytest

from rowsync.services.accessor import ColumnMappingError, SynchronizedCellAccessor
from rowsync.table.record_table import RecordTable

COLUMNS = {"Name": "A", "Qty": "B"}


@pytest.fixture()
def sheet(sheet_factory):
    return sheet_factory(
        "DATA",
        {
            ("A", 1): "Name", ("B", 1): "Qty",
            ("A", 2): "bolt", ("B", 2): "6",
            ("A", 3): "nut", ("B", 3): "1 234,50",
            ("A", 4): "washer", ("B", 4): "3",
        },
    )


@pytest.fixture()
def table():
    return RecordTable(["Name", "Qty"], (), [["bolt", "6"], ["nut", "1 234,50"], ["washer", "3"]])


@pytest.fixture()
def accessor(sheet, table):
    return SynchronizedCellAccessor(sheet, table=table, first_data_row=2, columns=dict(COLUMNS))


def test_read_indexed_row_from_table(accessor, table):
    table.set(1, "Name", "nut (table)")
    assert accessor.read("Name", 3) == "nut (table)"
    assert accessor.read("Qty", 3) == 1234.5


def test_read_header_row_from_grid(accessor):
    assert accessor.read("Name", 1) == "Name"


def test_read_by_letter_uses_logical_field(accessor, table):
    table.set(0, "Qty", "7")
    assert accessor.read("B", 2) == 7.0
    assert accessor.read("B", 2) == accessor.read("Qty", 2)


def test_read_without_table_reads_grid(sheet):
    accessor = SynchronizedCellAccessor(sheet, columns=dict(COLUMNS))
    assert accessor.read("Qty", 3) == 1234.5
    assert accessor.read("A", 4) == "washer"


def test_consecutive_reads_are_identical(accessor):
    assert accessor.read("Qty", 3) == accessor.read("Qty", 3)


def test_write_indexed_row_updates_table_and_grid(accessor, table, sheet):
    accessor.write("Qty", 3, "2 000,75")
    assert table.get(1, "Qty") == "2000,75"
    assert sheet.get("B", 3) == "2000,75"
    assert accessor.read("Qty", 3) == 2000.75


def test_write_beyond_table_appends_missing_records(accessor, table, sheet):
    accessor.write("Qty", 10, 5)
    # rows 2..4 covered, last_position=2 -> (10-2)-2 = 6 new records
    assert len(table) == 9
    assert accessor.index.last_position() == 8
    assert table.get(8, "Qty") == "5"
    assert table.get(5, "Qty") == ""
    assert sheet.get("B", 10) == "5"


def test_write_covered_row_does_not_append(accessor, table):
    accessor.write("Name", 4, "spring")
    assert len(table) == 3
    assert table.get(2, "Name") == "spring"


def test_write_pre_data_row_is_grid_only(accessor, table, sheet):
    accessor.write("Name", 1, "Item")
    assert sheet.get("A", 1) == "Item"
    assert len(table) == 3
    assert table.rows()[0] == ["bolt", "6"]


def test_write_to_empty_table_grows_from_position_zero(sheet):
    table = RecordTable(["Name", "Qty"])
    accessor = SynchronizedCellAccessor(sheet, table=table, first_data_row=2, columns=dict(COLUMNS))
    accessor.write("Name", 3, "x")
    assert len(table) == 2
    assert table.get(1, "Name") == "x"
    assert accessor.index.last_position() == 1


def test_write_without_table_is_grid_only(sheet):
    accessor = SynchronizedCellAccessor(sheet, columns=dict(COLUMNS))
    accessor.write("Qty", 20, "1,234,567")
    assert sheet.get("B", 20) == "1234567"


def test_write_unmapped_field_goes_to_grid(accessor, table, sheet):
    accessor.write("C", 3, "extra")
    assert sheet.get("C", 3) == "extra"
    assert "C" not in table.fields


def test_index_rebuilt_after_out_of_band_reorder(accessor, table):
    assert accessor.read("Name", 2) == "bolt"
    table.frame = table.frame.iloc[::-1]
    assert accessor.read("Name", 2) == "washer"
    accessor.write("Name", 2, "W")
    assert table.frame.loc[2, "Name"] == "W"


def test_index_rebuilt_after_out_of_band_drop(accessor, table):
    table.frame = table.frame.drop(index=[2])
    accessor.write("Name", 5, "late")
    # rows 2..3 covered after drop -> (5-2)-1 = 2 new records
    assert len(table) == 4
    assert table.get(3, "Name") == "late"


def test_column_values_reads_all_data_rows(accessor):
    assert accessor.column_values("Name") == ["bolt", "nut", "washer"]


def test_unknown_column_name_is_rejected(accessor):
    with pytest.raises(ColumnMappingError):
        accessor.read("Price", 2)
    with pytest.raises(ColumnMappingError):
        accessor.write("Nope", 2, "x")


def test_names_map_is_shared_and_read_live(sheet, table):
    columns = {"Name": "A", "Qty": "B", "A": "A", "B": "B"}
    names = {"A": "Name", "B": "Qty"}
    accessor = SynchronizedCellAccessor(sheet, table=table, first_data_row=2, columns=columns, names=names)
    table.rename_fields({"Qty": "Amount"})
    # 呼び出し側が同じ dict を更新する
    columns["Amount"] = "B"
    names["B"] = "Amount"
    assert accessor.name_for("B") == "Amount"
    assert accessor.name_for("Qty") == "Amount"
    table.set(0, "Amount", "9")
    assert accessor.read("B", 2) == 9.0
    assert accessor.read("Qty", 2) == 9.0


def test_names_derived_from_columns_when_not_given(sheet):
    accessor = SynchronizedCellAccessor(sheet, columns={"Quantity": "B", "Qty": "B"})
    # 同じ列に複数の名前がある場合は最後の名前
    assert accessor.name_for("B") == "Qty"
    assert accessor.name_for("Quantity") == "Qty"
    assert accessor.name_for("C") == "C"
