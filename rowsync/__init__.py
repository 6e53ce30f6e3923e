"""rowsync: treat spreadsheet rows as records.

A grid (Excel workbook) stays the durable source of truth while a pandas backed
record table offers key addressable access to the same rows.
"""

__version__ = "0.2.0"
