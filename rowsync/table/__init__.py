from .record_table import RecordTable, TableKeyError

__all__ = ["RecordTable", "TableKeyError"]
