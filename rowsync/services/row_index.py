from __future__ import annotations

import logging
from collections.abc import Iterable

from ..models.record import Record

"""Bidirectional index between grid rows and record table entries.

The index is rebuilt from scratch before every indexed access: the record
table can be sorted, grown or trimmed by other code between two accessor calls,
and there are no mutation notifications to patch the maps incrementally.

After ``build(records, first_data_row=F)`` the record at position ``p`` backs
row ``F + p``. Rows before ``F`` are never indexed.
"""

__all__ = [
    "RowIndex",
]

logger = logging.getLogger(__name__)


class RowIndex:
    def __init__(self) -> None:
        self._row_to_id: dict[int, int] = {}
        self._id_to_row: dict[int, int] = {}
        self._id_to_position: dict[int, int] = {}
        self.max_id: int | None = None  # highest record identifier seen
        self._max_position: int | None = None

    def clear(self) -> None:
        self._row_to_id = {}
        self._id_to_row = {}
        self._id_to_position = {}
        self.max_id = None
        self._max_position = None

    def build(self, records: Iterable[Record], first_data_row: int) -> RowIndex:
        """Replace all mappings from ``records`` (iterated in positional order)."""
        self.clear()
        row = first_data_row
        for position, record in enumerate(records):
            self._row_to_id[row] = record.id
            self._id_to_row[record.id] = row
            self._id_to_position[record.id] = position
            if self.max_id is None or record.id > self.max_id:
                self.max_id = record.id
            if self._max_position is None or position > self._max_position:
                self._max_position = position
            row += 1
        logger.debug(
            f"row index rebuilt: first_data_row={first_data_row} records={len(self._row_to_id)} "
            f"last_position={self._max_position} max_id={self.max_id}"
        )
        return self

    def __len__(self) -> int:
        return len(self._row_to_id)

    def row_to_id(self, row: int) -> int | None:
        return self._row_to_id.get(row)

    def id_to_row(self, record_id: int) -> int | None:
        return self._id_to_row.get(record_id)

    def id_to_position(self, record_id: int) -> int | None:
        return self._id_to_position.get(record_id)

    def row_to_position(self, row: int) -> int | None:
        record_id = self._row_to_id.get(row)
        if record_id is None:
            return None
        return self._id_to_position[record_id]

    def is_row_indexed(self, row: int) -> bool:
        return row in self._row_to_id

    def last_position(self) -> int | None:
        """Highest position seen in the last build, None for an empty table."""
        return self._max_position
