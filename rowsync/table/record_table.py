from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

import pandas as pd

from ..models.record import Record

"""Key addressable record table backed by a pandas DataFrame.

The DataFrame index holds the stable record identifiers; the row order of the
frame is the positional order. Identifiers are assigned from a counter that
only grows, so an id is never handed out twice even when rows are dropped from
``frame`` out-of-band.
"""

__all__ = [
    "RecordTable",
    "TableKeyError",
]


class TableKeyError(Exception):
    """Raised when key fields reference columns the table does not have, or fields collide."""


def _check_unique(fields: Sequence[str]) -> None:
    duplicated = sorted({f for f in fields if list(fields).count(f) > 1})
    if duplicated:
        raise TableKeyError(f"duplicate fields: {duplicated} (fields={list(fields)})")


class RecordTable:
    """Ordered records with named fields and an optional key subset."""

    def __init__(
        self,
        fields: Sequence[str],
        keys: Iterable[str] = (),
        data: Iterable[Sequence[Any]] | None = None,
    ) -> None:
        fields = list(fields)
        _check_unique(fields)
        rows = [list(r) for r in (data or [])]
        width = len(fields)
        # 行長を列数に合わせる (不足は空文字、超過は切り捨て)
        rows = [(r + [""] * width)[:width] for r in rows]
        self._frame = pd.DataFrame(rows, columns=fields, dtype=object)
        self._next_id = len(rows)
        self._keys: tuple[str, ...] = ()
        self.set_keys(keys)

    # ------------------------------------------------------------------ shape
    @property
    def frame(self) -> pd.DataFrame:
        """Live DataFrame. Mutating it (sort/drop) is allowed between accesses."""
        return self._frame

    @frame.setter
    def frame(self, value: pd.DataFrame) -> None:
        self._frame = value
        if len(value.index):
            self._next_id = max(self._next_id, int(value.index.max()) + 1)

    @property
    def fields(self) -> list[str]:
        return [str(c) for c in self._frame.columns]

    @property
    def keys(self) -> tuple[str, ...]:
        return self._keys

    def __len__(self) -> int:
        return len(self._frame.index)

    def has_field(self, field: str) -> bool:
        return field in self._frame.columns

    # ------------------------------------------------------------------- keys
    def set_keys(self, keys: Iterable[str]) -> RecordTable:
        """Re-specify which fields compose the record key."""
        keys = tuple(keys)
        unknown = [k for k in keys if not self.has_field(k)]
        if unknown:
            raise TableKeyError(f"unknown key fields: {unknown} (fields={self.fields})")
        self._keys = keys
        return self

    def rename_fields(self, mapping: Mapping[str, str]) -> RecordTable:
        """Rename fields in one step; key fields follow their new names.

        Renames are applied simultaneously, so ``{"A": "B", "B": "A"}`` swaps.
        """
        unknown = [f for f in mapping if not self.has_field(f)]
        if unknown:
            raise TableKeyError(f"unknown fields: {unknown} (fields={self.fields})")
        renamed = [mapping.get(f, f) for f in self.fields]
        _check_unique(renamed)
        self._frame = self._frame.rename(columns=dict(mapping))
        self._keys = tuple(mapping.get(k, k) for k in self._keys)
        return self

    def find(self, **key_values: Any) -> Record | None:
        """Return the first record whose key fields equal ``key_values``."""
        non_keys = [k for k in key_values if k not in self._keys]
        if non_keys:
            raise TableKeyError(f"not key fields: {non_keys} (keys={list(self._keys)})")
        mask = pd.Series(True, index=self._frame.index)
        for name, value in key_values.items():
            mask &= self._frame[name] == value
        for position, matched in enumerate(mask.tolist()):
            if matched:
                return self._record_at(position)
        return None

    # ---------------------------------------------------------------- records
    def _record_at(self, position: int) -> Record:
        row = self._frame.iloc[position]
        return Record(position=position, id=int(self._frame.index[position]), values=row.to_dict())

    def records(self) -> Iterator[Record]:
        """Yield records in positional order."""
        for position, (record_id, row) in enumerate(self._frame.iterrows()):
            yield Record(position=position, id=int(record_id), values=row.to_dict())

    def append_blank(self) -> Record:
        """Append one record whose fields are all empty strings."""
        record_id = self._next_id
        self._next_id += 1
        blank = pd.DataFrame([[""] * len(self._frame.columns)], columns=self._frame.columns, index=[record_id], dtype=object)
        self._frame = pd.concat([self._frame, blank]) if len(self._frame.index) else blank
        return self._record_at(len(self._frame.index) - 1)

    def get(self, position: int, field: str) -> Any:
        return self._frame.iat[position, self._frame.columns.get_loc(field)]

    def set(self, position: int, field: str, value: Any) -> None:
        self._frame.iat[position, self._frame.columns.get_loc(field)] = value

    def rows(self) -> list[list[Any]]:
        """Row-major copy of the data, in positional order."""
        return [list(r) for r in self._frame.itertuples(index=False, name=None)]
