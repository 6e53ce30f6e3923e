from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Record model.

A Record is one entry of the record table as seen during iteration: its stable
identifier plus its current position (0-based rank in the table ordering).
The position is only valid until the table is reordered.
"""

__all__ = [
    "Record",
]


@dataclass(frozen=True)
class Record:
    """Snapshot of a single record of a RecordTable."""
    position: int  # 0-based rank in the current ordering
    id: int  # stable identifier, never reused
    values: dict[str, Any] = field(default_factory=dict)  # field name -> value

    def __getitem__(self, field_name: str) -> Any:
        return self.values[field_name]

    @property
    def is_blank(self) -> bool:
        """True when every field is empty (None or whitespace only)."""
        for v in self.values.values():
            if v is None:
                continue
            if isinstance(v, str) and v.strip() == "":
                continue
            return False
        return True
