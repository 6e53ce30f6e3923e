"""Value types shared across rowsync.

Configuration dataclasses, resolved separators and table records.
"""

from .config_models import FormatterConfig, SeparatorConfig, SessionConfig, SheetConfig
from .record import Record
from .separators import Separators

__all__ = [
    # Configuration models
    "FormatterConfig",
    "SeparatorConfig",
    "SessionConfig",
    "SheetConfig",
    # Value models
    "Record",
    "Separators",
]
