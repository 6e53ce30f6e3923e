"""Numeric token handling: classification, separator inference and formatting."""

from .classifier import is_numeric
from .formatter import NumericFormatter
from .separators import resolve_separators

__all__ = [
    "is_numeric",
    "resolve_separators",
    "NumericFormatter",
]
