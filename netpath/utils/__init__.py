"""Utility helpers shared across netpath."""

from netpath.utils.values import is_number, to_structured

__all__ = [
    "is_number",
    "to_structured",
]
