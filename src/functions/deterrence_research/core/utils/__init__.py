"""Utility helpers for research analytics."""

from .formatting import percent, round_half_up
from .json_safe import clean_nan_values, json_dumps_safe

__all__ = ["clean_nan_values", "json_dumps_safe", "percent", "round_half_up"]
