"""Utility modules"""

from .coercion import node_kind, to_cell_value, cell_text
from .paths import key_segment, index_segment, dotted
from .naming import truncate, sheet_name
from .dates import decode_dates, parse_datetime

__all__ = [
    "node_kind",
    "to_cell_value",
    "cell_text",
    "key_segment",
    "index_segment",
    "dotted",
    "truncate",
    "sheet_name",
    "decode_dates",
    "parse_datetime",
]
