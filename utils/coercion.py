"""Scalar coercion of record tree nodes into cell values"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from core.enums import NodeKind
from core.exceptions import UnsupportedTypeError
from core.models import Scalar


def node_kind(value: Any, path: Optional[str] = None) -> NodeKind:
    """
    Classify a record tree node

    Args:
        value: Node taken from a decoded JSON document
        path: Location of the node, used in the error message

    Returns:
        The node kind

    Raises:
        UnsupportedTypeError: If the node is not a JSON-like value
    """
    if isinstance(value, dict):
        return NodeKind.OBJECT
    if isinstance(value, (list, tuple)):
        return NodeKind.ARRAY
    # bool is a subclass of int
    if isinstance(value, bool):
        return NodeKind.BOOLEAN
    if isinstance(value, int):
        return NodeKind.INTEGER
    if isinstance(value, (float, Decimal)):
        return NodeKind.FLOAT
    if isinstance(value, str):
        return NodeKind.STRING
    if value is None:
        return NodeKind.NULL
    if isinstance(value, (datetime, date)):
        return NodeKind.DATE
    raise UnsupportedTypeError(type(value).__name__, path)


def to_cell_value(value: Any, path: Optional[str] = None) -> Scalar:
    """
    Convert a record tree node into the single scalar written to a cell

    Containers collapse to a count (arrays) or a presence flag (objects),
    null becomes an empty string and booleans become 1/0.
    """
    kind = node_kind(value, path)

    if kind == NodeKind.OBJECT:
        return 1
    if kind == NodeKind.ARRAY:
        return len(value)
    if kind == NodeKind.BOOLEAN:
        return 1 if value else 0
    if kind == NodeKind.NULL:
        return ""
    if kind == NodeKind.FLOAT:
        return float(value)
    # INTEGER, STRING, DATE
    return value


def cell_text(value: Any) -> str:
    """Render a cell value as text for condition matching"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, Decimal):
        value = float(value)
    if isinstance(value, float):
        # 15.0 -> "15"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)
