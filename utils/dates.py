"""Date decoding for JSON documents"""

import re
from datetime import datetime
from typing import Any

# ISO-8601 date-time with mandatory time part, as produced by the catalog API
_ISO_DATETIME = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d{1,7})?)?(Z|[+-]\d{2}:\d{2})?$"
)


def parse_datetime(text: str) -> Any:
    """Return a datetime for ISO date-time strings, the text otherwise"""
    if not _ISO_DATETIME.match(text):
        return text

    value = text[:-1] + "+00:00" if text.endswith("Z") else text

    # fromisoformat accepts at most microseconds
    if "." in value:
        head, _, tail = value.partition(".")
        digits = re.match(r"\d+", tail).group(0)
        value = f"{head}.{digits[:6].ljust(6, '0')}{tail[len(digits):]}"

    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return text


def decode_dates(node: Any) -> Any:
    """Recursively replace ISO date-time strings with datetimes"""
    if isinstance(node, dict):
        return {key: decode_dates(value) for key, value in node.items()}
    if isinstance(node, list):
        return [decode_dates(item) for item in node]
    if isinstance(node, str):
        return parse_datetime(node)
    return node
