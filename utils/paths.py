"""Path formatting for flattened record values"""

import re

# Keys containing any of these are written in bracket notation
_SPECIAL_CHARS = re.compile(r"[.'\"\[\]()/\\\s]")


def key_segment(parent: str, key: str) -> str:
    """
    Append an object key to a path

    Plain keys are joined with a dot (``a.b``); keys with special
    characters are quoted (``a['x y']``).
    """
    key = str(key)
    if not key or _SPECIAL_CHARS.search(key):
        escaped = key.replace("\\", "\\\\").replace("'", "\\'")
        return f"{parent}['{escaped}']"
    if not parent:
        return key
    return f"{parent}.{key}"


def index_segment(parent: str, index: int) -> str:
    """Append an array index to a path (``a[0]``)"""
    return f"{parent}[{index}]"


def dotted(*keys: str) -> str:
    """Build a path from plain object keys"""
    path = ""
    for key in keys:
        path = key_segment(path, key)
    return path
