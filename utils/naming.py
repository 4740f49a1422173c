"""Sheet name helpers"""

import re
from typing import Optional

from config import settings

# Characters spreadsheet applications refuse in sheet titles
_INVALID_TITLE_CHARS = re.compile(r"[\\/*?:\[\]]")


def truncate(text: str, length: int) -> str:
    """Cut text to at most `length` characters"""
    return text[:max(length, 0)]


def sheet_name(title: Optional[str], fallback: str = "", max_length: Optional[int] = None) -> str:
    """
    Derive a sheet name from a term title

    Args:
        title: Resolved term title (may be empty)
        fallback: Name used when the title is empty
        max_length: Maximum length, defaults to config

    Returns:
        Sanitized, truncated and trimmed sheet name
    """
    max_length = max_length or settings.SHEET_NAME_MAX_LENGTH

    text = _INVALID_TITLE_CHARS.sub("", title or "").strip()
    if not text:
        text = _INVALID_TITLE_CHARS.sub("", fallback or "").strip()

    return truncate(text, max_length).strip()
