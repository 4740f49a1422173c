"""Placeholder parsing for template cells"""

import re
from typing import Iterable, List, Optional, Tuple

from core.models import Binding

# The whole cell must be one {{...}} expression, surrounding whitespace allowed
PLACEHOLDER = re.compile(r"\s*\{\{(.*?)\}\}\s*")

# {{path=condition}}
CONDITION = re.compile(r"(.+?)=(.+?)")


def parse_placeholder(text: str) -> Optional[Tuple[str, Optional[str]]]:
    """
    Parse one cell's text

    Returns:
        (path, condition) if the text is a placeholder, None otherwise.
        The condition is None for plain {{path}} placeholders.
    """
    match = PLACEHOLDER.fullmatch(text or "")
    if not match:
        return None

    inner = match.group(1)
    conditional = CONDITION.fullmatch(inner)
    if conditional:
        return conditional.group(1), conditional.group(2)
    return inner, None


class PlaceholderParser:
    """Turns a grid of cell texts into bindings"""

    def parse(self, grid: Iterable[Tuple[int, int, str]]) -> List[Binding]:
        bindings = []
        for row, col, text in grid:
            parsed = parse_placeholder(text)
            if parsed is None:
                continue
            path, condition = parsed
            bindings.append(Binding(row=row, col=col, path=path, condition=condition))
        return bindings
