"""Binding resolution against a flattened record"""

from core.models import Binding, Scalar, ValueMap
from utils.coercion import cell_text


def resolve_binding(binding: Binding, values: ValueMap) -> Scalar:
    """
    Compute the value written to a binding's cell

    A missing path gives an empty string. With a condition the result is 1
    when the value's text equals the condition (case-insensitive) and an
    empty string otherwise; the value itself is never written.
    """
    value = values.get(binding.path, "")

    if binding.condition is not None:
        if cell_text(value).casefold() == binding.condition.casefold():
            return 1
        return ""

    return value
