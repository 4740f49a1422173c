from .flattener import PathFlattener

__all__ = ["PathFlattener"]
