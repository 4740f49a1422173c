from .resolver import resolve_binding
from .populator import SheetPopulator, SheetJob

__all__ = ["resolve_binding", "SheetPopulator", "SheetJob"]
