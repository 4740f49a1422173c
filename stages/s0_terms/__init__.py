from .directory import TermDirectory
from .loader import TermLoader
from .countries import COUNTRY_TITLES

__all__ = ["TermDirectory", "TermLoader", "COUNTRY_TITLES"]
