"""Document catalog API integration"""

from .client import CatalogClient

__all__ = [
    "CatalogClient",
]
