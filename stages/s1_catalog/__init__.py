from .indexer import CatalogIndexer

__all__ = ["CatalogIndexer"]
