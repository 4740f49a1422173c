from .writer import WorkbookWriter, OutputJob
from .path_catalog import PathCatalog

__all__ = ["WorkbookWriter", "OutputJob", "PathCatalog"]
