"""Pipeline stages"""

from .s0_terms import TermLoader, TermDirectory
from .s1_catalog import CatalogIndexer
from .s2_template import TemplateScanner, ReportWorkbook
from .s3_normalization import RecordNormalizer, NormalizedRecord
from .s4_flattening import PathFlattener
from .s5_population import SheetPopulator, SheetJob
from .s6_output import WorkbookWriter, OutputJob, PathCatalog

__all__ = [
    "TermLoader",
    "TermDirectory",
    "CatalogIndexer",
    "TemplateScanner",
    "ReportWorkbook",
    "RecordNormalizer",
    "NormalizedRecord",
    "PathFlattener",
    "SheetPopulator",
    "SheetJob",
    "WorkbookWriter",
    "OutputJob",
    "PathCatalog",
]
