"""Core abstractions for the reporting pipeline"""

from .models import *
from .enums import *
from .exceptions import *
from .interfaces import *

__all__ = [
    # Models
    "Scalar",
    "ValueMap",
    "Term",
    "RecordInfo",
    "CatalogResult",
    "Binding",
    "TemplateBindings",
    "Diagnostic",
    "SheetResult",
    "OutputResult",
    # Enums
    "NodeKind",
    "DiagnosticKind",
    "RecordStatus",
    # Exceptions
    "ReporterError",
    "PipelineError",
    "StageError",
    "RecordError",
    "UnsupportedTypeError",
    "StructuralShapeError",
    "FetchError",
    "TemplateError",
    # Interfaces
    "Stage",
    "TermLookup",
]
