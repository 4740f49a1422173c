"""Custom exceptions for the reporter"""

from typing import Iterable, Optional


class ReporterError(Exception):
    """Base exception for all reporter errors"""
    pass


class PipelineError(ReporterError):
    """Error in pipeline execution"""
    def __init__(self, message: str, stage: int = None):
        super().__init__(message)
        self.stage = stage


class StageError(ReporterError):
    """Error in a specific stage"""
    def __init__(self, stage: int, message: str):
        super().__init__(f"Stage {stage}: {message}")
        self.stage = stage
        self.message = message


class RecordError(ReporterError):
    """Error that aborts the processing of a single record"""
    pass


class UnsupportedTypeError(RecordError):
    """A record node has a type that cannot be written to a cell"""
    def __init__(self, type_name: str, path: Optional[str] = None):
        location = f" at '{path}'" if path else ""
        super().__init__(f"Unsupported value type {type_name}{location}")
        self.type_name = type_name
        self.path = path


class StructuralShapeError(RecordError):
    """A container required by normalization is absent"""
    def __init__(self, missing_paths: Iterable[str]):
        self.missing_paths = list(missing_paths)
        super().__init__(
            "Record is missing required containers: " + ", ".join(self.missing_paths)
        )


class FetchError(ReporterError):
    """Catalog request failed"""
    def __init__(self, message: str, url: str = None, status: int = None):
        super().__init__(message)
        self.url = url
        self.status = status


class TemplateError(ReporterError):
    """Template workbook is missing or malformed"""
    def __init__(self, message: str, file_path: str = None):
        super().__init__(message)
        self.file_path = file_path
