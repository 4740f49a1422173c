"""Core data models for the reporting pipeline"""

from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from .enums import DiagnosticKind, RecordStatus


# Value written to a single spreadsheet cell
Scalar = Union[int, float, str, datetime, date]

# Flattened record: path -> scalar
ValueMap = dict[str, Scalar]


# ─────────────────────────────────────────────────────────────
# Stage 0: Terms
# ─────────────────────────────────────────────────────────────

class Term(BaseModel):
    """Resolved display label for a coded value"""
    model_config = ConfigDict(frozen=True)

    identifier: str
    title: str


# ─────────────────────────────────────────────────────────────
# Stage 1: Catalog
# ─────────────────────────────────────────────────────────────

class RecordInfo(BaseModel):
    """Index entry for one published record"""
    identifier: str
    government: str
    name: str


class CatalogResult(BaseModel):
    """Complete Stage 1 output"""
    records: list[RecordInfo] = []


# ─────────────────────────────────────────────────────────────
# Stage 2: Template
# ─────────────────────────────────────────────────────────────

class Binding(BaseModel):
    """Placeholder found in a template cell"""
    model_config = ConfigDict(frozen=True)

    row: int
    col: int
    path: str
    condition: Optional[str] = None


class TemplateBindings(BaseModel):
    """Complete Stage 2 output"""
    sheet_name: str
    bindings: list[Binding] = []
    cells_scanned: int = 0


# ─────────────────────────────────────────────────────────────
# Stage 3: Normalization
# ─────────────────────────────────────────────────────────────

class Diagnostic(BaseModel):
    """Data-quality warning attached to a record"""
    kind: DiagnosticKind
    message: str
    path: Optional[str] = None


# ─────────────────────────────────────────────────────────────
# Stages 5-6: Population and output
# ─────────────────────────────────────────────────────────────

class SheetResult(BaseModel):
    """Outcome for one record"""
    record_identifier: str
    sheet_name: str
    status: RecordStatus
    values_mapped: int = 0
    bindings_written: int = 0
    diagnostics: list[Diagnostic] = []
    error: Optional[str] = None


class OutputResult(BaseModel):
    """Complete Stage 6 output"""
    output_path: str
    paths_file_path: Optional[str] = None
    results: list[SheetResult] = []

    def count(self, status: RecordStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def created(self) -> int:
        return self.count(RecordStatus.CREATED)

    @property
    def skipped(self) -> int:
        return self.count(RecordStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self.count(RecordStatus.FAILED)
