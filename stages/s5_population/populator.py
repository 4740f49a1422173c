"""Stage 5: Population - Write a record's values into a copy of the template"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

import structlog
from openpyxl.worksheet.worksheet import Worksheet

from core.interfaces import Stage
from core.models import Diagnostic, RecordInfo, Scalar, SheetResult, TemplateBindings, ValueMap
from core.enums import RecordStatus
from core.exceptions import StageError, TemplateError
from stages.s2_template import ReportWorkbook
from ui.progress import ProgressTracker, SilentProgress
from .resolver import resolve_binding

logger = structlog.get_logger(__name__)


@dataclass
class SheetJob:
    """Everything needed to produce one record's sheet"""
    record: RecordInfo
    values: ValueMap
    workbook: ReportWorkbook
    bindings: TemplateBindings
    diagnostics: List[Diagnostic] = field(default_factory=list)


class SheetPopulator(Stage[SheetJob, SheetResult]):
    """Stage 5: Create the record's sheet, fill its placeholders, list it in the menu"""

    @property
    def name(self) -> str:
        return "Sheet Population"

    @property
    def stage_number(self) -> int:
        return 5

    def __init__(self, progress: Optional[ProgressTracker] = None):
        self.progress = progress or SilentProgress()

    def validate_input(self, input_data: SheetJob) -> bool:
        return isinstance(input_data, SheetJob) and bool(input_data.record.name)

    async def execute(self, input_data: SheetJob) -> SheetResult:
        record = input_data.record

        if input_data.workbook.has_sheet(record.name):
            logger.info("sheet already exists", sheet=record.name)
            return SheetResult(
                record_identifier=record.identifier,
                sheet_name=record.name,
                status=RecordStatus.SKIPPED,
                error="Sheet already exists",
            )

        try:
            sheet = input_data.workbook.add_report_sheet(record.name)
        except (TemplateError, ValueError) as e:
            raise StageError(self.stage_number, f"Cannot create sheet '{record.name}': {e}") from e

        input_data.workbook.append_menu_entry(record.name)
        written = self.populate(sheet, input_data.values, input_data.bindings)

        return SheetResult(
            record_identifier=record.identifier,
            sheet_name=record.name,
            status=RecordStatus.CREATED,
            values_mapped=len(input_data.values),
            bindings_written=written,
            diagnostics=input_data.diagnostics,
        )

    def populate(self, sheet: Worksheet, values: ValueMap, bindings: TemplateBindings) -> int:
        """Write every binding's resolved value; returns the number of cells written"""
        total = len(bindings.bindings)

        for i, binding in enumerate(bindings.bindings, 1):
            self.progress.update(f"Populating {sheet.title}", i, total)
            sheet.cell(row=binding.row, column=binding.col).value = self.to_sheet_value(
                resolve_binding(binding, values)
            )

        return total

    @staticmethod
    def to_sheet_value(value: Scalar):
        """Adapt a resolved value to what a worksheet cell can store"""
        if isinstance(value, str) and value == "":
            return None
        # Cells cannot hold time zones
        if isinstance(value, datetime) and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
