"""Stage 2: Template - Discover placeholder bindings"""

from typing import Optional

import structlog

from core.interfaces import Stage
from core.models import TemplateBindings
from ui.progress import ProgressTracker, SilentProgress
from .placeholders import PlaceholderParser
from .workbook import ReportWorkbook

logger = structlog.get_logger(__name__)


class TemplateScanner(Stage[ReportWorkbook, TemplateBindings]):
    """Stage 2: Parse the template sheet's placeholders into bindings"""

    @property
    def name(self) -> str:
        return "Template Scan"

    @property
    def stage_number(self) -> int:
        return 2

    def __init__(self, progress: Optional[ProgressTracker] = None):
        self.parser = PlaceholderParser()
        self.progress = progress or SilentProgress()

    def validate_input(self, input_data: ReportWorkbook) -> bool:
        return isinstance(input_data, ReportWorkbook)

    async def execute(self, input_data: ReportWorkbook) -> TemplateBindings:
        total = input_data.template_size
        scanned = 0

        def grid():
            nonlocal scanned
            for cell in input_data.template_grid():
                scanned += 1
                self.progress.update("Analyzing bindings", scanned, total)
                yield cell

        bindings = self.parser.parse(grid())

        logger.info(
            "template scanned",
            sheet=input_data.template_sheet_name,
            cells=scanned,
            bindings=len(bindings),
        )
        return TemplateBindings(
            sheet_name=input_data.template_sheet_name,
            bindings=bindings,
            cells_scanned=scanned,
        )
