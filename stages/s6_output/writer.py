"""Stage 6: Output - Finalize and save the report workbook"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import structlog

from core.interfaces import Stage
from core.models import OutputResult, SheetResult
from core.exceptions import StageError, TemplateError
from stages.s2_template import ReportWorkbook

logger = structlog.get_logger(__name__)


@dataclass
class OutputJob:
    """Populated workbook and the per-record outcomes"""
    workbook: ReportWorkbook
    results: List[SheetResult] = field(default_factory=list)
    output_dir: Optional[Path] = None


class WorkbookWriter(Stage[OutputJob, OutputResult]):
    """Stage 6: Move the template last, activate the menu and save"""

    @property
    def name(self) -> str:
        return "Workbook Output"

    @property
    def stage_number(self) -> int:
        return 6

    def validate_input(self, input_data: OutputJob) -> bool:
        return isinstance(input_data, OutputJob)

    async def execute(self, input_data: OutputJob) -> OutputResult:
        """Execute output generation"""
        workbook = input_data.workbook
        workbook.finalize()

        try:
            output_path = workbook.output_path(input_data.output_dir)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            workbook.save(output_path)
        except (OSError, TemplateError) as e:
            raise StageError(self.stage_number, f"Failed to save workbook: {e}") from e

        logger.info("workbook saved", path=str(output_path), sheets=len(workbook.workbook.sheetnames))

        return OutputResult(
            output_path=str(output_path),
            results=input_data.results,
        )
