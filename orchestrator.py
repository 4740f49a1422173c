"""Pipeline orchestrator"""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import structlog

from catalog.client import CatalogClient
from core.models import CatalogResult, OutputResult, RecordInfo, SheetResult, TemplateBindings
from core.enums import RecordStatus
from core.exceptions import FetchError, PipelineError, RecordError, StageError
from stages import (
    TermLoader, TermDirectory, CatalogIndexer, TemplateScanner, ReportWorkbook,
    RecordNormalizer, PathFlattener, SheetPopulator, SheetJob,
    WorkbookWriter, OutputJob, PathCatalog,
)
from ui.progress import ProgressTracker
from config import settings

logger = structlog.get_logger(__name__)


@dataclass
class PipelineContext:
    """Shared context passed through pipeline"""
    template_path: str
    workbook: Optional[ReportWorkbook] = None
    terms: Optional[TermDirectory] = None
    catalog: Optional[CatalogResult] = None
    bindings: Optional[TemplateBindings] = None
    results: List[SheetResult] = field(default_factory=list)
    output: Optional[OutputResult] = None


class Orchestrator:
    """Pipeline coordinator"""

    def __init__(
        self,
        progress: ProgressTracker,
        client: Optional[CatalogClient] = None,
        output_dir: Optional[Path] = None,
        paths_file: Optional[Path] = None,
        fail_fast: Optional[bool] = None,
    ):
        self.progress = progress
        self.client = client or CatalogClient()
        self.output_dir = Path(output_dir) if output_dir else None
        self.paths_file = Path(paths_file) if paths_file else None
        self.fail_fast = settings.FAIL_FAST if fail_fast is None else fail_fast
        self.path_catalog = PathCatalog() if self.paths_file else None

        # Stage 3 needs the term directory and is created after stage 0
        self.stages = {
            0: TermLoader(self.client),
            1: CatalogIndexer(self.client),
            2: TemplateScanner(progress),
            4: PathFlattener(),
            5: SheetPopulator(progress),
            6: WorkbookWriter(),
        }

    async def run(self, template_path: str) -> PipelineContext:
        """Execute full pipeline"""
        ctx = PipelineContext(template_path=str(template_path))

        # Fail on a bad template before touching the network
        ctx.workbook = ReportWorkbook.open(template_path)

        try:
            async with self.client:
                # Stage 0: Terms
                ctx.terms = await self._execute_stage(0, settings.get_term_domains())
                self.stages[3] = RecordNormalizer(ctx.terms)

                # Stage 1: Catalog
                ctx.catalog = await self._execute_stage(1, ctx.terms)

                # Stage 2: Template
                ctx.bindings = await self._execute_stage(2, ctx.workbook)

                # Stages 3-5: one sheet per record
                ctx.results = await self._records_path(ctx)

            # Stage 6: Output
            ctx.output = await self._execute_stage(6, OutputJob(
                workbook=ctx.workbook,
                results=ctx.results,
                output_dir=self.output_dir,
            ))

            if self.path_catalog is not None:
                ctx.output.paths_file_path = str(self.path_catalog.write_csv(self.paths_file))
                logger.info("path catalogue written", path=ctx.output.paths_file_path, paths=len(self.path_catalog))

            self.progress.complete()
            return ctx

        except StageError as e:
            self.progress.fail(e.stage, str(e))
            raise PipelineError(f"Pipeline failed at stage {e.stage}: {e}", stage=e.stage) from e

    async def _records_path(self, ctx: PipelineContext) -> List[SheetResult]:
        """Fetch, normalize, flatten and write every catalog record"""
        results: List[SheetResult] = []
        pending: List[RecordInfo] = []

        for record in ctx.catalog.records:
            if ctx.workbook.has_sheet(record.name):
                logger.info("sheet already exists", sheet=record.name)
                results.append(self._skipped(record))
            else:
                pending.append(record)

        self.progress.start_stage(5, self.stages[5].name)
        documents = await self._fetch_documents(pending)

        for i, (record, document) in enumerate(zip(pending, documents), 1):
            self.progress.update("Processing records", i, len(pending))
            results.append(await self._process_record(ctx, record, document))

        self.progress.complete_stage(5)

        logger.info(
            "records processed",
            created=sum(1 for r in results if r.status == RecordStatus.CREATED),
            skipped=sum(1 for r in results if r.status == RecordStatus.SKIPPED),
            failed=sum(1 for r in results if r.status == RecordStatus.FAILED),
        )
        return results

    async def _fetch_documents(self, records: List[RecordInfo]) -> List[Any]:
        """Fetch record documents concurrently; failures are returned in place"""
        semaphore = asyncio.Semaphore(max(1, settings.FETCH_CONCURRENCY))

        async def fetch(record: RecordInfo):
            async with semaphore:
                return await self.client.fetch_document(record.identifier)

        return await asyncio.gather(*(fetch(r) for r in records), return_exceptions=True)

    async def _process_record(self, ctx: PipelineContext, record: RecordInfo, document: Any) -> SheetResult:
        with structlog.contextvars.bound_contextvars(record=record.name, identifier=record.identifier):
            try:
                if isinstance(document, BaseException):
                    raise document

                normalized = await self.stages[3].execute(document)
                values = await self.stages[4].execute(normalized)

                if self.path_catalog is not None:
                    self.path_catalog.add(record.name, values)

                return await self.stages[5].execute(SheetJob(
                    record=record,
                    values=values,
                    workbook=ctx.workbook,
                    bindings=ctx.bindings,
                    diagnostics=normalized.diagnostics,
                ))

            except (RecordError, FetchError, StageError) as e:
                if self.fail_fast:
                    raise PipelineError(f"Record '{record.name}' failed: {e}") from e

                logger.error("record failed", error=str(e), error_type=type(e).__name__)
                return SheetResult(
                    record_identifier=record.identifier,
                    sheet_name=record.name,
                    status=RecordStatus.FAILED,
                    error=str(e),
                )

    @staticmethod
    def _skipped(record: RecordInfo) -> SheetResult:
        return SheetResult(
            record_identifier=record.identifier,
            sheet_name=record.name,
            status=RecordStatus.SKIPPED,
            error="Sheet already exists",
        )

    async def _execute_stage(self, stage_num: int, input_data) -> Any:
        """Execute a single stage with progress tracking"""
        stage = self.stages[stage_num]

        self.progress.start_stage(stage_num, stage.name)

        if not stage.validate_input(input_data):
            raise StageError(stage_num, "Invalid input")

        result = await stage.execute(input_data)

        self.progress.complete_stage(stage_num)
        return result
