"""Stage 1: Catalog - List the published records to report on"""

from typing import List

import structlog

from catalog.client import CatalogClient
from core.interfaces import Stage
from core.models import CatalogResult, RecordInfo
from core.exceptions import StageError, FetchError
from stages.s0_terms import TermDirectory
from utils.naming import sheet_name

logger = structlog.get_logger(__name__)


class CatalogIndexer(Stage[TermDirectory, CatalogResult]):
    """Stage 1: Fetch the record index and name each record after its government"""

    @property
    def name(self) -> str:
        return "Record Catalog"

    @property
    def stage_number(self) -> int:
        return 1

    def __init__(self, client: CatalogClient):
        self.client = client

    def validate_input(self, input_data: TermDirectory) -> bool:
        return isinstance(input_data, TermDirectory)

    async def execute(self, input_data: TermDirectory) -> CatalogResult:
        try:
            docs = await self.client.fetch_index()
        except FetchError as e:
            raise StageError(self.stage_number, f"Failed to load record index: {e}") from e

        records = self.build_records(docs, input_data)
        logger.info("records found", count=len(records))
        return CatalogResult(records=records)

    def build_records(self, docs: list, terms: TermDirectory) -> List[RecordInfo]:
        """Build RecordInfo entries ordered by sheet name (case-insensitive)"""
        records = []
        for doc in docs:
            identifier = doc.get("identifier_s") if isinstance(doc, dict) else None
            government = doc.get("government_s") if isinstance(doc, dict) else None

            if not identifier or not government:
                logger.warning("index entry skipped", entry=repr(doc)[:200])
                continue

            records.append(RecordInfo(
                identifier=identifier,
                government=government,
                name=sheet_name(terms.title_for(government), fallback=government),
            ))

        records.sort(key=lambda r: r.name.lower())
        return records
