"""Stage 0: Terms - Build the term directory from thesaurus domains"""

from typing import List, Optional

import structlog

from catalog.client import CatalogClient
from core.interfaces import Stage
from core.models import Term
from core.exceptions import StageError, FetchError
from config import settings
from .countries import COUNTRY_TITLES
from .directory import TermDirectory

logger = structlog.get_logger(__name__)


class TermLoader(Stage[List[str], TermDirectory]):
    """Stage 0: Load every configured thesaurus domain into a TermDirectory"""

    @property
    def name(self) -> str:
        return "Term Directory"

    @property
    def stage_number(self) -> int:
        return 0

    def __init__(self, client: CatalogClient, country_domain: Optional[str] = None):
        self.client = client
        self.country_domain = country_domain or settings.COUNTRY_DOMAIN

    def validate_input(self, input_data: List[str]) -> bool:
        return isinstance(input_data, list) and all(isinstance(d, str) and d for d in input_data)

    async def execute(self, input_data: List[str]) -> TermDirectory:
        """Fetch the domains in priority order and merge their terms"""
        terms: List[Term] = []
        seen: set[str] = set()

        for domain in input_data:
            try:
                raw_terms = await self.client.fetch_domain_terms(domain)
            except FetchError as e:
                raise StageError(self.stage_number, f"Failed to load terms of '{domain}': {e}") from e

            for term in self.parse_terms(raw_terms, domain):
                if term.identifier in seen:
                    logger.warning(
                        "duplicate term ignored",
                        kind="duplicate_term",
                        identifier=term.identifier,
                        domain=domain,
                    )
                    continue
                seen.add(term.identifier)
                terms.append(term)

        directory = TermDirectory(terms)
        logger.info("terms loaded", domains=len(input_data), terms=len(directory))
        return directory

    def parse_terms(self, raw_terms: list, domain: str) -> List[Term]:
        """Convert thesaurus entries to Terms"""
        parsed = []
        for entry in raw_terms:
            if not isinstance(entry, dict) or not isinstance(entry.get("identifier"), str):
                logger.warning("malformed term skipped", domain=domain, entry=repr(entry)[:200])
                continue

            identifier = entry["identifier"]
            if domain == self.country_domain:
                title = COUNTRY_TITLES.get(identifier, "")
            else:
                title = entry.get("name") or ""

            parsed.append(Term(identifier=identifier, title=str(title)))
        return parsed
