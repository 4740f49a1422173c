"""Configuration and environment settings"""

from pydantic_settings import BaseSettings
from typing import Optional, List
from pathlib import Path


class Settings(BaseSettings):
    """Application configuration"""

    # Catalog API
    API_BASE_URL: str = "https://api.cbd.int/api/v2013"
    CATALOG_QUERY: str = "schema_s:resourceMobilisation AND _state_s:public AND realm_ss:chm"
    CATALOG_FIELDS: str = "identifier_s,government_s"
    CATALOG_ROWS: int = 2000

    # Thesaurus domains loaded into the term directory (comma-separated, in priority order)
    TERM_DOMAINS: str = (
        "countries,"
        "ISO-4217,"
        "AB782477-9942-4C6B-B9F0-79A82915A069,"
        "1FBEF0A8-EE94-4E6B-8547-8EDFCB1E2301,"
        "33D62DA5-D4A9-48A6-AAE0-3EEAA23D5EB0,"
        "6BDB1F2A-FDD8-4922-BB40-D67C22236581,"
        "A9AB3215-353C-4077-8E8C-AF1BF0A89645"
    )
    COUNTRY_DOMAIN: str = "countries"

    # HTTP
    HTTP_TIMEOUT: float = 60.0  # seconds
    HTTP_MAX_RETRIES: int = 3
    HTTP_RETRY_DELAY: float = 2.0  # seconds
    FETCH_CONCURRENCY: int = 4

    # Documents
    PARSE_DATES: bool = True

    # Template workbook
    TEMPLATE_SHEET_NAME: str = "{{template}}"
    MENU_SHEET_NAME: str = "MENU"
    MENU_NAME_COLUMN: int = 2
    MENU_START_ROW: int = 3
    SHEET_NAME_MAX_LENGTH: int = 30

    # Aggregated source amounts (inclusive year range)
    AMOUNT_FIRST_YEAR: int = 2014
    AMOUNT_LAST_YEAR: int = 2020

    # Output
    OUTPUT_DIR: Optional[str] = None  # Defaults to the template's directory

    # Processing
    FAIL_FAST: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # console | json

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    def get_term_domains(self) -> List[str]:
        """Get thesaurus domain list"""
        return [d.strip() for d in self.TERM_DOMAINS.split(",") if d.strip()]

    def get_amount_fields(self) -> List[str]:
        """Get the names of the aggregated annual amount fields"""
        return [
            f"amount{year}"
            for year in range(self.AMOUNT_FIRST_YEAR, self.AMOUNT_LAST_YEAR + 1)
        ]

    def get_output_path(self, template_path: Path) -> Path:
        """Get output directory path"""
        if self.OUTPUT_DIR:
            path = Path(self.OUTPUT_DIR)
        else:
            path = Path(template_path).resolve().parent
        path.mkdir(parents=True, exist_ok=True)
        return path


settings = Settings()
