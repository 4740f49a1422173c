"""HTTP client for the document catalog API with retry support"""

import asyncio
from typing import Any, Optional

import httpx
import structlog

from core.exceptions import FetchError
from config import settings
from utils.dates import decode_dates

logger = structlog.get_logger(__name__)


class CatalogClient:
    """Async client for the index, documents and thesaurus endpoints"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        parse_dates: Optional[bool] = None,
    ):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT
        self.max_retries = max(1, max_retries if max_retries is not None else settings.HTTP_MAX_RETRIES)
        self.retry_delay = retry_delay if retry_delay is not None else settings.HTTP_RETRY_DELAY
        self.parse_dates = parse_dates if parse_dates is not None else settings.PARSE_DATES
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "CatalogClient":
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
            headers={"Accept": "application/json"},
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get_json(self, path: str, params: Optional[dict] = None) -> Any:
        """
        GET a JSON resource with exponential backoff

        Args:
            path: Path relative to the API base URL
            params: Query string parameters

        Returns:
            Decoded JSON payload

        Raises:
            FetchError: If the request fails after all retries, or the
                server answers with a client error
        """
        if self._client is None:
            raise FetchError("CatalogClient used outside of 'async with'", url=path)

        url = f"{self.base_url}{path}"
        last_error = None

        for attempt in range(self.max_retries):
            try:
                response = await self._client.get(path, params=params)
                response.raise_for_status()
                return response.json()

            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status < 500:
                    raise FetchError(f"GET {url} failed: HTTP {status}", url=url, status=status) from e
                last_error = e

            except (httpx.RequestError, ValueError) as e:
                # Transport, decoding and redirect failures
                last_error = e

            logger.warning(
                "catalog request failed",
                url=url,
                attempt=attempt + 1,
                max_retries=self.max_retries,
                error=str(last_error),
            )
            if attempt < self.max_retries - 1:
                await asyncio.sleep(self.retry_delay * (2 ** attempt))

        status = None
        if isinstance(last_error, httpx.HTTPStatusError):
            status = last_error.response.status_code
        raise FetchError(
            f"GET {url} failed after {self.max_retries} attempts. Last error: {last_error}",
            url=url,
            status=status,
        )

    async def fetch_index(
        self,
        query: Optional[str] = None,
        fields: Optional[str] = None,
        rows: Optional[int] = None,
    ) -> list[dict]:
        """Fetch the search index documents for published records"""
        payload = await self.get_json("/index", params={
            "q": query or settings.CATALOG_QUERY,
            "fl": fields or settings.CATALOG_FIELDS,
            "rows": rows or settings.CATALOG_ROWS,
        })
        try:
            return list(payload["response"]["docs"])
        except (KeyError, TypeError) as e:
            raise FetchError(f"Unexpected index payload: missing {e}", url=f"{self.base_url}/index") from e

    async def fetch_document(self, identifier: str) -> dict:
        """Fetch one record document"""
        payload = await self.get_json(f"/documents/{identifier}")
        if not isinstance(payload, dict):
            raise FetchError(
                f"Document {identifier} is not a JSON object",
                url=f"{self.base_url}/documents/{identifier}",
            )
        if self.parse_dates:
            payload = decode_dates(payload)
        return payload

    async def fetch_domain_terms(self, domain: str) -> list[dict]:
        """Fetch the raw terms of one thesaurus domain"""
        payload = await self.get_json(f"/thesaurus/domains/{domain}/terms")
        if not isinstance(payload, list):
            raise FetchError(
                f"Terms of domain {domain} are not a JSON array",
                url=f"{self.base_url}/thesaurus/domains/{domain}/terms",
            )
        return payload
