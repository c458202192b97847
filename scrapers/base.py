"""
COVID-19 Russia Monitor - Base Scraper

Abstract base class for page crawlers with common functionality:
HTTP client management, bounded retries, a per-page processing timeout and
a failure callback once retries are exhausted.

Subclasses implement:
    - handle_page(): process one fetched page

Usage:
    from scrapers.base import BaseScraper

    class MyScraper(BaseScraper):
        async def handle_page(self, url: str, html: str) -> None:
            ...

    async with MyScraper(["https://example.com"]) as scraper:
        result = await scraper.scrape()
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

import httpx


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class ScrapeResult:
    """
    Result of a crawl over the configured start URLs.

    Contains page statistics plus error information.
    """

    started_at: datetime
    completed_at: datetime

    # Statistics
    pages_scraped: int = 0
    failed_pages: int = 0
    retried_pages: int = 0

    # Errors and warnings
    failed_urls: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    # Per-subclass output
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_seconds(self) -> float:
        """Calculate scrape duration."""
        return (self.completed_at - self.started_at).total_seconds()

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.pages_scraped + self.failed_pages
        if total == 0:
            return 0.0
        return self.pages_scraped / total

    @property
    def succeeded(self) -> bool:
        """True if every page was processed."""
        return self.failed_pages == 0 and self.pages_scraped > 0


# =============================================================================
# Base Scraper
# =============================================================================

class BaseScraper(ABC):
    """
    Abstract base class for page crawlers.

    Each start URL is processed as one unit: fetch, then handle_page(),
    both under handle_page_timeout_secs. Any exception in the unit
    (transport, timeout, parsing or storage) fails the attempt; the unit is
    re-run from a fresh fetch up to max_request_retries times, after which
    handle_failed_request() is called and the URL is given up for this run.
    """

    def __init__(
        self,
        start_urls: Sequence[str],
        config: Optional[dict[str, Any]] = None,
    ):
        """
        Initialize the scraper.

        Args:
            start_urls: URLs to process, in order
            config: Scraper configuration
        """
        self.start_urls = list(start_urls)
        self.config = config or {}

        self.logger = logging.getLogger(f"scrapers.{type(self).__name__}")

        self.max_request_retries = self.config.get("max_request_retries", 1)
        self.handle_page_timeout_secs = self.config.get("handle_page_timeout_secs", 60)
        self.request_timeout = self.config.get("request_timeout", 30.0)

        self._http_client: Optional[httpx.AsyncClient] = None
        self._transport: Optional[httpx.AsyncBaseTransport] = self.config.get("transport")
        self._default_headers = {
            "User-Agent": self.config.get(
                "user_agent",
                "CovidRussiaMonitor/1.0 (+https://apify.com/krakorj/covid-russia)",
            ),
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "ru-RU,ru;q=0.9,en;q=0.5",
        }

    # -------------------------------------------------------------------------
    # Context Manager
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "BaseScraper":
        """Enter async context, initialize resources."""
        await self._init_http_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context, cleanup resources."""
        await self._cleanup()

    async def _init_http_client(self) -> None:
        """Initialize HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                headers=self._default_headers,
                timeout=httpx.Timeout(self.request_timeout, connect=10.0),
                follow_redirects=True,
                transport=self._transport,
            )
            self.logger.debug("HTTP client initialized")

    async def _cleanup(self) -> None:
        """Cleanup resources."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
            self.logger.debug("HTTP client closed")

    # -------------------------------------------------------------------------
    # Abstract Methods
    # -------------------------------------------------------------------------

    @abstractmethod
    async def handle_page(self, url: str, html: str) -> None:
        """
        Process one fetched page.

        Exceptions raised here fail the attempt and trigger a retry.

        Args:
            url: URL the page was fetched from
            html: Response body
        """
        pass

    async def handle_failed_request(self, url: str, error: BaseException) -> None:
        """
        Called once a URL has failed every attempt.

        The default logs the failure; nothing else happens for the URL.
        """
        self.logger.error(
            f"Request {url} failed {self.max_request_retries + 1} times",
            extra={"url": url, "error": str(error)},
        )

    # -------------------------------------------------------------------------
    # Crawl Loop
    # -------------------------------------------------------------------------

    async def scrape(self) -> ScrapeResult:
        """
        Process every start URL once.

        Returns:
            ScrapeResult with statistics and errors
        """
        started_at = datetime.now(timezone.utc)
        result = ScrapeResult(started_at=started_at, completed_at=started_at)

        for url in self.start_urls:
            if await self._process_request(url, result):
                result.pages_scraped += 1
            else:
                result.failed_pages += 1
                result.failed_urls.append(url)

        result.completed_at = datetime.now(timezone.utc)

        self.logger.info(
            "Crawl finished",
            extra={
                "pages_scraped": result.pages_scraped,
                "failed_pages": result.failed_pages,
                "duration_seconds": result.duration_seconds,
            },
        )
        return result

    async def _process_request(self, url: str, result: ScrapeResult) -> bool:
        """Run the fetch-and-handle unit for one URL with retries."""
        attempts = self.max_request_retries + 1
        last_error: Optional[BaseException] = None

        for attempt in range(attempts):
            if attempt > 0:
                result.retried_pages += 1
                await asyncio.sleep(self.config.get("retry_delay", 2 ** (attempt - 1)))

            self.logger.info(f"Processing {url}...", extra={"attempt": attempt + 1})
            try:
                await asyncio.wait_for(
                    self._fetch_and_handle(url),
                    timeout=self.handle_page_timeout_secs,
                )
                return True

            except asyncio.TimeoutError as e:
                last_error = e
                message = f"Page processing timed out after {self.handle_page_timeout_secs}s"
                self.logger.warning(
                    message,
                    extra={"url": url, "attempt": attempt + 1},
                )
                result.errors.append(f"{url}: {message}")

            except httpx.HTTPStatusError as e:
                last_error = e
                self.logger.warning(
                    f"HTTP error on attempt {attempt + 1}: {e.response.status_code}",
                    extra={"url": url},
                )
                result.errors.append(f"{url}: HTTP {e.response.status_code}")

            except httpx.RequestError as e:
                last_error = e
                self.logger.warning(
                    f"Request error on attempt {attempt + 1}: {e}",
                    extra={"url": url},
                )
                result.errors.append(f"{url}: {e}")

            except Exception as e:
                last_error = e
                self.logger.exception(
                    f"Page handling failed on attempt {attempt + 1}",
                    extra={"url": url},
                )
                result.errors.append(f"{url}: {type(e).__name__}: {e}")

        await self.handle_failed_request(url, last_error)
        return False

    async def _fetch_and_handle(self, url: str) -> None:
        html = await self.fetch_page(url)
        await self.handle_page(url, html)

    # -------------------------------------------------------------------------
    # HTTP Methods
    # -------------------------------------------------------------------------

    async def fetch_page(self, url: str) -> str:
        """
        Fetch a page's HTML content.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response
            httpx.RequestError: On transport failure
        """
        if self._http_client is None:
            await self._init_http_client()

        self.logger.debug(f"Fetching: {url}")
        response = await self._http_client.get(url)
        response.raise_for_status()
        return response.text

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def clean_text(self, text: Optional[str]) -> Optional[str]:
        """
        Collapse whitespace and strip control characters.

        Args:
            text: Raw text

        Returns:
            Cleaned text or None
        """
        if not text:
            return None

        text = re.sub(r"\s+", " ", text)
        text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f]", "", text)

        return text.strip() or None


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "BaseScraper",
    "ScrapeResult",
]
