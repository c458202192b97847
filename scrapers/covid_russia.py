"""
COVID-19 Russia Monitor - Ministry of Health Status Page Scraper

Scraper for the Russian Ministry of Health COVID-19 page.
Source: https://www.rosminzdrav.ru/ministry/covid19

The page carries a short announcement whose prose states the number of
tests, registered cases, recoveries and deaths, with a byline giving the
time of the update. Each run extracts those figures and persists them:

    default dataset          every run's record (raw feed)
    default store / OUTPUT   the record from the most recent run
    COVID-19-RUSSIA / LATEST the record from the most recent run
    COVID-19-RUSSIA-HISTORY  one record per distinct byline timestamp
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Any, Callable, Optional

from bs4 import BeautifulSoup

from extraction.extractor import extract
from extraction.models import CandidateRecord
from history.writer import DatasetStorage, HistoryWriter, KeyValueStorage
from scrapers.base import BaseScraper, ScrapeResult


logger = logging.getLogger(__name__)


@dataclass
class PageContent:
    """The two pieces of the page the extractor needs."""

    title: Optional[str]
    article_text: Optional[str]


class CovidRussiaScraper(BaseScraper):
    """
    Scraper for the ministry's COVID-19 status page.

    Stores are injected so the scraper stays independent of the database
    layer: output_store and raw_feed receive every run's record, while
    history_writer owns LATEST and the history dataset.
    """

    DEFAULT_URL = "https://www.rosminzdrav.ru/ministry/covid19"
    DEFAULT_ARTICLE_SELECTOR = "article div.row div.col-md-12 p span"

    def __init__(
        self,
        history_writer: HistoryWriter,
        output_store: KeyValueStorage,
        raw_feed: DatasetStorage,
        source_url: Optional[str] = None,
        config: Optional[dict[str, Any]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        config = config or {}
        super().__init__([source_url or self.DEFAULT_URL], config)

        self.history_writer = history_writer
        self.output_store = output_store
        self.raw_feed = raw_feed

        self.article_selector = config.get("article_selector", self.DEFAULT_ARTICLE_SELECTOR)
        self.read_me = config.get("read_me")
        self.output_key = config.get("output_key", "OUTPUT")
        self.source_timezone: tzinfo = config.get("source_timezone", timezone.utc)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        # Outcome of the last successful page
        self.last_record: Optional[CandidateRecord] = None
        self.last_appended: Optional[bool] = None

    async def scrape(self) -> ScrapeResult:
        result = await super().scrape()
        if self.last_record is not None:
            result.metadata["record"] = self.last_record.to_output()
            result.metadata["history_appended"] = self.last_appended
        return result

    def parse_page(self, html: str) -> PageContent:
        """
        Pull the title and the announcement text out of the page.

        Args:
            html: Page HTML

        Returns:
            PageContent; either part is None when missing
        """
        soup = BeautifulSoup(html, "lxml")

        title = self.clean_text(soup.title.get_text()) if soup.title else None

        article_text = None
        article = soup.select_one(self.article_selector)
        if article is not None:
            article_text = article.get_text()
        else:
            logger.warning(
                "Article block not found",
                extra={"selector": self.article_selector},
            )

        return PageContent(title=title, article_text=article_text)

    async def handle_page(self, url: str, html: str) -> None:
        """Extract the statistics from the page and persist them."""
        page = self.parse_page(html)
        logger.debug("Article text", extra={"text": page.article_text})

        record = extract(
            page.article_text,
            url,
            self._clock(),
            source_title=page.title,
            read_me=self.read_me,
            source_timezone=self.source_timezone,
        )
        output = record.to_output()
        logger.info("Extracted record", extra={"record": output})

        self.raw_feed.push_data(output)
        logger.info(f"Setting {self.output_key}...")
        self.output_store.set_value(self.output_key, output)

        logger.info(f"Setting {self.history_writer.latest_key}...")
        appended = self.history_writer.record(record)

        self.last_record = record
        self.last_appended = appended
        logger.info("Finished", extra={"history_appended": appended})


__all__ = [
    "CovidRussiaScraper",
    "PageContent",
]
