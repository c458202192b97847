"""
COVID-19 Russia Monitor - Crawl Runner

Wires settings, stores and the scraper together and processes the status
page once. There is no scheduling here; run it from cron or a job runner.

Usage:
    # As a module
    python -m scrapers.runner

    # Programmatically
    from scrapers.runner import run_crawl
    with get_session() as session:
        result = await run_crawl(session, get_settings())
"""

import asyncio
import logging
import sys
import uuid
from datetime import datetime
from typing import Callable, Optional

import httpx
from sqlalchemy.orm import Session

from config.logging import LogContext
from config.settings import Settings, get_settings
from database.connection import get_session
from database.repository import open_dataset, open_key_value_store
from history.writer import HistoryWriter
from scrapers.base import ScrapeResult
from scrapers.covid_russia import CovidRussiaScraper
from startup import initialize_application, shutdown_application


logger = logging.getLogger(__name__)


def build_scraper(
    session: Session,
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> CovidRussiaScraper:
    """
    Create a scraper bound to the configured stores.

    Args:
        session: Database session for the stores
        settings: Application settings
        transport: Optional httpx transport (tests)
        clock: Optional source of the fetch time (tests)
    """
    history_writer = HistoryWriter(
        latest_store=open_key_value_store(session, settings.kv_store_name),
        history=open_dataset(session, settings.history_dataset_name),
        latest_key=settings.latest_key,
    )

    config = {
        "user_agent": settings.user_agent,
        "request_timeout": float(settings.scrape_timeout_seconds),
        "max_request_retries": settings.max_request_retries,
        "handle_page_timeout_secs": settings.handle_page_timeout_secs,
        "article_selector": settings.article_selector,
        "read_me": settings.read_me_url,
        "output_key": settings.output_key,
        "source_timezone": settings.source_tzinfo,
    }
    if transport is not None:
        config["transport"] = transport

    return CovidRussiaScraper(
        history_writer=history_writer,
        output_store=open_key_value_store(session, settings.default_store_name),
        raw_feed=open_dataset(session, settings.default_store_name),
        source_url=settings.source_url,
        config=config,
        clock=clock,
    )


async def run_crawl(
    session: Session,
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> ScrapeResult:
    """
    Process the status page once.

    Returns:
        ScrapeResult; metadata holds the record and whether history grew
    """
    scraper = build_scraper(session, settings, transport=transport, clock=clock)
    async with scraper:
        return await scraper.scrape()


# =============================================================================
# Main Entry Point
# =============================================================================

async def main() -> int:
    """
    Run one crawl.

    Returns:
        Exit code (0 when the page was processed)
    """
    startup = initialize_application()
    if not startup.success:
        return 1

    settings = get_settings()
    try:
        with LogContext(run_id=uuid.uuid4().hex[:12]):
            with get_session() as session:
                result = await run_crawl(session, settings)

            logger.info(
                "Crawler finished.",
                extra={
                    "succeeded": result.succeeded,
                    "history_appended": result.metadata.get("history_appended"),
                    "errors": len(result.errors),
                },
            )
    finally:
        shutdown_application()

    return 0 if result.succeeded else 1


def cli() -> None:
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Crawl interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    cli()
