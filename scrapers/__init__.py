"""
COVID-19 Russia Monitor - Scrapers Package

Fetching and page handling for the ministry status page.

Modules:
    base: Abstract base scraper with retries and timeouts
    covid_russia: Ministry of Health COVID-19 page scraper
    runner: One-shot crawl entry point

Usage:
    python -m scrapers.runner
"""

from scrapers.base import BaseScraper, ScrapeResult
from scrapers.covid_russia import CovidRussiaScraper, PageContent

__all__ = [
    "BaseScraper",
    "ScrapeResult",
    "CovidRussiaScraper",
    "PageContent",
]
