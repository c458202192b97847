"""
COVID-19 Russia Monitor - Field Extractor

Turns the article text of the status page into a CandidateRecord.

Usage:
    from extraction.extractor import extract

    record = extract(article_text, url, datetime.now(timezone.utc))
"""

import logging
from datetime import datetime, timezone, tzinfo
from typing import Optional

from extraction.models import CandidateRecord
from extraction.rules import FIELD_DEFAULTS, FIELD_RULES, apply_rules
from extraction.timestamps import parse_source_timestamp


logger = logging.getLogger(__name__)


def extract_fields(raw_text: str) -> dict[str, Optional[str]]:
    """
    Run every field's rule chain over the text.

    Fields are independent: a miss in one never affects another. Misses
    fall back to FIELD_DEFAULTS, or None.
    """
    fields: dict[str, Optional[str]] = {}
    for field_name, rules in FIELD_RULES.items():
        value = apply_rules(rules, raw_text)
        if value is None:
            value = FIELD_DEFAULTS.get(field_name)
            logger.debug(
                "No rule matched field",
                extra={"field": field_name, "fallback": value},
            )
        fields[field_name] = value
    return fields


def extract(
    raw_text: Optional[str],
    source_url: str,
    fetched_at: datetime,
    *,
    source_title: Optional[str] = None,
    read_me: Optional[str] = None,
    source_timezone: tzinfo = timezone.utc,
) -> CandidateRecord:
    """
    Build a CandidateRecord from the page's article text.

    Extraction is best effort and never raises on unexpected text: fields
    that cannot be found are left absent (deaths default to "0"). The result
    depends only on the arguments.

    Args:
        raw_text: Article text from the page
        source_url: URL the text was fetched from
        fetched_at: When this run fetched the page
        source_title: Page title, stored alongside the figures
        read_me: Documentation link stored in the record
        source_timezone: Zone the page's byline is written in

    Returns:
        The extracted CandidateRecord
    """
    text = raw_text or ""

    source_timestamp = parse_source_timestamp(text, tz=source_timezone)
    if source_timestamp is None:
        logger.warning(
            "Source timestamp not found in page text",
            extra={"source_url": source_url},
        )

    fields = extract_fields(text)

    return CandidateRecord(
        source_url=source_url,
        fetched_at=fetched_at,
        source_title=source_title,
        read_me=read_me,
        source_timestamp=source_timestamp,
        **fields,
    )


__all__ = [
    "extract",
    "extract_fields",
]
