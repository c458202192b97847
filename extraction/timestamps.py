"""
COVID-19 Russia Monitor - Source Timestamp Parsing

The ministry page states when its figures were last updated in a byline
such as "01.02.2021 в 10:30". parse_source_timestamp() turns the first such
fragment into an aware UTC datetime.
"""

import logging
import re
from datetime import datetime, timezone, tzinfo
from typing import Optional


logger = logging.getLogger(__name__)


# Day and month first, then the time anywhere later on the same line. The
# year must have four digits, and a date glued to a longer digit run is skipped.
SOURCE_TIMESTAMP_PATTERN = re.compile(
    r"(?<![\d.])(?P<day>\d{1,2})\.(?P<month>\d{1,2})\.(?P<year>\d{4})"
    r".*?(?P<hour>\d{1,2}):(?P<minute>\d{2})"
)


def parse_source_timestamp(
    text: Optional[str],
    tz: tzinfo = timezone.utc,
) -> Optional[datetime]:
    """
    Parse the "DD.MM.YYYY ... HH:MM" byline embedded in page text.

    The matched fields are read as wall-clock time in ``tz`` and the result
    is converted to UTC. Seconds are always zero.

    Args:
        text: Page text that may contain the byline
        tz: Zone the byline is written in (UTC unless configured otherwise)

    Returns:
        Aware UTC datetime, or None if no valid fragment is found
    """
    if not text:
        return None

    match = SOURCE_TIMESTAMP_PATTERN.search(text)
    if match is None:
        logger.debug("No source timestamp fragment found")
        return None

    try:
        local = datetime(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
            int(match.group("hour")),
            int(match.group("minute")),
            0,
            tzinfo=tz,
        )
    except ValueError as e:
        logger.warning(
            "Source timestamp fragment out of range",
            extra={"fragment": match.group(0), "error": str(e)},
        )
        return None

    return local.astimezone(timezone.utc)


__all__ = [
    "SOURCE_TIMESTAMP_PATTERN",
    "parse_source_timestamp",
]
