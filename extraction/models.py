"""
COVID-19 Russia Monitor - Record Models

The Candidate Record produced by one extraction, and its JSON form.

The JSON shape is shared by every store (raw feed, OUTPUT, LATEST and the
history dataset):

    {
        "sourceUrl": "...",
        "lastUpdatedAtApify": "2021-02-01T10:35:12.345Z",
        "readMe": "...",
        "sourceTitle": "...",
        "lastUpdatedAtSource": "2021-02-01T10:30:00.000Z",   # optional
        "testedCasesTotal": "1234",                          # optional
        "infectedTotal": "567",                              # optional
        "recoveredTotal": "89",                              # optional
        "deathsTotal": "0"
    }

Counts stay decimal strings so very large totals never lose precision.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional


def format_timestamp(value: datetime) -> str:
    """
    Render an instant as ISO-8601 UTC with millisecond precision.

    Naive datetimes are taken to be UTC already.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 string written by format_timestamp (or any offset form).

    Raises:
        ValueError: If the string is not a valid ISO-8601 timestamp
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass(frozen=True)
class CandidateRecord:
    """
    Structured statistics extracted from one fetch of the status page.

    source_url and fetched_at come from the run, everything else from the
    page. Optional counts are None when no rule matched; deaths_total is
    never None.
    """

    source_url: str
    fetched_at: datetime
    source_title: Optional[str] = None
    read_me: Optional[str] = None
    source_timestamp: Optional[datetime] = None
    tested_cases_total: Optional[str] = None
    infected_total: Optional[str] = None
    recovered_total: Optional[str] = None
    deaths_total: str = "0"

    def to_output(self) -> dict[str, Any]:
        """Serialize to the stored JSON shape, omitting absent fields."""
        output: dict[str, Any] = {
            "sourceUrl": self.source_url,
            "lastUpdatedAtApify": format_timestamp(self.fetched_at),
            "readMe": self.read_me,
            "sourceTitle": self.source_title,
        }
        if self.source_timestamp is not None:
            output["lastUpdatedAtSource"] = format_timestamp(self.source_timestamp)
        if self.tested_cases_total is not None:
            output["testedCasesTotal"] = self.tested_cases_total
        if self.infected_total is not None:
            output["infectedTotal"] = self.infected_total
        if self.recovered_total is not None:
            output["recoveredTotal"] = self.recovered_total
        output["deathsTotal"] = self.deaths_total
        return output

    @classmethod
    def from_output(cls, data: dict[str, Any]) -> "CandidateRecord":
        """
        Rebuild a record from its stored JSON shape.

        Raises:
            KeyError: If sourceUrl or lastUpdatedAtApify is missing
            ValueError: If a timestamp cannot be parsed
        """
        source_timestamp = data.get("lastUpdatedAtSource")
        return cls(
            source_url=data["sourceUrl"],
            fetched_at=parse_timestamp(data["lastUpdatedAtApify"]),
            source_title=data.get("sourceTitle"),
            read_me=data.get("readMe"),
            source_timestamp=(
                parse_timestamp(source_timestamp) if source_timestamp else None
            ),
            tested_cases_total=_as_count(data.get("testedCasesTotal")),
            infected_total=_as_count(data.get("infectedTotal")),
            recovered_total=_as_count(data.get("recoveredTotal")),
            deaths_total=_as_count(data.get("deathsTotal")) or "0",
        )


def _as_count(value: Any) -> Optional[str]:
    # Older rows may hold numbers instead of strings
    if value is None:
        return None
    return str(value)


__all__ = [
    "CandidateRecord",
    "format_timestamp",
    "parse_timestamp",
]
