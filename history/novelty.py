"""
COVID-19 Russia Monitor - Novelty Detection

The status page always shows one "current" snapshot with no version marker;
only its byline timestamp changes when the ministry publishes new figures.
A candidate is therefore new exactly when that timestamp differs from the
one stored with the latest record.
"""

from typing import Optional

from extraction.models import CandidateRecord


def is_novel(candidate: CandidateRecord, latest: Optional[CandidateRecord]) -> bool:
    """
    Decide whether a candidate is a new observation.

    - No latest record yet: always novel.
    - Otherwise novel iff the source timestamps differ as instants. A
      timestamp on one side only counts as different; no timestamp on
      either side counts as equal.

    No other field is compared.
    """
    if latest is None:
        return True
    return candidate.source_timestamp != latest.source_timestamp


__all__ = ["is_novel"]
