"""
COVID-19 Russia Monitor - Extraction Package

Pure text-to-record logic. Nothing here touches the network or storage.

Modules:
    models: CandidateRecord and its JSON form
    rules: Ordered regex rule chains per statistic
    timestamps: Byline timestamp parsing
    extractor: extract(), combining the above

Usage:
    from extraction import extract, CandidateRecord
"""

from extraction.extractor import extract, extract_fields
from extraction.models import CandidateRecord, format_timestamp, parse_timestamp
from extraction.rules import FIELD_DEFAULTS, FIELD_RULES, FieldRule, apply_rules
from extraction.timestamps import parse_source_timestamp

__all__ = [
    "extract",
    "extract_fields",
    "CandidateRecord",
    "format_timestamp",
    "parse_timestamp",
    "FieldRule",
    "FIELD_RULES",
    "FIELD_DEFAULTS",
    "apply_rules",
    "parse_source_timestamp",
]
