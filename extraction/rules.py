"""
COVID-19 Russia Monitor - Field Extraction Rules

Each statistic is pulled out of the article prose by an ordered chain of
FieldRule objects. A rule pairs a regular expression, which must capture the
number in a group named ``value``, with a transform that normalizes the
captured text. The first rule that matches and yields a value wins; later
rules are fallbacks for alternative phrasings.

Adding a new phrasing means appending a rule to the field's chain in
FIELD_RULES. Keywords are Russian word stems and are case-sensitive.
"""

import logging
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, Sequence


logger = logging.getLogger(__name__)


# A number starts with a digit and may carry thousands separators
# ("1 234 567", "1.234.567").
NUMBER = r"(?P<value>\d[\d\s.]*)"

# Same, but allowing a decimal comma for the compact "N тыс." form.
COMPACT_NUMBER = r"(?P<value>\d[\d\s.,]*?)"


# =============================================================================
# Transforms
# =============================================================================

def strip_separators(raw: str) -> Optional[str]:
    """
    Drop whitespace and dot thousands separators: "1 234.567" -> "1234567".

    Returns None when nothing numeric is left.
    """
    digits = re.sub(r"[\s.]", "", raw)
    return digits if digits.isdigit() else None


def thousands_to_integer(raw: str) -> Optional[str]:
    """
    Expand the compact "N тыс." notation: "5" -> "5000", "1,5" -> "1500".

    Whitespace is removed and a decimal comma becomes a point before the
    value is multiplied by 1000. The product is rendered as an integer
    string. Malformed input ("1.2.3") returns None.
    """
    cleaned = re.sub(r"\s", "", raw).replace(",", ".").rstrip(".")
    try:
        value = Decimal(cleaned) * 1000
    except InvalidOperation:
        return None
    if not value.is_finite() or value < 0:
        return None
    return str(int(value))


# =============================================================================
# Rule Chain
# =============================================================================

@dataclass(frozen=True)
class FieldRule:
    """One (pattern, transform) step in a field's extraction chain."""

    name: str
    pattern: re.Pattern
    transform: Callable[[str], Optional[str]] = strip_separators

    def apply(self, text: str) -> Optional[str]:
        """Return the normalized value, or None if this rule does not fire."""
        match = self.pattern.search(text)
        if match is None:
            return None
        return self.transform(match.group("value"))


def apply_rules(rules: Sequence[FieldRule], text: str) -> Optional[str]:
    """
    Evaluate a rule chain in order and return the first value produced.

    Args:
        rules: Ordered rules for one field
        text: Raw page text

    Returns:
        Normalized value, or None when no rule fired
    """
    for rule in rules:
        value = rule.apply(text)
        if value is not None:
            logger.debug("Rule matched", extra={"rule": rule.name, "value": value})
            return value
    return None


def _rule(name: str, pattern: str, transform=strip_separators) -> FieldRule:
    return FieldRule(name, re.compile(pattern, re.DOTALL), transform)


# =============================================================================
# Rules per Field
# =============================================================================

TESTED_CASES_RULES = (
    # "проведено 1.234 тестов в лаборатории". Only the first number after
    # the keyword is considered; a figure written in thousands is left to
    # the next rule.
    _rule(
        "tested_laboratory",
        r"провед\D*?" + NUMBER + r"(?![\d\s.,]*тыс).*?лаборатор",
    ),
    # "проведено 5 тыс. тестов", "проведено более 1,5 тысячи исследований"
    _rule(
        "tested_thousands",
        r"провед\D*?" + COMPACT_NUMBER + r"\s*тыс",
        thousands_to_integer,
    ),
)

INFECTED_RULES = (
    # "зарегистрировано 1 234 случая"
    _rule("infected_registered", r"регистрирова.*?" + NUMBER),
)

RECOVERED_RULES = (
    # "случаев выздоровления: 89"
    _rule("recovered", r"выздоровле.*?" + NUMBER),
)

DEATHS_RULES = (
    # "2 человека умерли", no other digits between the number and the verb
    _rule("deaths", NUMBER + r"\D*?умер"),
)

FIELD_RULES: dict[str, tuple[FieldRule, ...]] = {
    "tested_cases_total": TESTED_CASES_RULES,
    "infected_total": INFECTED_RULES,
    "recovered_total": RECOVERED_RULES,
    "deaths_total": DEATHS_RULES,
}

# A page that mentions no deaths reports zero deaths; the other fields
# stay absent when missing.
FIELD_DEFAULTS: dict[str, str] = {
    "deaths_total": "0",
}


__all__ = [
    "FieldRule",
    "apply_rules",
    "strip_separators",
    "thousands_to_integer",
    "FIELD_RULES",
    "FIELD_DEFAULTS",
    "TESTED_CASES_RULES",
    "INFECTED_RULES",
    "RECOVERED_RULES",
    "DEATHS_RULES",
]
