"""Predicate builder.

Translates sparse FilterCriteria into a single predicate tree. Every
populated field contributes one clause, clauses are AND-joined, and
multi-value fields contribute an OR of element checks.

Text rules (case-insensitive):
    - ``"chair*"`` (trailing marker, no leading one) -> prefix match on ``chair``.
    - anything else -> substring match with every ``*`` stripped.

Short descriptions: when the stripped description text is no longer than
``short_text_threshold`` characters, a prefix match is used even in
substring mode. This bounds result fan-out for tiny inputs and is a
performance policy, not a correctness rule: a short substring that is
not a prefix will not match.
"""

from collections.abc import Sequence

import structlog

from catalogsvc.catalog.filters import FilterCriteria
from catalogsvc.catalog.predicates import (
    ContainsElement,
    Equals,
    MatchAll,
    Predicate,
    Range,
    TextMatch,
    TextMode,
    all_of,
    any_of,
)

logger = structlog.get_logger()

WILDCARD = "*"
DEFAULT_SHORT_TEXT_THRESHOLD = 3


class PredicateBuilder:
    """Builds predicates from filter criteria.

    Example usage:
        builder = PredicateBuilder()
        predicate = builder.build(FilterCriteria(title="desk*", max_price=Decimal("200")))
    """

    def __init__(self, short_text_threshold: int = DEFAULT_SHORT_TEXT_THRESHOLD) -> None:
        """Initialize builder.

        Args:
            short_text_threshold: Description inputs up to this length use
                prefix matching.
        """
        self.short_text_threshold = short_text_threshold

    def build(self, criteria: FilterCriteria | None) -> Predicate:
        """Build the predicate for a set of criteria.

        Args:
            criteria: Filter criteria, possibly None or fully empty.

        Returns:
            MatchAll for empty criteria, otherwise the AND of all clauses.
        """
        if criteria is None:
            return MatchAll()

        clauses: list[Predicate | None] = [
            self._text_clause("title", criteria.title),
            self._description_clause(criteria.description),
            self._equals_clause("industry_id", criteria.industry_id),
            self._text_clause("industry_name", criteria.industry_name),
            self._any_element_clause("categories", criteria.categories),
            self._any_element_clause("tags", criteria.tags),
            self._range_clause("price", lower=criteria.min_price),
            self._range_clause("price", upper=criteria.max_price),
            self._equals_clause("merchant_id", criteria.merchant_id),
            self._range_clause("rating", lower=criteria.min_rating),
            self._range_clause("rating", upper=criteria.max_rating),
            self._equals_clause("compliance_status", criteria.compliance_status),
            self._equals_clause("availability_status", criteria.availability_status),
        ]
        predicate = all_of(*(c for c in clauses if c is not None))

        logger.debug("Built filter predicate", predicate=repr(predicate))
        return predicate

    def _text_clause(self, field: str, text: str | None) -> TextMatch | None:
        """Prefix or substring clause for a text field."""
        if text is None:
            return None
        if text.endswith(WILDCARD) and not text.startswith(WILDCARD):
            stripped = text.rstrip(WILDCARD).replace(WILDCARD, "")
            mode = TextMode.PREFIX
        else:
            stripped = text.replace(WILDCARD, "")
            mode = TextMode.CONTAINS
        if not stripped.strip():
            return None
        return TextMatch(field, stripped, mode)

    def _description_clause(self, text: str | None) -> TextMatch | None:
        """Text clause with the short-input prefix policy applied."""
        clause = self._text_clause("description", text)
        if clause is not None and len(clause.text) <= self.short_text_threshold:
            return TextMatch(clause.field, clause.text, TextMode.PREFIX)
        return clause

    @staticmethod
    def _equals_clause(field: str, value: object) -> Equals | None:
        if value is None:
            return None
        return Equals(field, value)

    @staticmethod
    def _range_clause(field: str, lower: object = None, upper: object = None) -> Range | None:
        if lower is None and upper is None:
            return None
        return Range(field, lower=lower, upper=upper)

    @staticmethod
    def _any_element_clause(field: str, values: Sequence[str] | None) -> Predicate | None:
        if not values:
            return None
        return any_of(*(ContainsElement(field, v) for v in values))
