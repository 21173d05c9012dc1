"""Tests for filter criteria and the predicate builder."""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from catalogsvc.catalog.builder import PredicateBuilder
from catalogsvc.catalog.filters import FilterCriteria
from catalogsvc.catalog.predicates import (
    And,
    ContainsElement,
    Equals,
    MatchAll,
    Or,
    Range,
    TextMatch,
    TextMode,
    all_of,
    any_of,
)
from catalogsvc.domain.entities import CatalogItem
from catalogsvc.domain.value_objects import ComplianceStatus

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def builder() -> PredicateBuilder:
    return PredicateBuilder()


class TestFilterCriteria:
    """Tests for FilterCriteria.is_empty."""

    def test_default_is_empty(self) -> None:
        assert FilterCriteria().is_empty()

    def test_blank_values_count_as_absent(self) -> None:
        """Blank text, wildcard-only text and empty lists add nothing."""
        assert FilterCriteria(title="  ", description="*", categories=[]).is_empty()

    def test_any_value_makes_it_non_empty(self) -> None:
        assert not FilterCriteria(min_rating=0.0).is_empty()


class TestPredicateBuilder:
    """Tests for PredicateBuilder.build."""

    def test_none_and_empty_criteria_match_all(self, builder: PredicateBuilder) -> None:
        """Absent criteria produce the match-all predicate."""
        assert builder.build(None) == MatchAll()
        assert builder.build(FilterCriteria()) == MatchAll()

    def test_wildcard_only_title_is_ignored(self, builder: PredicateBuilder) -> None:
        assert builder.build(FilterCriteria(title="**")) == MatchAll()

    @pytest.mark.parametrize(
        "raw,text,mode",
        [
            ("chair*", "chair", TextMode.PREFIX),
            ("chair", "chair", TextMode.CONTAINS),
            ("*chair", "chair", TextMode.CONTAINS),
            ("*chair*", "chair", TextMode.CONTAINS),
            ("ch*air", "chair", TextMode.CONTAINS),
        ],
    )
    def test_title_wildcard_rules(
        self, builder: PredicateBuilder, raw: str, text: str, mode: TextMode
    ) -> None:
        """A trailing marker alone means prefix, anything else substring."""
        assert builder.build(FilterCriteria(title=raw)) == TextMatch("title", text, mode)

    def test_short_description_uses_prefix(self, builder: PredicateBuilder) -> None:
        """Descriptions up to the threshold switch to prefix matching."""
        assert builder.build(FilterCriteria(description="ad")) == TextMatch(
            "description", "ad", TextMode.PREFIX
        )

    def test_long_description_uses_substring(self, builder: PredicateBuilder) -> None:
        assert builder.build(FilterCriteria(description="desk")) == TextMatch(
            "description", "desk", TextMode.CONTAINS
        )

    def test_threshold_is_configurable(self) -> None:
        """A zero threshold disables the prefix policy."""
        predicate = PredicateBuilder(short_text_threshold=0).build(FilterCriteria(description="ad"))
        assert predicate == TextMatch("description", "ad", TextMode.CONTAINS)

    def test_categories_are_any_of(self, builder: PredicateBuilder) -> None:
        """Several categories become a disjunction of element checks."""
        predicate = builder.build(FilterCriteria(categories=["Office", "Garden"]))
        assert predicate == Or(
            (ContainsElement("categories", "Office"), ContainsElement("categories", "Garden"))
        )

    def test_single_tag_is_a_plain_clause(self, builder: PredicateBuilder) -> None:
        assert builder.build(FilterCriteria(tags=["sale"])) == ContainsElement("tags", "sale")

    def test_price_bounds_are_separate_clauses(self, builder: PredicateBuilder) -> None:
        """Lower and upper bounds each contribute their own range clause."""
        predicate = builder.build(
            FilterCriteria(min_price=Decimal("20"), max_price=Decimal("100"))
        )
        assert predicate == And(
            (Range("price", lower=Decimal("20")), Range("price", upper=Decimal("100")))
        )

    def test_fields_are_and_joined(self, builder: PredicateBuilder) -> None:
        industry = uuid4()
        predicate = builder.build(
            FilterCriteria(
                industry_id=industry,
                compliance_status=ComplianceStatus.COMPLIANT,
                min_rating=4.0,
            )
        )
        assert isinstance(predicate, And)
        assert set(predicate.clauses) == {
            Equals("industry_id", industry),
            Equals("compliance_status", ComplianceStatus.COMPLIANT),
            Range("rating", lower=4.0),
        }


class TestPredicateEvaluation:
    """Tests for in-memory predicate evaluation."""

    @pytest.fixture
    def item(self, make_draft) -> CatalogItem:
        return CatalogItem.create(
            make_draft(title="Oak Chair", categories=["Office", "Home"], price=Decimal("50")),
            now=NOW,
        )

    def test_text_match_ignores_case(self, item: CatalogItem) -> None:
        assert TextMatch("title", "OAK", TextMode.PREFIX).matches(item)
        assert TextMatch("title", "chair", TextMode.CONTAINS).matches(item)
        assert not TextMatch("title", "chair", TextMode.PREFIX).matches(item)

    def test_range_is_inclusive(self, item: CatalogItem) -> None:
        assert Range("price", lower=Decimal("50"), upper=Decimal("50")).matches(item)
        assert not Range("price", lower=Decimal("50.01")).matches(item)

    def test_contains_element_is_exact(self, item: CatalogItem) -> None:
        assert ContainsElement("categories", "Home").matches(item)
        assert not ContainsElement("categories", "Hom").matches(item)

    def test_equals_compares_enum_by_name(self, item: CatalogItem) -> None:
        assert Equals("compliance_status", "COMPLIANT").matches(item)

    def test_built_predicate_filters(self, builder: PredicateBuilder, item: CatalogItem) -> None:
        criteria = FilterCriteria(title="oak*", categories=["Garden", "Home"], max_price=Decimal("60"))
        assert builder.build(criteria).matches(item)
        assert not builder.build(FilterCriteria(max_price=Decimal("49.99"))).matches(item)


class TestCombinators:
    """Tests for all_of and any_of."""

    def test_all_of_drops_match_all(self) -> None:
        clause = Equals("title", "x")
        assert all_of() == MatchAll()
        assert all_of(MatchAll(), clause) == clause

    def test_any_of_requires_a_clause(self) -> None:
        with pytest.raises(ValueError):
            any_of()
