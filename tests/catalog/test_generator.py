"""Tests for the sample catalog generator."""

from datetime import datetime, timezone

import pytest

from catalogsvc.catalog.generator import (
    CATEGORIES,
    INDUSTRIES,
    TAGS,
    GeneratorConfig,
    SampleItemGenerator,
    industry_id_for,
)
from catalogsvc.domain.entities import CatalogItem


class TestGeneratorConfig:
    """Tests for GeneratorConfig."""

    def test_default_config(self) -> None:
        config = GeneratorConfig()
        assert config.item_count == 50
        assert config.seed == 42

    def test_presets(self) -> None:
        """Small and full presets bracket the default."""
        assert GeneratorConfig.small().item_count < GeneratorConfig().item_count
        assert GeneratorConfig.full().item_count > GeneratorConfig().item_count


class TestSampleItemGenerator:
    """Tests for SampleItemGenerator."""

    @pytest.fixture
    def drafts(self):
        return SampleItemGenerator(GeneratorConfig.small()).generate_list()

    def test_generates_requested_count(self, drafts) -> None:
        assert len(drafts) == GeneratorConfig.small().item_count

    def test_deterministic_generation(self) -> None:
        """Same seed produces the same drafts."""
        first = SampleItemGenerator(GeneratorConfig(seed=7, item_count=10)).generate_list()
        second = SampleItemGenerator(GeneratorConfig(seed=7, item_count=10)).generate_list()
        assert first == second

    def test_different_seeds_differ(self) -> None:
        first = SampleItemGenerator(GeneratorConfig(seed=1, item_count=10)).generate_list()
        second = SampleItemGenerator(GeneratorConfig(seed=2, item_count=10)).generate_list()
        assert [d.title for d in first] != [d.title for d in second]

    def test_drafts_are_valid_items(self, drafts) -> None:
        """Every draft passes entity validation."""
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        for draft in drafts:
            CatalogItem.create(draft, now=now)

    def test_values_come_from_sample_pools(self, drafts) -> None:
        for draft in drafts:
            assert draft.industry_name in INDUSTRIES
            assert draft.industry_id == industry_id_for(draft.industry_name)
            assert 1 <= len(draft.categories) <= 3
            assert set(draft.categories) <= set(CATEGORIES)
            assert 2 <= len(draft.tags) <= 5
            assert len(set(draft.tags)) == len(draft.tags)
            assert set(draft.tags) <= set(TAGS)
            assert 10 <= draft.price <= 1001
            assert 1.0 <= draft.rating <= 5.0
