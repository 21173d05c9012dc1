"""Sample catalog generator with deterministic seeding.

Generates realistic catalog item drafts for development and demo
environments. Uses seeded random for reproducibility; industry and
merchant identifiers are derived from names so repeated runs agree.
"""

import random
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterator
from uuid import UUID, uuid5

from catalogsvc.domain.entities import ItemDraft
from catalogsvc.domain.value_objects import AvailabilityStatus, ComplianceStatus


# ============================================================================
# Constants
# ============================================================================

# Namespace for name-derived identifiers
SAMPLE_NAMESPACE = UUID("6f1c3a52-8d0e-4b7a-9c55-2e4f1d7b9a10")

# Synthetic brand names (fictional companies)
BRANDS = [
    "Acme",
    "Contoso",
    "Northwind",
    "Fabrikam",
    "Tailwind",
    "Globex",
    "Initech",
    "Umbrella",
]

INDUSTRIES = [
    "Technology",
    "Fashion",
    "Home Improvement",
    "Sports & Recreation",
    "Health & Beauty",
    "Publishing",
    "Entertainment",
    "Automotive",
    "Healthcare",
    "Food & Beverage",
    "Education",
    "Finance",
]

CATEGORIES = [
    "Electronics",
    "Clothing",
    "Home & Garden",
    "Sports",
    "Beauty",
    "Books",
    "Toys",
    "Automotive",
    "Health",
    "Food & Beverage",
]

TAGS = [
    "new",
    "sale",
    "trending",
    "popular",
    "limited",
    "exclusive",
    "featured",
    "premium",
    "budget",
    "eco-friendly",
]

# Item name templates by industry
TITLE_TEMPLATES: dict[str, list[str]] = {
    "Technology": [
        "{brand} {adj} Smart Hub",
        "{brand} Wireless {adj} Earbuds",
        "{brand} {adj} Laptop Stand",
    ],
    "Fashion": [
        "{brand} {adj} Denim Jacket",
        "{brand} Cotton {adj} Shirt",
    ],
    "Home Improvement": [
        "{brand} {adj} Drill Set",
        "{brand} {adj} Shelving Kit",
    ],
    "Sports & Recreation": [
        "{brand} {adj} Running Shoes",
        "{brand} {adj} Yoga Mat",
    ],
    "default": [
        "{brand} {adj} Product",
        "{brand} Premium {adj}",
        "{brand} {adj} Essential",
    ],
}

# Adjectives for item names
ADJECTIVES = [
    "Premium", "Elite", "Pro", "Ultra", "Max", "Plus",
    "Classic", "Essential", "Advanced", "Smart", "Dynamic",
    "Flex", "Prime", "Apex", "Core", "Nova", "Titan",
]

# Price range in whole currency units
PRICE_RANGE = (10, 1000)


def industry_id_for(name: str) -> UUID:
    """Get the stable identifier of a sample industry."""
    return uuid5(SAMPLE_NAMESPACE, f"industry:{name}")


def merchant_id_for(index: int) -> UUID:
    """Get the stable identifier of a sample merchant."""
    return uuid5(SAMPLE_NAMESPACE, f"merchant:{index}")


# ============================================================================
# Generator Configuration
# ============================================================================


@dataclass
class GeneratorConfig:
    """Configuration for sample generation.

    Attributes:
        seed: Random seed for reproducibility.
        item_count: Number of items to generate.
        merchant_count: Number of distinct merchants.
    """

    seed: int = 42
    item_count: int = 50
    merchant_count: int = 5

    @classmethod
    def small(cls) -> "GeneratorConfig":
        """Create config for a small catalog (20 items)."""
        return cls(item_count=20, merchant_count=3)

    @classmethod
    def full(cls) -> "GeneratorConfig":
        """Create config for a full catalog (500 items)."""
        return cls(item_count=500, merchant_count=25)


# ============================================================================
# Sample Item Generator
# ============================================================================


class SampleItemGenerator:
    """Generates catalog item drafts with deterministic seeding.

    Example usage:
        generator = SampleItemGenerator(GeneratorConfig.small())
        for draft in generator.generate():
            print(draft.title)
    """

    def __init__(self, config: GeneratorConfig) -> None:
        """Initialize generator with configuration.

        Args:
            config: Generator configuration.
        """
        self.config = config
        self.rng = random.Random(config.seed)

    def _pick_some(self, pool: list[str], low: int, high: int) -> list[str]:
        """Pick between ``low`` and ``high`` distinct values, keeping pool order."""
        count = self.rng.randint(low, high)
        chosen = set(self.rng.sample(pool, count))
        return [value for value in pool if value in chosen]

    def _generate_item(self, index: int) -> ItemDraft:
        """Generate a single draft.

        Args:
            index: Item index.

        Returns:
            Generated ItemDraft.
        """
        industry = self.rng.choice(INDUSTRIES)
        templates = TITLE_TEMPLATES.get(industry, TITLE_TEMPLATES["default"])
        brand = self.rng.choice(BRANDS)
        adj = self.rng.choice(ADJECTIVES)
        title = self.rng.choice(templates).format(brand=brand, adj=adj)

        low, high = PRICE_RANGE
        price = Decimal(self.rng.randint(low, high)) + Decimal("0.99")
        rating = round(self.rng.uniform(1.0, 5.0), 1)

        return ItemDraft(
            title=f"{title} #{index + 1}",
            description=(
                f"{title} from {brand}, part of our {adj.lower()} collection "
                f"for the {industry.lower()} industry."
            ),
            industry_id=industry_id_for(industry),
            industry_name=industry,
            categories=self._pick_some(CATEGORIES, 1, 3),
            tags=self._pick_some(TAGS, 2, 5),
            price=price,
            merchant_id=merchant_id_for(self.rng.randrange(self.config.merchant_count)),
            rating=rating,
            compliance_status=self.rng.choice(list(ComplianceStatus)),
            availability_status=self.rng.choice(list(AvailabilityStatus)),
        )

    def generate(self) -> Iterator[ItemDraft]:
        """Generate all drafts.

        Yields:
            Generated ItemDraft instances.
        """
        for i in range(self.config.item_count):
            yield self._generate_item(i)

    def generate_list(self) -> list[ItemDraft]:
        """Generate all drafts as a list.

        Returns:
            List of generated drafts.
        """
        return list(self.generate())
