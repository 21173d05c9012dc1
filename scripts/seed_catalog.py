#!/usr/bin/env python3
"""Seed catalog script.

Generates deterministic sample catalog items and stores them in the
configured PostgreSQL database. Seeding is skipped when the catalog
already holds items.

Usage:
    python scripts/seed_catalog.py --mode small
    python scripts/seed_catalog.py --count 50 --seed 7
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalogsvc.catalog.generator import GeneratorConfig
from catalogsvc.catalog.models import CatalogItemRecord  # noqa: F401  (registers table)
from catalogsvc.catalog.repository import SqlAlchemyRecordStore
from catalogsvc.catalog.service import CatalogService
from catalogsvc.infrastructure.database import Base, async_session_factory, engine
from catalogsvc.infrastructure.logging import configure_logging


async def create_tables() -> None:
    """Create database tables if they don't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build generator config from command line arguments."""
    presets = {
        "small": GeneratorConfig.small,
        "default": GeneratorConfig,
        "full": GeneratorConfig.full,
    }
    config = presets[args.mode]()
    if args.count is not None:
        config.item_count = args.count
    config.seed = args.seed
    return config


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the catalog with sample items",
    )
    parser.add_argument(
        "--mode",
        choices=["small", "default", "full"],
        default="default",
        help="Catalog size: small (20), default (50) or full (500 items)",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=None,
        help="Override the number of items to generate",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed (default: 42)",
    )

    args = parser.parse_args()
    configure_logging("INFO")
    config = build_config(args)

    print("=" * 60)
    print("Catalog Seeder")
    print("=" * 60)
    print(f"Items: {config.item_count}")
    print(f"Seed: {config.seed}")
    print()

    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    service = CatalogService(SqlAlchemyRecordStore(async_session_factory))
    try:
        result = await service.initialize_sample_data(config)
    finally:
        await engine.dispose()

    if result["skipped"]:
        print(f"  - Skipped: catalog already holds {result['existing']} items")
    else:
        print(f"  ✓ Created: {result['created']} items")
        if result["failed"]:
            print(f"  ✗ Failed: {result['failed']} items")

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
