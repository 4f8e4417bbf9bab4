#!/usr/bin/env python3
"""
FishSpot catalog seeding

Creates missing tables, the fixed season set and the default fish list.
Safe to run repeatedly.
"""

import sys
import argparse
import asyncio
from pathlib import Path

# project root on sys.path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.constants import DEFAULT_FISH
from app.api.services.catalog import ensure_seasons, get_or_create_fish
from app.core.async_database import get_async_db_manager
from app.core.logger import configure_logging, get_logger

logger = get_logger(__name__)


async def main():
    parser = argparse.ArgumentParser(description="Seed seasons and fish")
    parser.add_argument("--fish", nargs="*", help="extra fish names to add")
    parser.add_argument("--no-create-tables", action="store_true", help="skip CREATE TABLE")
    args = parser.parse_args()

    configure_logging()
    db_manager = get_async_db_manager()
    try:
        if not args.no_create_tables:
            await db_manager.create_all()

        async with db_manager.get_session() as session:
            seasons = await ensure_seasons(session)
            fish = await get_or_create_fish(session, list(DEFAULT_FISH) + (args.fish or []))

        logger.info(f"Catalog ready: {seasons} new seasons, {len(fish)} fish")
        print(f"seasons inserted: {seasons}, fish available: {len(fish)}")
    finally:
        await db_manager.close()


if __name__ == "__main__":
    asyncio.run(main())
