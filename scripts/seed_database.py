#!/usr/bin/env python3
"""
Seed the database with the bundled cybersecurity startup dataset.

USAGE:
    # Create tables (if missing) and insert companies that don't exist yet
    python scripts/seed_database.py

    # Drop every table first, then recreate and seed
    python scripts/seed_database.py --reset
"""

import argparse
import asyncio
import logging

from csintel.archivist import close_db, get_session, init_db, seed_database
from csintel.archivist.database import drop_db

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def main(reset: bool = False):
    try:
        if reset:
            logger.info("Dropping all tables")
            await drop_db()
        await init_db()

        async with get_session() as session:
            counts = await seed_database(session)

        for record_type, count in counts.items():
            logger.info(f"Seeded {count} {record_type.replace('_', ' ')}")
    finally:
        await close_db()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the CS Intelligence database")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables first")
    args = parser.parse_args()
    asyncio.run(main(reset=args.reset))
