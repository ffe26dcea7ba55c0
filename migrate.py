#!/usr/bin/env python3
"""
Database management script.
Creates, drops, resets and seeds the RentHive schema.
"""

import asyncio
import sys
import argparse
import logging

from sqlalchemy import select

from renthive.config import settings
from renthive.database import AsyncSessionLocal, create_tables, drop_tables, close_db_connection
from renthive.models.user import User
from renthive.models.property import Property, PropertyCategory, PropertyStatus

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEMO_EMAIL = "owner@example.com"
DEMO_PASSWORD = "owner123456"

DEMO_LISTINGS = [
    {
        "title": "Sunny 2BR Apartment near the Park",
        "description": "Bright corner unit with balcony and in-unit laundry.",
        "category": PropertyCategory.APARTMENT,
        "price": 2500,
        "bedrooms": 2,
        "bathrooms": 1,
        "area": 950,
        "address": "12 Elm Street",
        "city": "Austin",
        "state": "TX",
        "zip_code": "73301",
        "amenities": ["Balcony", "Laundry"],
        "featured": True,
    },
    {
        "title": "Family House with Garden",
        "description": "Quiet street, large garden and a two-car garage.",
        "category": PropertyCategory.HOUSE,
        "price": 3800,
        "bedrooms": 4,
        "bathrooms": 2,
        "area": 2100,
        "address": "88 Maple Drive",
        "city": "Portland",
        "state": "OR",
        "zip_code": "97201",
        "amenities": ["Garden", "Parking"],
    },
    {
        "title": "Downtown Studio Condo",
        "description": "Walk to everything. Gym and rooftop terrace in the building.",
        "category": PropertyCategory.CONDO,
        "price": 1700,
        "bedrooms": 0,
        "bathrooms": 1,
        "area": 480,
        "address": "5 Market Square",
        "city": "Denver",
        "state": "CO",
        "zip_code": "80202",
        "amenities": ["Gym", "Rooftop"],
    },
]


class MigrationManager:
    """Manages the database schema and demo data."""

    async def create(self) -> None:
        logger.info(f"Creating tables on {settings.database_url.split('@')[-1]}")
        await create_tables()

    async def drop(self) -> None:
        logger.warning("Dropping all tables")
        await drop_tables()

    async def seed_database(self) -> None:
        """Seed the database with a demo owner and a few listings."""
        logger.info("Seeding database with demo data")

        async with AsyncSessionLocal() as session:
            try:
                result = await session.execute(select(User).where(User.email == DEMO_EMAIL))
                if result.scalar_one_or_none():
                    logger.info("Demo owner already exists, skipping seed")
                    return

                owner = User(email=DEMO_EMAIL, full_name="Demo Owner", is_active=True)
                owner.set_password(DEMO_PASSWORD)
                session.add(owner)
                await session.flush()

                for listing in DEMO_LISTINGS:
                    session.add(Property(owner_id=owner.id, status=PropertyStatus.AVAILABLE, **listing))

                await session.commit()

                logger.info("Database seeded successfully")
                logger.info(f"  Email: {DEMO_EMAIL}")
                logger.info(f"  Password: {DEMO_PASSWORD}")
                logger.warning("Please change the demo password outside local development!")
            except Exception as e:
                await session.rollback()
                logger.error(f"Failed to seed database: {e}")
                raise

    async def reset_database(self) -> None:
        """Drop and recreate all tables, then seed."""
        logger.warning("Resetting database - all data will be lost!")

        if not settings.is_development and not settings.is_testing:
            raise RuntimeError("Database reset is only allowed in development or test mode")

        await drop_tables()
        await create_tables()
        await self.seed_database()

        logger.info("Database reset completed")


async def run(command: str, manager: MigrationManager) -> None:
    try:
        if command == "create":
            await manager.create()
        elif command == "drop":
            await manager.drop()
        elif command == "seed":
            await manager.seed_database()
        elif command == "reset":
            await manager.reset_database()
    finally:
        await close_db_connection()


def main():
    """Main CLI interface for database management."""
    parser = argparse.ArgumentParser(description="RentHive database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create", help="Create all tables")
    subparsers.add_parser("drop", help="Drop all tables (development only)")
    subparsers.add_parser("seed", help="Seed database with demo data")

    reset_parser = subparsers.add_parser("reset", help="Reset database (development only)")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    if args.command == "reset" and not args.confirm:
        print("Database reset requires --confirm flag")
        return

    try:
        asyncio.run(run(args.command, MigrationManager()))
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
