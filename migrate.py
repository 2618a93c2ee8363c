#!/usr/bin/env python3
"""
Database management script.
Creates the schema, seeds the initial admin and manages admin accounts.
"""

import asyncio
import sys
import secrets
import argparse
import logging
from typing import Optional

from estate_cms.config import settings
from estate_cms.database import AsyncSessionLocal, create_tables, drop_tables, close_db_connection
from estate_cms.repositories.admin import AdminRepository

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class DatabaseManager:
    """Schema and seed management for the CMS database."""

    async def create_schema(self) -> None:
        logger.info("Creating database tables")
        await create_tables()

    async def create_admin(self, email: str, password: str, name: Optional[str] = None) -> None:
        """
        Create an admin account.

        Raises:
            ValueError: If the email is taken or the credentials are invalid
        """
        async with AsyncSessionLocal() as session:
            repo = AdminRepository(session)
            admin = await repo.create_admin(email, password, name)
            logger.info(f"Admin created: {admin.email} (ID: {admin.id})")

    async def seed_database(self) -> None:
        """Create the initial admin unless it already exists."""
        logger.info("Seeding database with initial data")

        email = settings.seed_admin_email
        async with AsyncSessionLocal() as session:
            repo = AdminRepository(session)
            if await repo.get_by_email(email):
                logger.info("Admin user already exists, skipping seed")
                return

            password = settings.seed_admin_password
            generated = password is None
            if generated:
                password = secrets.token_urlsafe(12)

            await repo.create_admin(email, password, settings.seed_admin_name)

        logger.info("Database seeded successfully")
        logger.info(f"  Email: {email}")
        if generated:
            # Shown once; the database only keeps the hash
            print(f"Generated admin password: {password}")
        logger.warning("Please change the admin password after first login!")

    async def reset_database(self) -> None:
        """Drop and recreate all tables, then seed."""
        logger.warning("Resetting database - all data will be lost!")

        if not settings.is_development and not settings.is_testing:
            raise RuntimeError("Database reset is only allowed in development or test mode")

        await drop_tables()
        await create_tables()
        await self.seed_database()

        logger.info("Database reset completed")


async def run(args: argparse.Namespace) -> None:
    manager = DatabaseManager()
    try:
        if args.command == "create-tables":
            await manager.create_schema()

        elif args.command == "seed":
            await manager.create_schema()
            await manager.seed_database()

        elif args.command == "create-admin":
            await manager.create_admin(args.email, args.password, args.name)

        elif args.command == "reset":
            await manager.reset_database()
    finally:
        await close_db_connection()


def main():
    """Main CLI interface for database management."""
    parser = argparse.ArgumentParser(description="Estate CMS database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create-tables", help="Create all tables")

    subparsers.add_parser("seed", help="Create tables and the initial admin")

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("email", help="Admin email")
    admin_parser.add_argument("password", help="Admin password (at least 8 characters)")
    admin_parser.add_argument("--name", default=None, help="Display name")

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
        asyncio.run(run(args))
    except (ValueError, RuntimeError) as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
