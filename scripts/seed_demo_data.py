#!/usr/bin/env python3
"""Seed demo data for local development.

Creates a dedicated demo user with a handful of todos in the configured
database. Re-running the script replaces the demo user's data.

Usage:
    # From project root:
    python scripts/seed_demo_data.py

    # Or against another database:
    DATABASE_URL=sqlite+aiosqlite:///./demo.db python scripts/seed_demo_data.py
"""

import asyncio
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import delete

from todo_api.config import get_settings
from todo_api.database import Database
from todo_api.models import User
from todo_api.services.todos import TodoStore
from todo_api.services.users import UserStore, build_password_context

DEMO_USERNAME = "demo"
DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demopass123"  # noqa: S105

DEMO_TODOS = [
    ("Buy milk", "Two litres, semi-skimmed", True),
    ("Book dentist appointment", None, False),
    ("Renew passport", "Photos are in the desk drawer", False),
    ("Water the plants", None, True),
    ("Plan weekend trip", "Check train times first", False),
]


async def seed_demo_data() -> None:
    """Seed the database with a demo user and representative todos."""
    settings = get_settings()
    database = Database(settings.database_url)
    await database.create_all()

    try:
        async with database.session() as session:
            users = UserStore(session, build_password_context(settings.bcrypt_rounds))

            existing_user = await users.find_by_email(DEMO_EMAIL)
            if existing_user:
                print("Demo data already exists. Clearing and re-seeding...")
                # Todos go with the user via ON DELETE CASCADE.
                await session.execute(delete(User).where(User.id == existing_user.id))
                await session.commit()

            print("Creating demo user...")
            user = await users.create(DEMO_USERNAME, DEMO_EMAIL, DEMO_PASSWORD)

            print("Creating todos...")
            todos = TodoStore(session)
            for title, description, completed in DEMO_TODOS:
                todo = await todos.create(user.id, title, description)
                if completed:
                    await todos.update(todo.id, {"completed": True})

        print("Demo data seeded successfully!")
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
