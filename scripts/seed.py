"""
Seed Script

Creates the tables and inserts sample restaurants and menu items.
Safe to run repeatedly: restaurants that already exist are skipped.
Run from project root: python scripts/seed.py

Version: 1.0.0
"""

import asyncio
import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from ordering_api.core.config import get_settings, setup_logging
from ordering_api.database import create_engine_from_settings, create_session_maker, init_db
from ordering_api.models import MenuItem, Restaurant

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

SAMPLE_RESTAURANTS = [
    {
        "restaurant_name": "Pizza Palace",
        "address": "12 Main St",
        "phone": "555-100-2000",
        "menu_description": "Wood-fired pizza and Italian classics",
        "menus": [
            ("Pizza Margherita", "Tomato, mozzarella, basil", "14.99", "Pizza"),
            ("Pepperoni Pizza", "Spicy pepperoni, mozzarella", "16.99", "Pizza"),
            ("Garlic Bread", "Toasted with garlic butter", "5.99", "Sides"),
            ("Tiramisu", "Coffee-soaked ladyfingers", "7.99", "Dessert"),
        ],
    },
    {
        "restaurant_name": "Green Bowl",
        "address": "88 Park Ave",
        "phone": "555-300-4000",
        "menu_description": "Salads, bowls and fresh juices",
        "menus": [
            ("Caesar Salad", "Romaine, parmesan, croutons", "8.99", "Salad"),
            ("Quinoa Bowl", "Quinoa, avocado, roasted vegetables", "11.50", "Bowls"),
            ("Sparkling Water", None, "3.49", "Drinks"),
        ],
    },
]


async def seed() -> None:
    """Insert sample data."""
    settings = get_settings()
    engine = create_engine_from_settings(settings)
    session_maker = create_session_maker(engine)

    await init_db(engine)

    print("=" * 60)
    print("🌱 SEEDING SAMPLE DATA")
    print("=" * 60)

    async with session_maker() as session:
        for data in SAMPLE_RESTAURANTS:
            existing = await session.execute(
                select(Restaurant).where(Restaurant.restaurant_name == data["restaurant_name"])
            )
            if existing.scalar_one_or_none() is not None:
                print(f"   ⏭️  {data['restaurant_name']} already present")
                continue

            restaurant = Restaurant(
                restaurant_name=data["restaurant_name"],
                address=data["address"],
                phone=data["phone"],
                menu_description=data["menu_description"],
            )
            restaurant.menus = [
                MenuItem(menu_name=name, description=description, price=Decimal(price), category=category)
                for name, description, price, category in data["menus"]
            ]
            session.add(restaurant)
            print(f"   ✅ {data['restaurant_name']} ({len(data['menus'])} menu items)")

        await session.commit()

    await engine.dispose()
    print("=" * 60)


if __name__ == "__main__":
    setup_logging()
    asyncio.run(seed())
